"""Tests for the canned research answers."""
from academic_assistant.qa.predefined_qa import (
    INTEGRATED_KNOWLEDGE_BASE,
    ML_KNOWLEDGE_BASE,
    ML_RESEARCH_QA,
    NUCLEAR_KNOWLEDGE_BASE,
    NUCLEAR_PHYSICS_QA,
    PredefinedAnswerMatcher,
    PredefinedQA,
    word_overlap,
)
from academic_assistant.qa.templates import predefined_annotation


class TestKeywordMatching:
    """Tests for substring key lookup."""

    def test_machine_learning_key(self):
        matcher = PredefinedAnswerMatcher()
        assert matcher.find_answer("What are the types of machine learning?") == ML_RESEARCH_QA[1].answer

    def test_nuclear_key(self):
        matcher = PredefinedAnswerMatcher()
        assert matcher.find_answer("How does fission release energy?") == NUCLEAR_PHYSICS_QA[6].answer

    def test_machine_learning_keys_are_checked_first(self):
        """Test a generic ML key wins over a nuclear topic in the same question."""
        matcher = PredefinedAnswerMatcher()
        assert matcher.find_answer("Give me an overview of nuclear fusion") == ML_RESEARCH_QA[9].answer

    def test_generic_words_are_intercepted(self):
        matcher = PredefinedAnswerMatcher()
        assert matcher.find_answer("What are the limitations of this study?") == ML_RESEARCH_QA[5].answer

    def test_case_and_whitespace_insensitive(self):
        matcher = PredefinedAnswerMatcher()
        assert matcher.find_answer("   CARBON DATING explained  ") == NUCLEAR_PHYSICS_QA[8].answer

    def test_unrelated_question(self):
        assert PredefinedAnswerMatcher().find_answer("How do glaciers form?") is None


class TestSimilarityMatching:
    """Tests for whole-question similarity."""

    def test_exact_question(self):
        matcher = PredefinedAnswerMatcher(
            ml_qa=[PredefinedQA("How do glaciers carve valleys?", "By abrasion.")],
            nuclear_qa=[],
        )
        assert matcher.find_answer("how do glaciers carve valleys?") == "By abrasion."

    def test_threshold_is_inclusive(self):
        matcher = PredefinedAnswerMatcher(
            ml_qa=[PredefinedQA("alpha beta gamma delta epsilon", "Greek.")],
            nuclear_qa=[],
        )
        assert matcher.find_answer("alpha beta gamma delta omega") == "Greek."

    def test_below_threshold(self):
        matcher = PredefinedAnswerMatcher(
            ml_qa=[PredefinedQA("How do glaciers carve valleys?", "By abrasion.")],
            nuclear_qa=[],
        )
        assert matcher.find_answer("how do glaciers move") is None

    def test_word_overlap(self):
        assert word_overlap("one two three", "one two four") == 2 / 3
        assert word_overlap("a b", "one two") == 0.0


class TestKnowledgeBase:
    """Tests for answer attribution."""

    def test_machine_learning_question(self):
        match = PredefinedAnswerMatcher().find("What are the types of machine learning?")
        assert match.knowledge_base == ML_KNOWLEDGE_BASE

    def test_nuclear_question(self):
        match = PredefinedAnswerMatcher().find("How does fission release energy?")
        assert match.knowledge_base == NUCLEAR_KNOWLEDGE_BASE

    def test_mixed_or_neutral_question(self):
        match = PredefinedAnswerMatcher().find("What are the limitations of this study?")
        assert match.knowledge_base == INTEGRATED_KNOWLEDGE_BASE

    def test_annotated_answer(self):
        match = PredefinedAnswerMatcher().find("How does fission release energy?")

        assert match.annotated_answer == match.answer + predefined_annotation("Nuclear Physics knowledge base")
        assert match.source_excerpt == "Predefined answer from integrated nuclear physics knowledge base"

    def test_no_match(self):
        assert PredefinedAnswerMatcher().find("How do glaciers form?") is None
