"""Tests for the question answering pipeline."""
import time
from unittest.mock import MagicMock, patch

import pytest

from academic_assistant.exceptions import EmptyQuestionError
from academic_assistant.models.document import AnswerResult, Source
from academic_assistant.qa import AcademicAssistant, AnswerSynthesizer, OutputValidator, PredefinedAnswerMatcher
from academic_assistant.qa.predefined_qa import INTEGRATED_KNOWLEDGE_BASE
from academic_assistant.qa.templates import FOLLOW_UP_HEADER, FallbackTemplate, NoResultsTemplate
from academic_assistant.qa.validators import QuestionValidator
from academic_assistant.services.document_store import InMemoryDocumentStore
from academic_assistant.services.retrieval_service import RetrievalEngine


def build_assistant(*documents, **kwargs):
    store = InMemoryDocumentStore()
    for document in documents:
        store.save(document)
    engine = RetrievalEngine()
    kwargs.setdefault("predefined", PredefinedAnswerMatcher())
    return AcademicAssistant(
        document_store=store,
        engine=engine,
        synthesizer=AnswerSynthesizer(engine),
        **kwargs,
    )


class TestAcademicAssistant:
    """Tests for AcademicAssistant.ask."""

    @pytest.mark.asyncio
    async def test_predefined_answer_skips_retrieval(self, biology_document):
        assistant = build_assistant(biology_document)

        with patch.object(assistant.engine, "search", wraps=assistant.engine.search) as search:
            result = await assistant.ask("What are the limitations of this study?")

        search.assert_not_called()
        assert result.source == "predefined"
        assert result.confidence == 1.0
        assert result.knowledge_base == INTEGRATED_KNOWLEDGE_BASE.name
        assert result.sources[0].document == "Research Papers.pdf"
        assert result.sources[0].page == 1

    @pytest.mark.asyncio
    async def test_predefined_answers_can_be_disabled(self, biology_document):
        assistant = build_assistant(biology_document, predefined=None)
        result = await assistant.ask("What are the limitations of this study?")
        assert result.source != "predefined"

    @pytest.mark.asyncio
    async def test_answer_from_documents(self, biology_document, soil_document):
        assistant = build_assistant(biology_document, soil_document)
        result = await assistant.ask("How does chlorophyll absorb light?")

        assert result.source == "retrieval"
        assert result.confidence > 0
        assert result.sources[0].document == "biology.pdf"
        assert result.sources[0].page == 1
        assert FOLLOW_UP_HEADER in result.answer

    @pytest.mark.asyncio
    async def test_follow_ups_not_appended_when_disabled(self, biology_document):
        assistant = build_assistant(biology_document, append_follow_ups=False)
        result = await assistant.ask("How does chlorophyll absorb light?")

        assert FOLLOW_UP_HEADER not in result.answer
        assert result.follow_ups

    @pytest.mark.asyncio
    async def test_no_match(self, biology_document):
        assistant = build_assistant(biology_document)
        query = "zzqqxx_nonexistent_term"
        result = await assistant.ask(query)

        assert result.answer == NoResultsTemplate.build(query)
        assert result.sources == []
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_no_documents(self):
        result = await build_assistant().ask("How does chlorophyll absorb light?")

        assert result.answer == FallbackTemplate.NO_DOCUMENTS
        assert result.source == "fallback"

    @pytest.mark.asyncio
    async def test_documents_argument_overrides_store(self, biology_document, soil_document):
        assistant = build_assistant(biology_document)
        result = await assistant.ask("How do farmers reduce erosion?", documents=[soil_document])
        assert result.sources[0].document == "soil.pdf"

    @pytest.mark.asyncio
    async def test_search_failure_uses_simple_search(self, biology_document):
        assistant = build_assistant(biology_document)

        with patch.object(assistant.engine, "search", side_effect=RuntimeError("index broken")):
            result = await assistant.ask("chlorophyll wavelengths")

        assert result.source == "fallback"
        assert result.answer == FallbackTemplate.build(biology_document.chunks[0].content)
        assert result.sources[0].page == 1
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_both_searches_failing(self, biology_document):
        assistant = build_assistant(biology_document)

        with patch.object(assistant.engine, "search", side_effect=RuntimeError("index broken")), \
                patch.object(assistant.engine, "simple_search", side_effect=RuntimeError("still broken")):
            result = await assistant.ask("chlorophyll wavelengths")

        assert result.source == "error"
        assert result.answer == FallbackTemplate.no_match("chlorophyll wavelengths")

    @pytest.mark.asyncio
    async def test_timeout(self, biology_document):
        assistant = build_assistant(biology_document, search_timeout_seconds=0.05)

        with patch.object(assistant.engine, "search", side_effect=lambda *args: time.sleep(0.5)):
            result = await assistant.ask("chlorophyll wavelengths")

        assert result.source == "error"
        assert result.answer == FallbackTemplate.no_match("chlorophyll wavelengths")

    @pytest.mark.asyncio
    async def test_empty_question_raises(self, biology_document):
        assistant = build_assistant(biology_document)
        with pytest.raises(EmptyQuestionError):
            await assistant.ask("  \x00 ")

    @pytest.mark.asyncio
    async def test_questions_are_tracked(self, biology_document):
        tracker = MagicMock()
        assistant = build_assistant(biology_document, faq_tracker=tracker)

        await assistant.ask("  chlorophyll\x07 wavelengths ")
        tracker.track.assert_called_once_with("chlorophyll wavelengths")

    @pytest.mark.asyncio
    async def test_tracker_failure_does_not_fail_answer(self, biology_document):
        tracker = MagicMock()
        tracker.track.side_effect = RuntimeError("disk full")
        assistant = build_assistant(biology_document, faq_tracker=tracker)

        result = await assistant.ask("chlorophyll wavelengths")
        assert result.sources


class TestValidators:
    """Tests for question and output validation."""

    def test_question_cleaning(self):
        assert QuestionValidator().validate("\tWhat\x01 is light?\n") == "What is light?"

    @pytest.mark.parametrize("question", ["", "   ", "\x00\x1f", None])
    def test_empty_questions(self, question):
        with pytest.raises(EmptyQuestionError):
            QuestionValidator().validate(question)

    def test_valid_result(self):
        result = AnswerResult(answer="Yes.", confidence=0.5, sources=[Source("a.pdf", 1, "x")])
        assert OutputValidator().validate_result(result) == {"is_valid": True, "errors": []}

    def test_invalid_result(self):
        result = AnswerResult(answer=" ", confidence=1.5, sources=[Source("a.pdf", 0, "x")])
        validation = OutputValidator().validate_result(result)

        assert not validation["is_valid"]
        assert len(validation["errors"]) == 3
