"""Tests for text cleaning and the text processing pipeline."""
from unittest.mock import patch

import pytest

from academic_assistant.services.text_processor import (
    ACADEMIC_CLEAN,
    ERROR_IMPROVEMENT,
    QUICK_CLEAN,
    TextProcessingOptions,
    TextProcessor,
    calculate_quality,
)
from academic_assistant.utils.text_cleaner import (
    clean_heading,
    correct_ocr_errors,
    expand_acronyms,
    extract_sections,
    fix_encoding,
    is_heading,
    normalize_whitespace,
    standardize_formatting,
)


class TestTextCleaner:
    """Tests for individual cleaning stages."""

    def test_fix_encoding_repairs_mojibake(self):
        """Test mis-decoded quotes and invalid characters are repaired."""
        assert fix_encoding("Itâ€™s done\ufffd") == "It's done"

    def test_fix_encoding_expands_ligatures(self):
        """Test NFKC normalization splits ligature glyphs."""
        assert fix_encoding("ﬁnal ﬂow") == "final flow"

    def test_correct_ocr_rejoins_hyphenated_words(self):
        """Test words broken across lines are rejoined."""
        assert correct_ocr_errors("The experi-\nment worked") == "The experiment worked"

    def test_correct_ocr_collapses_spaced_digits(self):
        """Test spaced out digit runs are joined."""
        assert correct_ocr_errors("In 2 0 2 3 we") == "In 2023 we"

    def test_correct_ocr_removes_space_before_punctuation(self):
        assert correct_ocr_errors("Results are good .") == "Results are good."

    def test_normalize_whitespace(self):
        """Test whitespace runs and blank lines are collapsed."""
        dirty_text = "This   has    multiple    spaces\r\n\n\n\nand newlines  "
        cleaned = normalize_whitespace(dirty_text)
        assert "  " not in cleaned
        assert "\n\n\n" not in cleaned
        assert cleaned == "This has multiple spaces\n\nand newlines"

    def test_standardize_formatting(self):
        """Test quotes, dashes, ellipses and repeated punctuation are unified."""
        text = "“Quoted” — wait... really!!Yes"
        assert standardize_formatting(text) == '"Quoted" – wait… really! Yes'

    def test_expand_acronyms_first_occurrence_keeps_acronym(self):
        """Test first occurrence keeps the acronym in parentheses."""
        result = expand_acronyms("ML is popular. ML models learn.", {"ML": "Machine Learning"})
        assert result == "Machine Learning (ML) is popular. Machine Learning models learn."

    def test_expand_acronyms_respects_word_boundaries(self):
        assert expand_acronyms("HTML pages", {"ML": "Machine Learning"}) == "HTML pages"

    def test_is_heading(self):
        """Test heading detection on typical lines."""
        assert is_heading("1. Introduction")
        assert is_heading("METHODOLOGY")
        assert is_heading("Chapter 3 Results")
        assert not is_heading("This sentence ends with a period.")
        assert not is_heading("")

    def test_clean_heading(self):
        assert clean_heading("2. Related Work") == "Related Work"
        assert clean_heading("Chapter 4: Findings") == "Findings"

    def test_extract_sections(self):
        """Test lines are grouped under headings with offsets."""
        text = "Abstract\nThis paper studies chunking.\n1. Introduction\nChunks are small."
        sections = extract_sections(text)

        assert [s.title for s in sections] == ["Abstract", "Introduction"]
        assert sections[0].start_index == 0
        assert sections[0].content == "This paper studies chunking."
        assert sections[1].start_index == text.index("1. Introduction")
        assert sections[0].end_index == sections[1].start_index
        assert sections[1].end_index == len(text)


class TestTextProcessor:
    """Tests for TextProcessor."""

    def test_process_records_applied_improvements(self):
        """Test only stages that changed the text are reported."""
        processor = TextProcessor()
        result = processor.process("The  ﬁrst   result .")

        assert result.cleaned_text == "The first result."
        assert "Fixed text encoding issues" in result.improvements_applied
        assert "Normalized whitespace and line breaks" in result.improvements_applied
        assert "Expanded common acronyms" not in result.improvements_applied

    def test_clean_text_is_unchanged(self):
        processor = TextProcessor()
        result = processor.process("Plain text without problems.", QUICK_CLEAN)
        assert result.cleaned_text == "Plain text without problems."
        assert result.improvements_applied == []

    def test_academic_clean_expands_acronyms(self):
        processor = TextProcessor()
        result = processor.process("We trained a CNN. The CNN converged.", ACADEMIC_CLEAN)
        assert "Convolutional Neural Network (CNN)" in result.cleaned_text
        assert "Expanded common acronyms" in result.improvements_applied

    def test_custom_acronym_table(self):
        """Test an alternate acronym table can be injected."""
        options = TextProcessingOptions(expand_acronyms=True, acronyms={"QA": "Question Answering"})
        result = TextProcessor().process("QA systems", options)
        assert result.cleaned_text == "Question Answering (QA) systems"

    def test_structure_detection(self):
        processor = TextProcessor()
        result = processor.prepare_for_qa("INTRODUCTION\nPlants need light.\nCONCLUSION\nLight matters.")
        assert [s.title for s in result.sections] == ["INTRODUCTION", "CONCLUSION"]
        assert "Identified document structure" in result.improvements_applied

    def test_quick_clean_skips_structure(self):
        processor = TextProcessor()
        assert processor.process("INTRODUCTION\nPlants need light.", QUICK_CLEAN).sections == []

    @pytest.mark.parametrize(
        "raw_text",
        [
            "The  ﬁrst result was signiﬁcant .\n\n\n\nWe com-\nbined data from 2 0 2 3... “quoted” text — done!!",
            "ABSTRACT\nMachine learning (ML) is useful.Results improved by 5 %.\r\n\r\nSee https:// example.org",
            "Itâ€™s a test\ufeff of   encoding . Another sentence?? Yes.",
        ],
    )
    def test_cleaning_is_idempotent(self, raw_text):
        """Test cleaning already cleaned text is a no-op."""
        processor = TextProcessor()
        once = processor.process(raw_text).cleaned_text
        twice = processor.process(once).cleaned_text
        assert twice == once

    def test_processing_error_returns_original_text(self):
        """Test internal errors degrade to the unmodified input."""
        processor = TextProcessor()
        with patch(
            "academic_assistant.services.text_processor.fix_encoding",
            side_effect=RuntimeError("boom"),
        ):
            result = processor.process("Some  raw   text")

        assert result.cleaned_text == "Some  raw   text"
        assert result.quality_score == 0.5
        assert result.improvements_applied == [ERROR_IMPROVEMENT]


class TestQualityScore:
    """Tests for calculate_quality."""

    def test_short_clean_text(self):
        """Test score for a short sentence without artifacts."""
        # 0.5 + length ratio 0.1 + few artifacts 0.1 + natural spacing 0.1
        assert calculate_quality("Hello world.", 12) == pytest.approx(0.8)

    def test_long_text_is_clamped(self):
        text = "The quick brown fox jumps over the lazy dog near the river bank. " * 50
        assert calculate_quality(text, len(text)) == 1.0

    def test_heavy_artifacts_lower_score(self):
        text = "#### @@@@ $$$$ %%%% ^^^^"
        # artifact penalty cancels the length bonus
        assert calculate_quality(text, len(text)) == pytest.approx(0.6)

    def test_score_in_range(self):
        for text in ["", "a", "x" * 10000, "!!!???..."]:
            assert 0.0 <= calculate_quality(text, 5) <= 1.0
