"""Text processing pipeline for extracted PDF text."""
import re
from dataclasses import dataclass, field
from typing import List, Mapping

from academic_assistant.models.document import Section
from academic_assistant.utils.logger import logger
from academic_assistant.utils.text_cleaner import (
    ACADEMIC_ACRONYMS,
    correct_ocr_errors,
    expand_acronyms,
    extract_sections,
    fix_encoding,
    normalize_whitespace,
    standardize_formatting,
)

ERROR_IMPROVEMENT = "Error occurred during processing"
ARTIFACT_PATTERN = re.compile(r"[^\w\s.,!?;:'\"()\-–—]")
SPACING_ISSUE_PATTERN = re.compile(r"\s{3,}|[a-z][A-Z]|\w[.!?][a-z]")


@dataclass(frozen=True)
class TextProcessingOptions:
    """Pipeline stage switches. Stages always run in declaration order."""

    fix_encoding: bool = True
    remove_ocr_errors: bool = True
    normalize_whitespace: bool = True
    standardize_formatting: bool = True
    expand_acronyms: bool = False
    preserve_structure: bool = True
    acronyms: Mapping[str, str] = field(default_factory=lambda: ACADEMIC_ACRONYMS, compare=False)


QUICK_CLEAN = TextProcessingOptions(preserve_structure=False)
ACADEMIC_CLEAN = TextProcessingOptions(expand_acronyms=True)
PREPARE_FOR_QA = TextProcessingOptions()


@dataclass
class ProcessedText:
    """Result of running the cleaning pipeline."""

    cleaned_text: str
    original_length: int
    processed_length: int
    improvements_applied: List[str] = field(default_factory=list)
    quality_score: float = 0.5
    sections: List[Section] = field(default_factory=list)


class TextProcessor:
    """Cleans raw extracted text and estimates its quality."""

    def __init__(self, default_options: TextProcessingOptions = PREPARE_FOR_QA):
        """
        Initialize text processor.

        Args:
            default_options: Options used when process() is called without any
        """
        self.default_options = default_options

    def process(self, raw_text: str, options: TextProcessingOptions = None) -> ProcessedText:
        """
        Run the cleaning pipeline.

        Never raises: on any internal error the original text is returned
        unchanged with a neutral quality score.

        Args:
            raw_text: Text as returned by the extractor
            options: Stage switches, defaults to the processor's defaults

        Returns:
            ProcessedText with cleaned text, applied improvements, quality and sections
        """
        options = options or self.default_options
        original_length = len(raw_text)

        try:
            improvements: List[str] = []
            text = raw_text

            stages = (
                (options.fix_encoding, fix_encoding, "Fixed text encoding issues"),
                (options.remove_ocr_errors, correct_ocr_errors, "Corrected OCR recognition errors"),
                (options.normalize_whitespace, normalize_whitespace, "Normalized whitespace and line breaks"),
                (options.standardize_formatting, standardize_formatting, "Standardized text formatting"),
                (
                    options.expand_acronyms,
                    lambda t: expand_acronyms(t, options.acronyms),
                    "Expanded common acronyms",
                ),
            )
            for enabled, stage, note in stages:
                if not enabled:
                    continue
                before = text
                text = stage(text)
                if text != before:
                    improvements.append(note)

            sections: List[Section] = []
            if options.preserve_structure:
                sections = extract_sections(text)
                if sections:
                    improvements.append("Identified document structure")

            return ProcessedText(
                cleaned_text=text,
                original_length=original_length,
                processed_length=len(text),
                improvements_applied=improvements,
                quality_score=calculate_quality(text, original_length),
                sections=sections,
            )
        except Exception as e:
            logger.warning(f"Error during text processing: {str(e)}", exc_info=True)
            return ProcessedText(
                cleaned_text=raw_text,
                original_length=original_length,
                processed_length=original_length,
                improvements_applied=[ERROR_IMPROVEMENT],
                quality_score=0.5,
            )

    def quick_clean(self, text: str) -> str:
        """Clean text without structure detection."""
        return self.process(text, QUICK_CLEAN).cleaned_text

    def academic_clean(self, text: str) -> ProcessedText:
        """Full cleanup including acronym expansion and structure detection."""
        return self.process(text, ACADEMIC_CLEAN)

    def prepare_for_qa(self, text: str) -> ProcessedText:
        """Cleanup for question answering. Acronyms are kept as written for search."""
        return self.process(text, PREPARE_FOR_QA)


def calculate_quality(text: str, original_length: int) -> float:
    """
    Estimate text quality in [0, 1].

    Starts from 0.5 and adds bonuses for preserved length, character
    variety, word and sentence counts, few artifacts and natural spacing.
    """
    score = 0.5

    length_ratio = len(text) / max(original_length, 1)
    if length_ratio > 0.9:
        score += 0.1
    elif length_ratio > 0.8:
        score += 0.05

    if len(set(text.lower())) > 20:
        score += 0.1

    word_count = len(text.split())
    if word_count > 100:
        score += 0.1
    if word_count > 500:
        score += 0.1

    sentences = [s for s in re.split(r"[.!?]+", text) if len(s.strip()) > 10]
    if len(sentences) > 5:
        score += 0.05
    if len(sentences) > 20:
        score += 0.05

    artifact_ratio = len(ARTIFACT_PATTERN.findall(text)) / max(len(text), 1)
    if artifact_ratio < 0.01:
        score += 0.1
    elif artifact_ratio > 0.05:
        score -= 0.1

    if len(SPACING_ISSUE_PATTERN.findall(text)) < len(text) * 0.001:
        score += 0.1

    return max(0.0, min(1.0, score))
