"""Tests for document summaries."""
import pytest

from academic_assistant.exceptions import DocumentNotReadyError
from academic_assistant.models.document import Document, Page, Section
from academic_assistant.services.chunker import Chunker
from academic_assistant.services.document_summary import (
    DocumentSummarizer,
    classify_document,
    key_sentences,
    key_topics,
    suggested_questions,
)

RESEARCH_TEXT = (
    "Abstract\n"
    "This study evaluates irrigation schedules across several maize farms in the region.\n"
    "Methodology\n"
    "We compared irrigation schedules using soil moisture data collected every week.\n"
    "Results\n"
    "The key finding is that deficit irrigation saved water without reducing maize yield.\n"
    "Irrigation timing mattered more than irrigation volume for maize."
)


def research_document():
    document = Document(id="paper", name="irrigation.pdf", size_bytes=4096)
    pages = [Page(1, RESEARCH_TEXT)]
    sections = [
        Section("Abstract", "", 0, 10),
        Section("Methodology", "", 10, 20),
        Section("Results", "", 20, 30),
        Section("Abstract", "", 30, 40),
    ]
    document.mark_ready(
        pages=pages,
        chunks=Chunker().chunk(pages, "paper"),
        quality_score=0.834,
        sections=sections,
    )
    return document


class TestHelpers:
    """Tests for summary building blocks."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("abstract ... methodology ... results", "research paper"),
            ("executive summary of the quarter", "business report"),
            ("thesis with a literature review", "academic thesis"),
            ("introduction and conclusion", "academic document"),
            ("chapter one", "book/manual"),
            ("plain notes", "unknown"),
        ],
    )
    def test_classify_document(self, text, expected):
        assert classify_document(text) == expected

    def test_key_topics(self):
        text = "light light light light plants plants plants water with with with"
        assert key_topics(text) == ["Light", "Plants"]

    def test_key_sentences_skip_short_and_long(self):
        text = "Short one. " + "x" * 400 + ". " + "A sentence that is clearly long enough to be selected here."
        assert key_sentences(text) == ["A sentence that is clearly long enough to be selected here"]

    def test_key_sentences_prefer_important_ones(self):
        sentences = [
            "The first sentence sets the scene for the whole document at hand",
            "The second sentence is filler text that does not say very much",
            "The third sentence is the middle one and it is long enough too",
            "The fourth sentence is filler text that does not say much either",
            "The main result is that the approach works better than expected",
        ]
        selected = key_sentences(". ".join(sentences) + ".")

        assert selected == [sentences[0], sentences[2], sentences[4]]

    def test_suggested_questions_are_capped(self):
        text = "conclusion data method"
        questions = suggested_questions(text, "research paper", ["Irrigation", "Maize"])

        assert len(questions) == 6
        assert questions[3] == "What does the document say about irrigation?"
        assert questions[4] == "How does irrigation relate to maize?"


class TestDocumentSummarizer:
    """Tests for DocumentSummarizer."""

    def test_research_paper(self):
        summary = DocumentSummarizer().summarize(research_document())

        assert summary.document_id == "paper"
        assert summary.name == "irrigation.pdf"
        assert summary.page_count == 1
        assert summary.word_count == len(RESEARCH_TEXT.split())
        assert summary.quality_percent == 83
        assert summary.document_type == "research paper"
        assert summary.key_topics[0] == "Irrigation"
        assert "Maize" in summary.key_topics
        assert summary.sections == ["Abstract", "Methodology", "Results"]
        assert summary.suggested_questions[0] == "What is the main research question or hypothesis?"
        assert len(summary.key_sentences) <= 3

    def test_plain_document(self, biology_document):
        summary = DocumentSummarizer().summarize(biology_document)

        assert summary.document_type == "unknown"
        assert summary.page_count == 2
        assert summary.quality_percent == 90
        assert summary.key_topics == ["Light"]
        assert summary.sections == []
        assert summary.key_sentences[0].startswith("Photosynthesis is the process")
        assert summary.suggested_questions[:3] == [
            "What is the main topic of this document?",
            "What are the key points discussed?",
            "What does the document say about light?",
        ]

    def test_processing_document_is_rejected(self, processing_document):
        with pytest.raises(DocumentNotReadyError):
            DocumentSummarizer().summarize(processing_document)
