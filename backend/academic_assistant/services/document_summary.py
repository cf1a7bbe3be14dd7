"""Content-based summaries of processed documents."""
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from academic_assistant.exceptions import DocumentNotReadyError
from academic_assistant.models.document import Document

TOPIC_WORD = re.compile(r"\b[a-z]{4,}\b")
SENTENCE_SPLIT = re.compile(r"[.!?]+")

TOPIC_STOP_WORDS = frozenset({
    "this", "that", "with", "have", "they", "were", "been", "their", "said", "each",
    "which", "what", "there", "from", "would", "about", "could", "other", "after",
    "more", "very", "know", "just", "first", "into", "over", "think", "also", "back",
    "work", "life", "only", "still", "should", "being", "made", "before", "here",
    "through", "when", "where", "your", "will",
})

IMPORTANT_KEYWORDS = (
    "important", "significant", "key", "main", "primary", "essential", "critical",
    "major", "fundamental", "conclusion", "result", "finding",
)

MAX_TOPICS = 10
MAX_SECTIONS = 6
MAX_KEY_SENTENCES = 3
MAX_QUESTIONS = 6
MIN_SENTENCE_LENGTH = 50
MAX_SENTENCE_LENGTH = 300


@dataclass
class DocumentSummary:
    """Derived overview of one document."""

    document_id: str
    name: str
    page_count: int
    word_count: int
    quality_percent: int
    document_type: str
    key_topics: List[str] = field(default_factory=list)
    sections: List[str] = field(default_factory=list)
    key_sentences: List[str] = field(default_factory=list)
    suggested_questions: List[str] = field(default_factory=list)


def classify_document(text: str) -> str:
    """Guess the document type from keywords in lowercased text."""
    if "abstract" in text and "methodology" in text and "results" in text:
        return "research paper"
    if "executive summary" in text or "recommendations" in text:
        return "business report"
    if "literature review" in text and "thesis" in text:
        return "academic thesis"
    if "introduction" in text and "conclusion" in text:
        return "academic document"
    if "chapter" in text or "section" in text:
        return "book/manual"
    return "unknown"


def key_topics(text: str) -> List[str]:
    """Frequent words of four or more letters, capitalized, most frequent first."""
    counts = Counter(w for w in TOPIC_WORD.findall(text) if w not in TOPIC_STOP_WORDS)
    return [word.capitalize() for word, freq in counts.most_common() if freq > 2][:MAX_TOPICS]


def key_sentences(text: str, count: int = MAX_KEY_SENTENCES) -> List[str]:
    """
    Pick representative sentences.

    Takes the first and the middle sentence, then sentences containing an
    importance keyword, skipping very short and very long sentences.
    """
    sentences = [s.strip() for s in SENTENCE_SPLIT.split(text)]
    sentences = [s for s in sentences if MIN_SENTENCE_LENGTH < len(s) < MAX_SENTENCE_LENGTH]
    if not sentences:
        return []

    selected = [sentences[0]]
    middle = sentences[len(sentences) // 2]
    if len(selected) < count and middle not in selected:
        selected.append(middle)

    for sentence in sentences:
        if len(selected) >= count:
            break
        lowered = sentence.lower()
        if sentence not in selected and any(k in lowered for k in IMPORTANT_KEYWORDS):
            selected.append(sentence)

    return selected[:count]


def suggested_questions(text: str, document_type: str, topics: List[str]) -> List[str]:
    questions: List[str] = []
    if document_type == "research paper":
        questions.append("What is the main research question or hypothesis?")
        questions.append("What methodology was used in this study?")
        questions.append("What are the key findings or results?")
    elif document_type == "business report":
        questions.append("What are the main recommendations?")
        questions.append("What business problem does this address?")
        questions.append("What are the key performance indicators mentioned?")
    else:
        questions.append("What is the main topic of this document?")
        questions.append("What are the key points discussed?")

    if topics:
        questions.append(f"What does the document say about {topics[0].lower()}?")
        if len(topics) > 1:
            questions.append(f"How does {topics[0].lower()} relate to {topics[1].lower()}?")

    if "conclusion" in text or "summary" in text:
        questions.append("What are the main conclusions?")
    if "data" in text or "analysis" in text:
        questions.append("What data or evidence is presented?")
    if "method" in text or "approach" in text:
        questions.append("What methods or approaches are described?")

    return questions[:MAX_QUESTIONS]


class DocumentSummarizer:
    """Builds a DocumentSummary from a ready document's stored text."""

    def summarize(self, document: Document) -> DocumentSummary:
        """
        Summarize a document.

        Args:
            document: Processed document

        Returns:
            DocumentSummary with type, topics, structure, highlights and
            suggested questions

        Raises:
            DocumentNotReadyError: If the document is not ready
        """
        if not document.is_ready:
            raise DocumentNotReadyError("Document not ready")

        text = document.full_text
        lowered = text.lower()
        document_type = classify_document(lowered)
        topics = key_topics(lowered)
        headings = list(dict.fromkeys(section.title for section in document.sections))

        return DocumentSummary(
            document_id=document.id,
            name=document.name,
            page_count=document.page_count,
            word_count=len(text.split()),
            quality_percent=round((document.quality_score or 0.0) * 100),
            document_type=document_type,
            key_topics=topics,
            sections=headings[:MAX_SECTIONS],
            key_sentences=key_sentences(text),
            suggested_questions=suggested_questions(lowered, document_type, topics),
        )
