"""Document data models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from academic_assistant.exceptions import InvalidStatusTransitionError


class DocumentStatus(str, Enum):
    """Lifecycle state of an uploaded document."""

    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Page:
    """A single page of cleaned document text."""

    page_number: int
    text: str


@dataclass
class Chunk:
    """Represents a sentence-aligned text chunk with metadata."""

    document_id: str
    page: int
    chunk_index: int
    content: str
    keywords: List[str] = field(default_factory=list)


@dataclass
class Section:
    """A heading and the text that follows it, with character offsets."""

    title: str
    content: str
    start_index: int
    end_index: int


@dataclass
class Document:
    """Represents an uploaded document and its processed text."""

    id: str
    name: str
    size_bytes: int
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: DocumentStatus = DocumentStatus.PROCESSING
    page_count: int = 0
    pages: List[Page] = field(default_factory=list)
    chunks: List[Chunk] = field(default_factory=list)
    quality_score: Optional[float] = None
    improvements: List[str] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == DocumentStatus.READY

    @property
    def full_text(self) -> str:
        return "\n\n".join(page.text for page in self.pages)

    def _require_processing(self, target: DocumentStatus) -> None:
        if self.status != DocumentStatus.PROCESSING:
            raise InvalidStatusTransitionError(
                f"Document {self.id} cannot move from {self.status.value} to {target.value}"
            )

    def mark_ready(
        self,
        pages: List[Page],
        chunks: List[Chunk],
        quality_score: Optional[float] = None,
        improvements: Optional[List[str]] = None,
        sections: Optional[List[Section]] = None,
    ) -> None:
        """
        Transition a processing document to ready.

        Args:
            pages: Cleaned pages in reading order
            chunks: Chunks in chunk_index order
            quality_score: Text quality estimate in [0, 1]
            improvements: Cleaning steps that changed the text
            sections: Detected document sections

        Raises:
            InvalidStatusTransitionError: If the document is not processing
        """
        self._require_processing(DocumentStatus.READY)
        self.pages = list(pages)
        self.page_count = len(self.pages)
        self.chunks = list(chunks)
        self.quality_score = quality_score
        self.improvements = list(improvements or [])
        self.sections = list(sections or [])
        self.status = DocumentStatus.READY

    def mark_failed(self, error: str) -> None:
        """Transition a processing document to error."""
        self._require_processing(DocumentStatus.ERROR)
        self.error = error
        self.status = DocumentStatus.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size_bytes": self.size_bytes,
            "uploaded_at": self.uploaded_at.isoformat(),
            "status": self.status.value,
            "page_count": self.page_count,
            "pages": [{"page_number": p.page_number, "text": p.text} for p in self.pages],
            "chunks": [
                {
                    "document_id": c.document_id,
                    "page": c.page,
                    "chunk_index": c.chunk_index,
                    "content": c.content,
                    "keywords": list(c.keywords),
                }
                for c in self.chunks
            ],
            "quality_score": self.quality_score,
            "improvements": list(self.improvements),
            "sections": [
                {
                    "title": s.title,
                    "content": s.content,
                    "start_index": s.start_index,
                    "end_index": s.end_index,
                }
                for s in self.sections
            ],
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        return cls(
            id=data["id"],
            name=data["name"],
            size_bytes=data["size_bytes"],
            uploaded_at=datetime.fromisoformat(data["uploaded_at"]),
            status=DocumentStatus(data["status"]),
            page_count=data.get("page_count", 0),
            pages=[Page(**p) for p in data.get("pages", [])],
            chunks=[Chunk(**c) for c in data.get("chunks", [])],
            quality_score=data.get("quality_score"),
            improvements=list(data.get("improvements", [])),
            sections=[Section(**s) for s in data.get("sections", [])],
            error=data.get("error"),
        )


@dataclass
class ScoredChunk:
    """A chunk paired with its relevance score for one query."""

    chunk: Chunk
    score: float
    document: Document


@dataclass
class Source:
    """A citation pointing at a document page."""

    document: str
    page: int
    excerpt: str
    relevance_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"document": self.document, "page": self.page, "excerpt": self.excerpt}
        if self.relevance_score is not None:
            data["relevance_score"] = self.relevance_score
        return data


@dataclass
class AnswerResult:
    """Answer text with confidence, citations and suggested follow-ups."""

    answer: str
    confidence: float
    sources: List[Source] = field(default_factory=list)
    follow_ups: List[str] = field(default_factory=list)
    source: str = "retrieval"
    knowledge_base: Optional[str] = None
