"""Pydantic schemas for API requests and responses."""
import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from academic_assistant.models.document import AnswerResult, Document, Page
from academic_assistant.models.faq import FAQItem, QuestionAnalytics
from academic_assistant.services.document_summary import DocumentSummary


class DocumentResponse(BaseModel):
    """Response schema for a stored document."""

    id: str = Field(..., description="Unique identifier for the document")
    name: str = Field(..., description="Original filename")
    size_bytes: int = Field(..., description="File size in bytes")
    uploaded_at: datetime = Field(..., description="Upload time (UTC)")
    status: str = Field(..., description="processing, ready or error")
    page_count: int = Field(default=0, description="Number of pages")
    chunk_count: int = Field(default=0, description="Number of text chunks created")
    quality_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Text quality estimate")
    improvements: List[str] = Field(default_factory=list, description="Cleaning steps applied")
    error: Optional[str] = Field(None, description="Failure reason when status is error")

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            name=document.name,
            size_bytes=document.size_bytes,
            uploaded_at=document.uploaded_at,
            status=document.status.value,
            page_count=document.page_count,
            chunk_count=len(document.chunks),
            quality_score=document.quality_score,
            improvements=document.improvements,
            error=document.error,
        )


class PageContent(BaseModel):
    """One page of cleaned text."""

    page: int = Field(..., ge=1, description="1-based page number")
    content: str = Field(..., description="Cleaned page text")

    @classmethod
    def from_page(cls, page: Page) -> "PageContent":
        return cls(page=page.page_number, content=page.text)


class DocumentSummaryResponse(BaseModel):
    """Response schema for a document summary."""

    document_id: str
    name: str
    page_count: int
    word_count: int
    quality_percent: int = Field(..., ge=0, le=100)
    document_type: str
    key_topics: List[str]
    sections: List[str]
    key_sentences: List[str]
    suggested_questions: List[str]

    @classmethod
    def from_summary(cls, summary: DocumentSummary) -> "DocumentSummaryResponse":
        return cls(
            document_id=summary.document_id,
            name=summary.name,
            page_count=summary.page_count,
            word_count=summary.word_count,
            quality_percent=summary.quality_percent,
            document_type=summary.document_type,
            key_topics=summary.key_topics,
            sections=summary.sections,
            key_sentences=summary.key_sentences,
            suggested_questions=summary.suggested_questions,
        )


class DeleteResponse(BaseModel):
    success: bool = True


class AskRequest(BaseModel):
    """Request schema for asking questions."""

    question: str = Field(..., min_length=1, description="User's question")

    @field_validator("question")
    @classmethod
    def clean_question(cls, v: str) -> str:
        """
        Clean question by removing invalid control characters.

        Args:
            v: Raw question string

        Returns:
            Cleaned question string
        """
        if not isinstance(v, str):
            v = str(v)

        # Keep \n, \t and \r, remove other control characters
        cleaned = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]', '', v)
        cleaned = cleaned.strip()

        if not cleaned:
            raise ValueError("Question cannot be empty after cleaning")

        return cleaned


class SourceResponse(BaseModel):
    """Schema for a cited document page."""

    document: str = Field(..., description="Document name")
    page: int = Field(..., ge=1, description="Page number where the excerpt appears")
    excerpt: str = Field(..., description="Beginning of the matching chunk")
    relevance_score: Optional[float] = Field(None, description="Retrieval score rounded to one decimal")


class AskResponse(BaseModel):
    """Response schema for question answering."""

    answer: str = Field(..., description="Generated answer")
    sources: List[SourceResponse] = Field(default_factory=list, description="Cited document pages")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score")
    source: str = Field(..., description="predefined, retrieval, fallback or error")
    knowledge_base: Optional[str] = Field(None, description="Knowledge base of a predefined answer")
    follow_ups: List[str] = Field(default_factory=list, description="Suggested follow-up questions")

    @classmethod
    def from_result(cls, result: AnswerResult) -> "AskResponse":
        return cls(
            answer=result.answer,
            sources=[SourceResponse(**s.to_dict()) for s in result.sources],
            confidence=result.confidence,
            source=result.source,
            knowledge_base=result.knowledge_base,
            follow_ups=result.follow_ups,
        )


class FAQItemResponse(BaseModel):
    """Schema for one FAQ entry."""

    id: str
    question: str
    answer: str
    category: str
    popularity: int = Field(..., ge=0, le=100)
    keywords: List[str]
    last_asked: datetime
    times_asked: int

    @classmethod
    def from_item(cls, item: FAQItem) -> "FAQItemResponse":
        return cls(**item.to_dict())


class KeywordCountResponse(BaseModel):
    word: str
    count: int


class QuestionTrendResponse(BaseModel):
    question: str
    count: int
    trend: str


class AnalyticsResponse(BaseModel):
    """Response schema for question analytics."""

    total_questions: int
    popular_keywords: List[KeywordCountResponse]
    category_distribution: Dict[str, int]
    recent_trends: List[QuestionTrendResponse]

    @classmethod
    def from_analytics(cls, analytics: QuestionAnalytics) -> "AnalyticsResponse":
        return cls(
            total_questions=analytics.total_questions,
            popular_keywords=[
                KeywordCountResponse(word=k.keyword, count=k.count) for k in analytics.popular_keywords
            ],
            category_distribution=analytics.category_distribution,
            recent_trends=[
                QuestionTrendResponse(question=t.question, count=t.count, trend=t.trend)
                for t in analytics.recent_trends
            ],
        )
