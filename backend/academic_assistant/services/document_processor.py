"""Document processing service: extraction, cleaning and chunking."""
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from academic_assistant.exceptions import ExtractionError, ProcessingError, ServiceUnavailableError
from academic_assistant.models.document import Chunk, Page, Section
from academic_assistant.services.chunker import Chunker
from academic_assistant.services.pdf_extractor import (
    ExtractedText,
    PdfPlumberExtractor,
    build_metadata_placeholder,
)
from academic_assistant.services.text_processor import PREPARE_FOR_QA, TextProcessor
from academic_assistant.utils.logger import logger


@dataclass
class ProcessedDocument:
    """Output of processing one uploaded file."""

    pages: List[Page]
    chunks: List[Chunk]
    quality_score: float
    improvements: List[str] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    used_placeholder: bool = False


class DocumentProcessor:
    """Turns PDF bytes into cleaned pages and chunks."""

    def __init__(
        self,
        extractor: Optional[PdfPlumberExtractor] = None,
        text_processor: Optional[TextProcessor] = None,
        chunker: Optional[Chunker] = None,
        expand_acronyms: bool = False,
    ):
        """
        Initialize document processor.

        Args:
            extractor: PDF-to-text collaborator
            text_processor: Text cleaning pipeline
            chunker: Sentence-aligned chunker
            expand_acronyms: Expand acronyms when preparing the full text
        """
        self.extractor = extractor or PdfPlumberExtractor()
        self.text_processor = text_processor or TextProcessor()
        self.chunker = chunker or Chunker()
        self.qa_options = replace(PREPARE_FOR_QA, expand_acronyms=expand_acronyms)

    def extract(
        self,
        file_bytes: bytes,
        name: str,
        size_bytes: int,
        uploaded_at: datetime,
    ) -> ExtractedText:
        """
        Extract page text, falling back to a metadata placeholder.

        The pipeline never dead-ends on an unreadable PDF: extraction
        errors are logged and replaced by a single descriptive page.
        """
        try:
            return self.extractor.extract(file_bytes)
        except (ExtractionError, ServiceUnavailableError) as e:
            logger.warning(
                f"Text extraction failed for {name}, using metadata placeholder: {str(e)}"
            )
            return build_metadata_placeholder(name, size_bytes, uploaded_at)

    def process(
        self,
        file_bytes: bytes,
        document_id: str,
        name: str,
        size_bytes: int,
        uploaded_at: datetime,
    ) -> ProcessedDocument:
        """
        Process an uploaded PDF.

        Args:
            file_bytes: Raw PDF content
            document_id: Id of the owning document
            name: Original filename
            size_bytes: File size in bytes
            uploaded_at: Upload timestamp

        Returns:
            ProcessedDocument with cleaned pages, chunks and quality data

        Raises:
            ProcessingError: If the PDF was readable but contained no text
        """
        start_time = time.time()

        extracted = self.extract(file_bytes, name, size_bytes, uploaded_at)

        pages = [
            Page(page_number=p.page, text=self.text_processor.quick_clean(p.text))
            for p in extracted.pages
        ]
        chunks = self.chunker.chunk(pages, document_id)
        if not chunks:
            raise ProcessingError("No text could be extracted from the document")

        full_text = "\n\n".join(page.text for page in pages if page.text)
        prepared = self.text_processor.process(full_text, self.qa_options)

        processing_time = (time.time() - start_time) * 1000
        logger.info(
            f"Processed document {document_id}",
            extra={
                "document_id": document_id,
                "page_count": len(pages),
                "chunk_count": len(chunks),
                "quality_score": prepared.quality_score,
                "processing_time_ms": processing_time,
            },
        )

        return ProcessedDocument(
            pages=pages,
            chunks=chunks,
            quality_score=prepared.quality_score,
            improvements=prepared.improvements_applied,
            sections=prepared.sections,
            used_placeholder=extracted.is_placeholder,
        )
