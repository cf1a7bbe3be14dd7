"""PDF-to-text extraction."""
import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from academic_assistant.exceptions import ExtractionError, ServiceUnavailableError
from academic_assistant.utils.logger import logger

try:
    import pdfplumber
    PDFPLUMBER_AVAILABLE = True
except ImportError:
    PDFPLUMBER_AVAILABLE = False
    logger.warning("pdfplumber is not available. PDF processing will not work.")


@dataclass
class ExtractedPage:
    page: int
    text: str


@dataclass
class ExtractedText:
    """Per-page plain text of a PDF."""

    page_count: int
    pages: List[ExtractedPage] = field(default_factory=list)
    is_placeholder: bool = False


class PdfPlumberExtractor:
    """Extracts page text from PDF bytes with pdfplumber."""

    def extract(self, file_bytes: bytes) -> ExtractedText:
        """
        Extract text from every page.

        Args:
            file_bytes: Raw PDF content

        Returns:
            ExtractedText with one entry per page, in page order

        Raises:
            ServiceUnavailableError: If pdfplumber is not available
            ExtractionError: If the PDF cannot be opened or read
        """
        if not PDFPLUMBER_AVAILABLE:
            raise ServiceUnavailableError("pdfplumber is not available. Please install pdfplumber.")

        pages: List[ExtractedPage] = []
        try:
            with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
                for page_num, page in enumerate(pdf.pages, 1):
                    try:
                        text = page.extract_text() or ""
                    except Exception as e:
                        logger.warning(f"Error extracting text from PDF page {page_num}: {str(e)}")
                        text = ""
                    pages.append(ExtractedPage(page=page_num, text=text))
        except Exception as e:
            raise ExtractionError(f"Failed to process PDF file: {str(e)}") from e

        return ExtractedText(page_count=len(pages), pages=pages)


def build_metadata_placeholder(name: str, size_bytes: int, uploaded_at: datetime) -> ExtractedText:
    """
    Build a one-page stand-in for a PDF whose text could not be extracted.

    Args:
        name: Original filename
        size_bytes: File size in bytes
        uploaded_at: Upload timestamp

    Returns:
        ExtractedText with a single metadata page
    """
    size_mb = size_bytes / (1024 * 1024)
    text = (
        "Document Information:\n\n"
        f"File Name: {name}\n"
        f"File Size: {size_mb:.2f} MB\n"
        f"Upload Time: {uploaded_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}\n"
        "File Type: PDF Document\n\n"
        "Note: This document has been uploaded successfully, but detailed text extraction "
        "was not possible. You can still ask questions about the document.\n\n"
        "For better text extraction and more accurate answers, please ensure:\n"
        "1. The PDF contains selectable text (not scanned images)\n"
        "2. The document is not password protected\n"
        "3. The file is not corrupted"
    )
    return ExtractedText(page_count=1, pages=[ExtractedPage(page=1, text=text)], is_placeholder=True)
