"""Pytest configuration and fixtures."""
import shutil
import tempfile
from typing import List, Optional

import pytest

from academic_assistant.exceptions import ExtractionError
from academic_assistant.models.document import Document, Page
from academic_assistant.services.chunker import Chunker
from academic_assistant.services.pdf_extractor import ExtractedPage, ExtractedText


PHOTOSYNTHESIS_PAGES = [
    "Photosynthesis is the process by which plants convert light energy into chemical energy. "
    "Chlorophyll absorbs light mostly in the blue and red wavelengths. "
    "The light reactions take place in the thylakoid membranes.",
    "The Calvin cycle uses carbon dioxide to build sugars. "
    "This cycle is also called the dark reactions because it does not need light directly. "
    "Researchers measure photosynthesis rates with gas exchange methods.",
]

SOIL_PAGES = [
    "Soil erosion is caused by wind and water. "
    "Farmers reduce erosion with cover crops and terraces.",
]


class StubExtractor:
    """Extractor double returning fixed page texts or raising."""

    def __init__(self, pages: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.pages = pages if pages is not None else list(PHOTOSYNTHESIS_PAGES)
        self.error = error
        self.calls = 0

    def extract(self, file_bytes: bytes) -> ExtractedText:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ExtractedText(
            page_count=len(self.pages),
            pages=[ExtractedPage(page=i, text=text) for i, text in enumerate(self.pages, 1)],
        )


def make_ready_document(
    pages: List[str],
    name: str = "biology.pdf",
    document_id: str = "doc-1",
    max_chunk_size: int = 500,
) -> Document:
    """Build a ready document whose chunks come from the real chunker."""
    document = Document(id=document_id, name=name, size_bytes=1024)
    page_models = [Page(page_number=i, text=text) for i, text in enumerate(pages, 1)]
    chunks = Chunker(max_chunk_size=max_chunk_size).chunk(page_models, document_id)
    document.mark_ready(pages=page_models, chunks=chunks, quality_score=0.9)
    return document


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def biology_document():
    """Ready document about photosynthesis."""
    return make_ready_document(PHOTOSYNTHESIS_PAGES)


@pytest.fixture
def soil_document():
    """Ready document about soil erosion."""
    return make_ready_document(SOIL_PAGES, name="soil.pdf", document_id="doc-2")


@pytest.fixture
def processing_document():
    """Document still waiting for background processing."""
    return Document(id="doc-processing", name="pending.pdf", size_bytes=2048)


@pytest.fixture
def stub_extractor():
    """Extractor returning the photosynthesis pages."""
    return StubExtractor()


@pytest.fixture
def failing_extractor():
    """Extractor that cannot read the PDF."""
    return StubExtractor(error=ExtractionError("Failed to process PDF file: broken xref"))


@pytest.fixture
def sample_pdf_content():
    """Sample PDF content for testing (as bytes), padded to 1 KB."""
    content = b"%PDF-1.4\n1 0 obj\n<<\n/Type /Catalog\n>>\nendobj\nxref\n0 1\ntrailer\n<<\n/Root 1 0 R\n>>\n%%EOF"
    return content.ljust(1024, b" ")
