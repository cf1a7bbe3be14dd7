"""Tests for upload validation and background processing."""
import asyncio
import threading

import pytest

from academic_assistant.exceptions import (
    DocumentNotFoundError,
    DocumentNotReadyError,
    FileSizeExceededError,
    FileTypeNotSupportedError,
    StorageError,
)
from academic_assistant.models.document import DocumentStatus
from academic_assistant.services.document_processor import DocumentProcessor
from academic_assistant.services.document_store import InMemoryDocumentStore
from academic_assistant.services.document_upload_service import DocumentUploadService
from academic_assistant.validators import DocumentValidator

from conftest import StubExtractor


class BlockingExtractor(StubExtractor):
    """Extractor that waits until the test releases it."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def extract(self, file_bytes):
        self.release.wait(timeout=5)
        return super().extract(file_bytes)


class FailingSaveStore(InMemoryDocumentStore):
    """Store whose saves fail after the first few succeed."""

    def __init__(self, successful_saves=1, failures=1):
        super().__init__()
        self.successful_saves = successful_saves
        self.failures = failures
        self.saves = 0

    def save(self, document):
        self.saves += 1
        if self.successful_saves < self.saves <= self.successful_saves + self.failures:
            raise StorageError("disk full")
        super().save(document)


def build_service(extractor, document_store=None):
    return DocumentUploadService(
        document_store=document_store or InMemoryDocumentStore(),
        document_processor=DocumentProcessor(extractor=extractor),
        poll_interval=0.01,
    )


class TestDocumentValidator:
    """Tests for upload checks."""

    def test_accepts_pdf_with_parameters(self):
        assert DocumentValidator.validate_content_type("Application/PDF; charset=binary") == "application/pdf"

    @pytest.mark.parametrize("content_type", [None, "", "text/plain", "image/png"])
    def test_rejects_other_types(self, content_type):
        with pytest.raises(FileTypeNotSupportedError):
            DocumentValidator.validate_content_type(content_type)

    def test_size_limit_is_inclusive(self):
        DocumentValidator.validate_file_size(10 * 1024 * 1024, 10)
        with pytest.raises(FileSizeExceededError):
            DocumentValidator.validate_file_size(10 * 1024 * 1024 + 1, 10)


class TestDocumentUploadService:
    """Tests for DocumentUploadService."""

    @pytest.mark.asyncio
    async def test_oversized_file_is_rejected(self, stub_extractor):
        service = build_service(stub_extractor)

        with pytest.raises(FileSizeExceededError):
            await service.upload(b"x" * (11 * 1024 * 1024), "big.pdf", "application/pdf")

        assert service.list_documents() == []
        assert stub_extractor.calls == 0

    @pytest.mark.asyncio
    async def test_non_pdf_is_rejected(self, stub_extractor):
        service = build_service(stub_extractor)

        with pytest.raises(FileTypeNotSupportedError):
            await service.upload(b"hello", "notes.txt", "text/plain")
        assert service.list_documents() == []

    @pytest.mark.asyncio
    async def test_upload_is_processed_in_background(self, stub_extractor, sample_pdf_content):
        service = build_service(stub_extractor)

        document = await service.upload(sample_pdf_content, "biology.pdf", "application/pdf")
        assert document.status == DocumentStatus.PROCESSING
        assert document.size_bytes == 1024

        processed = await service.wait_until_processed(document.id, timeout=5)
        assert processed.status == DocumentStatus.READY
        assert processed.page_count == 2
        assert processed.chunks
        assert 0.0 <= processed.quality_score <= 1.0

        pages = service.get_content(document.id)
        assert [p.page_number for p in pages] == [1, 2]
        assert pages[0].text.startswith("Photosynthesis is the process")

    @pytest.mark.asyncio
    async def test_unreadable_pdf_gets_placeholder(self, failing_extractor, sample_pdf_content):
        service = build_service(failing_extractor)

        document = await service.upload(sample_pdf_content, "scan.pdf", "application/pdf")
        processed = await service.wait_until_processed(document.id, timeout=5)

        assert processed.status == DocumentStatus.READY
        assert processed.page_count == 1
        assert processed.pages[0].text.startswith("Document Information:")
        assert "File Name: scan.pdf" in processed.pages[0].text

    @pytest.mark.asyncio
    async def test_pdf_without_text_fails(self, sample_pdf_content):
        service = build_service(StubExtractor(pages=["", "   "]))

        document = await service.upload(sample_pdf_content, "blank.pdf", "application/pdf")
        processed = await service.wait_until_processed(document.id, timeout=5)

        assert processed.status == DocumentStatus.ERROR
        assert processed.error == "No text could be extracted from the document"
        with pytest.raises(DocumentNotReadyError):
            service.get_content(document.id)

    @pytest.mark.asyncio
    async def test_content_not_available_while_processing(self, sample_pdf_content):
        extractor = BlockingExtractor()
        service = build_service(extractor)
        try:
            document = await service.upload(sample_pdf_content, "slow.pdf", "application/pdf")

            with pytest.raises(DocumentNotReadyError):
                service.get_content(document.id)
            with pytest.raises(asyncio.TimeoutError):
                await service.wait_until_processed(document.id, timeout=0.05)
        finally:
            extractor.release.set()
            await service.close()

    @pytest.mark.asyncio
    async def test_delete_during_processing_is_final(self, sample_pdf_content):
        """Test a document deleted mid-processing is not stored again when extraction finishes."""
        extractor = BlockingExtractor()
        service = build_service(extractor)
        try:
            document = await service.upload(sample_pdf_content, "slow.pdf", "application/pdf")
            service.delete(document.id)

            extractor.release.set()
            await asyncio.sleep(0.2)

            assert service.document_store.get(document.id) is None
            with pytest.raises(DocumentNotFoundError):
                service.get_document(document.id)
        finally:
            extractor.release.set()
            await service.close()

    @pytest.mark.asyncio
    async def test_storage_failure_marks_document_failed(self, stub_extractor, sample_pdf_content):
        """Test a result that cannot be stored leaves the document in error, not processing."""
        store = FailingSaveStore(successful_saves=1, failures=1)
        service = build_service(stub_extractor, document_store=store)

        document = await service.upload(sample_pdf_content, "biology.pdf", "application/pdf")
        processed = await service.wait_until_processed(document.id, timeout=5)

        assert processed.status == DocumentStatus.ERROR
        assert processed.error == "Failed to store processing result: disk full"
        assert store.saves == 3

    @pytest.mark.asyncio
    async def test_repeated_storage_failure_does_not_escape_task(self, stub_extractor, sample_pdf_content):
        store = FailingSaveStore(successful_saves=1, failures=2)
        service = build_service(stub_extractor, document_store=store)

        document = await service.upload(sample_pdf_content, "biology.pdf", "application/pdf")
        task = service._tasks[document.id]
        await asyncio.wait_for(task, timeout=5)

        assert task.exception() is None
        assert store.saves == 3

    @pytest.mark.asyncio
    async def test_delete_ready_document(self, stub_extractor, sample_pdf_content):
        service = build_service(stub_extractor)
        document = await service.upload(sample_pdf_content, "biology.pdf", "application/pdf")
        await service.wait_until_processed(document.id, timeout=5)

        service.delete(document.id)
        assert service.list_documents() == []

    @pytest.mark.asyncio
    async def test_unknown_document(self, stub_extractor):
        service = build_service(stub_extractor)

        with pytest.raises(DocumentNotFoundError):
            service.get_document("missing")
        with pytest.raises(DocumentNotFoundError):
            service.delete("missing")
        with pytest.raises(DocumentNotFoundError):
            await service.wait_until_processed("missing", timeout=0.05)

    @pytest.mark.asyncio
    async def test_close_cancels_pending_tasks(self, sample_pdf_content):
        extractor = BlockingExtractor()
        service = build_service(extractor)
        try:
            document = await service.upload(sample_pdf_content, "slow.pdf", "application/pdf")
            await service.close()

            assert service.get_document(document.id).status == DocumentStatus.PROCESSING
        finally:
            extractor.release.set()
