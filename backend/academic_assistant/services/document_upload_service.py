"""Document upload service for handling file uploads and background processing."""
import asyncio
import time
import uuid
from typing import Dict, Iterable, List, Optional

from academic_assistant.exceptions import (
    DocumentNotFoundError,
    DocumentNotReadyError,
    ValidationError,
)
from academic_assistant.models.document import Document, DocumentStatus, Page
from academic_assistant.services.document_processor import DocumentProcessor, ProcessedDocument
from academic_assistant.services.document_store import DocumentStore
from academic_assistant.utils.logger import logger
from academic_assistant.utils.metrics import DOCUMENTS_PROCESSED, DOCUMENTS_UPLOADED
from academic_assistant.validators import PDF_CONTENT_TYPE, validate_upload


class DocumentUploadService:
    """Accepts uploads and processes them as background tasks keyed by document id."""

    def __init__(
        self,
        document_store: DocumentStore,
        document_processor: DocumentProcessor,
        max_file_size_mb: float = 10,
        allowed_content_types: Iterable[str] = (PDF_CONTENT_TYPE,),
        poll_interval: float = 0.1,
    ):
        """
        Initialize upload service.

        Args:
            document_store: Persistence for documents
            document_processor: Extraction, cleaning and chunking pipeline
            max_file_size_mb: Upload size cap in megabytes
            allowed_content_types: Accepted media types
            poll_interval: Seconds between status checks in wait_until_processed
        """
        self.document_store = document_store
        self.document_processor = document_processor
        self.max_file_size_mb = max_file_size_mb
        self.allowed_content_types = tuple(allowed_content_types)
        self.poll_interval = poll_interval
        self._tasks: Dict[str, asyncio.Task] = {}

    async def upload(
        self,
        file_content: bytes,
        filename: str,
        content_type: Optional[str],
    ) -> Document:
        """
        Validate an upload, store it as processing and schedule processing.

        Args:
            file_content: Raw file content as bytes
            filename: Original filename
            content_type: Declared media type

        Returns:
            The stored document, still in processing state

        Raises:
            FileTypeNotSupportedError: If the file is not a PDF
            FileSizeExceededError: If the file is over the size cap
        """
        try:
            validate_upload(
                content_type,
                len(file_content),
                self.max_file_size_mb,
                self.allowed_content_types,
            )
        except ValidationError as e:
            DOCUMENTS_UPLOADED.labels(outcome="rejected").inc()
            logger.info(f"Upload rejected for {filename}: {str(e)}")
            raise

        document = Document(
            id=str(uuid.uuid4()),
            name=filename or "document.pdf",
            size_bytes=len(file_content),
        )
        self.document_store.save(document)
        DOCUMENTS_UPLOADED.labels(outcome="accepted").inc()

        task = asyncio.create_task(self._process(document, file_content))
        self._tasks[document.id] = task
        task.add_done_callback(lambda _t, doc_id=document.id: self._tasks.pop(doc_id, None))

        logger.info(
            f"Document accepted for processing: {document.id}",
            extra={"document_id": document.id},
        )
        return document

    async def _process(self, document: Document, file_content: bytes) -> None:
        start_time = time.time()
        try:
            result = await asyncio.to_thread(
                self.document_processor.process,
                file_content,
                document.id,
                document.name,
                document.size_bytes,
                document.uploaded_at,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                f"Document processing failed for {document.id}: {str(e)}",
                exc_info=True,
                extra={"document_id": document.id},
            )
            self._complete(document.id, error=str(e))
            return

        if not self._complete(document.id, result=result):
            return
        logger.info(
            f"Document ready: {document.id}",
            extra={
                "document_id": document.id,
                "chunk_count": len(result.chunks),
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )

    def _complete(
        self,
        document_id: str,
        result: Optional[ProcessedDocument] = None,
        error: Optional[str] = None,
    ) -> bool:
        """
        Store the processing outcome, falling back to an error status.

        Returns:
            True if the outcome was stored as given
        """
        try:
            self._finish(document_id, result=result, error=error)
            return True
        except Exception as e:
            logger.error(
                f"Failed to store processing result for {document_id}: {str(e)}",
                exc_info=True,
                extra={"document_id": document_id},
            )
            failure = f"Failed to store processing result: {str(e)}"

        try:
            self._finish(document_id, error=failure)
        except Exception as e:
            logger.error(
                f"Failed to mark document {document_id} as failed: {str(e)}",
                exc_info=True,
                extra={"document_id": document_id},
            )
        return False

    def _finish(
        self,
        document_id: str,
        result: Optional[ProcessedDocument] = None,
        error: Optional[str] = None,
    ) -> None:
        current = self.document_store.get(document_id)
        if current is None:
            logger.info(
                f"Document {document_id} was deleted during processing, discarding result",
                extra={"document_id": document_id},
            )
            return
        if current.status != DocumentStatus.PROCESSING:
            return

        if result is not None:
            current.mark_ready(
                pages=result.pages,
                chunks=result.chunks,
                quality_score=result.quality_score,
                improvements=result.improvements,
                sections=result.sections,
            )
        else:
            current.mark_failed(error or "Document processing failed")

        self.document_store.save(current)
        DOCUMENTS_PROCESSED.labels(status=current.status.value).inc()

    def get_document(self, document_id: str) -> Document:
        """Return a document or raise DocumentNotFoundError."""
        document = self.document_store.get(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        return document

    def list_documents(self) -> List[Document]:
        return self.document_store.list()

    def get_content(self, document_id: str) -> List[Page]:
        """
        Return the cleaned pages of a ready document.

        Raises:
            DocumentNotFoundError: If the id is unknown
            DocumentNotReadyError: If the document is processing or failed
        """
        document = self.get_document(document_id)
        if document.status != DocumentStatus.READY:
            raise DocumentNotReadyError("Document not ready")
        return list(document.pages)

    def delete(self, document_id: str) -> None:
        """
        Delete a document and cancel its pending processing.

        Raises:
            DocumentNotFoundError: If the id is unknown
        """
        task = self._tasks.pop(document_id, None)
        if task is not None and not task.done():
            task.cancel()
        if not self.document_store.delete(document_id):
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        logger.info(f"Document deleted: {document_id}", extra={"document_id": document_id})

    async def wait_until_processed(
        self,
        document_id: str,
        timeout: float = 30.0,
        poll_interval: Optional[float] = None,
    ) -> Document:
        """
        Poll the store until a document leaves the processing state.

        Args:
            document_id: Document to wait for
            timeout: Maximum seconds to wait
            poll_interval: Seconds between checks, defaults to the service setting

        Returns:
            The document in ready or error state

        Raises:
            DocumentNotFoundError: If the document disappears
            asyncio.TimeoutError: If it is still processing after the timeout
        """
        interval = poll_interval if poll_interval is not None else self.poll_interval
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            document = self.get_document(document_id)
            if document.status != DocumentStatus.PROCESSING:
                return document
            if loop.time() >= deadline:
                raise asyncio.TimeoutError(
                    f"Document {document_id} still processing after {timeout} seconds"
                )
            await asyncio.sleep(interval)

    async def close(self) -> None:
        """Cancel pending processing tasks."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
