"""Document persistence."""
import copy
import json
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from academic_assistant.exceptions import StorageError
from academic_assistant.models.document import Chunk, Document, DocumentStatus
from academic_assistant.utils.logger import logger

INTERRUPTED_MESSAGE = "Processing interrupted by restart"


class DocumentStore(ABC):
    """Key-value store of documents keyed by id."""

    @abstractmethod
    def save(self, document: Document) -> None:
        """Insert or replace a document."""

    @abstractmethod
    def get(self, document_id: str) -> Optional[Document]:
        """Return the document or None if unknown."""

    @abstractmethod
    def list(self) -> List[Document]:
        """Return all documents in upload order."""

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Remove a document. Returns False if it was unknown."""

    def exists(self, document_id: str) -> bool:
        return self.get(document_id) is not None

    def chunks_for(self, document_id: str) -> List[Chunk]:
        """Return the chunks belonging to a document, in chunk_index order."""
        document = self.get(document_id)
        return list(document.chunks) if document else []

    def ready_documents(self) -> List[Document]:
        return [d for d in self.list() if d.status == DocumentStatus.READY]


class InMemoryDocumentStore(DocumentStore):
    """Process-local store. Mutations are serialized with a lock."""

    def __init__(self):
        self._documents: Dict[str, Document] = {}
        self._lock = threading.Lock()

    def save(self, document: Document) -> None:
        with self._lock:
            self._documents[document.id] = copy.copy(document)

    def get(self, document_id: str) -> Optional[Document]:
        with self._lock:
            document = self._documents.get(document_id)
            return copy.copy(document) if document else None

    def list(self) -> List[Document]:
        with self._lock:
            return [copy.copy(d) for d in self._documents.values()]

    def delete(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None


class JsonFileDocumentStore(InMemoryDocumentStore):
    """In-memory store persisted to a single JSON file after every mutation."""

    def __init__(self, path: str):
        """
        Initialize file-backed store.

        Documents persisted while still processing have lost their background
        task, so they are marked as failed on load.

        Args:
            path: JSON file location. Created on first write.

        Raises:
            StorageError: If an existing file cannot be read
        """
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            for item in data.get("documents", []):
                document = Document.from_dict(item)
                self._documents[document.id] = document
        except (OSError, ValueError, KeyError) as e:
            raise StorageError(f"Failed to load document store {self.path}: {str(e)}") from e

        interrupted = [d for d in self._documents.values() if d.status == DocumentStatus.PROCESSING]
        for document in interrupted:
            document.mark_failed(INTERRUPTED_MESSAGE)
        if interrupted:
            self._flush()
            logger.warning(f"Marked {len(interrupted)} interrupted documents as failed in {self.path}")
        logger.info(f"Loaded {len(self._documents)} documents from {self.path}")

    def _flush(self) -> None:
        payload = {"documents": [d.to_dict() for d in self._documents.values()]}
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write document store {self.path}: {str(e)}") from e

    def save(self, document: Document) -> None:
        with self._lock:
            previous = self._documents.get(document.id)
            self._documents[document.id] = copy.copy(document)
            try:
                self._flush()
            except StorageError:
                # Memory must not run ahead of the file
                if previous is None:
                    self._documents.pop(document.id, None)
                else:
                    self._documents[document.id] = previous
                raise

    def delete(self, document_id: str) -> bool:
        with self._lock:
            previous = self._documents.pop(document_id, None)
            if previous is None:
                return False
            try:
                self._flush()
            except StorageError:
                self._documents[document_id] = previous
                raise
            return True
