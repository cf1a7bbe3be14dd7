"""FAQ and question history persistence."""
import json
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Tuple

from academic_assistant.exceptions import StorageError
from academic_assistant.models.faq import FAQItem, QuestionHistoryEntry
from academic_assistant.utils.logger import logger


class FAQRepository(ABC):
    """Loads and saves the FAQ list together with the question history."""

    @abstractmethod
    def load(self) -> Tuple[List[FAQItem], List[QuestionHistoryEntry]]:
        """Return stored FAQ items and history, newest history entry first."""

    @abstractmethod
    def save(self, faqs: List[FAQItem], history: List[QuestionHistoryEntry]) -> None:
        """Replace the stored state."""


class InMemoryFAQRepository(FAQRepository):
    """Keeps state for the lifetime of the process."""

    def __init__(self):
        self._faqs: List[FAQItem] = []
        self._history: List[QuestionHistoryEntry] = []
        self._lock = threading.Lock()

    def load(self) -> Tuple[List[FAQItem], List[QuestionHistoryEntry]]:
        with self._lock:
            return list(self._faqs), list(self._history)

    def save(self, faqs: List[FAQItem], history: List[QuestionHistoryEntry]) -> None:
        with self._lock:
            self._faqs = list(faqs)
            self._history = list(history)


class JsonFAQRepository(FAQRepository):
    """Stores FAQ state in one JSON file."""

    def __init__(self, path: str):
        """
        Initialize file-backed repository.

        Args:
            path: JSON file location. Created on first save.
        """
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> Tuple[List[FAQItem], List[QuestionHistoryEntry]]:
        """
        Read FAQ state from disk.

        Returns:
            Tuple of (faqs, history), both empty if the file does not exist

        Raises:
            StorageError: If the file exists but cannot be parsed
        """
        with self._lock:
            if not self.path.exists():
                return [], []
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                faqs = [FAQItem.from_dict(item) for item in data.get("faqs", [])]
                history = [QuestionHistoryEntry.from_dict(item) for item in data.get("history", [])]
            except (OSError, ValueError, KeyError) as e:
                raise StorageError(f"Failed to load FAQ store {self.path}: {str(e)}") from e

        logger.info(f"Loaded {len(faqs)} FAQ items and {len(history)} history entries from {self.path}")
        return faqs, history

    def save(self, faqs: List[FAQItem], history: List[QuestionHistoryEntry]) -> None:
        payload = {
            "faqs": [faq.to_dict() for faq in faqs],
            "history": [entry.to_dict() for entry in history],
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(payload), encoding="utf-8")
                os.replace(tmp_path, self.path)
            except OSError as e:
                raise StorageError(f"Failed to write FAQ store {self.path}: {str(e)}") from e
