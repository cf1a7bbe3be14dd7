"""Sentence-aligned chunking of page text."""
import re
from typing import List, Optional

from academic_assistant.models.document import Chunk, Page

SENTENCE_PATTERN = re.compile(r"[^.!?]*(?:[.!?]+|\Z)")
MAX_KEYWORDS = 20


def split_sentences(text: str) -> List[re.Match]:
    """Split text into contiguous sentence spans, skipping whitespace-only ones."""
    return [m for m in SENTENCE_PATTERN.finditer(text) if m.group(0).strip()]


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> List[str]:
    """
    Extract chunk keywords.

    Args:
        text: Chunk content
        limit: Maximum number of keywords to keep

    Returns:
        Distinct lowercase tokens longer than 3 characters that are not
        purely numeric, in order of first appearance
    """
    keywords: List[str] = []
    for token in text.lower().split():
        word = token.strip(".,;:!?\"'()[]{}<>…–—-*•")
        if len(word) <= 3 or word.isdigit() or word in keywords:
            continue
        keywords.append(word)
        if len(keywords) >= limit:
            break
    return keywords


class Chunker:
    """Splits per-page text into bounded, sentence-aligned chunks."""

    def __init__(self, max_chunk_size: int = 500):
        """
        Initialize chunker.

        Args:
            max_chunk_size: Maximum chunk length in characters. A single
                sentence longer than this still becomes its own chunk.
        """
        self.max_chunk_size = max_chunk_size

    def chunk(
        self,
        pages: List[Page],
        document_id: str,
        max_chunk_size: Optional[int] = None,
    ) -> List[Chunk]:
        """
        Chunk pages in reading order.

        Chunk content is a verbatim slice of the page text, so joining the
        chunks of a document reproduces its pages up to whitespace.

        Args:
            pages: Cleaned pages in page order
            document_id: Owning document id
            max_chunk_size: Overrides the size bound for this call

        Returns:
            Chunks with a document-wide increasing chunk_index
        """
        limit = max_chunk_size if max_chunk_size is not None else self.max_chunk_size
        chunks: List[Chunk] = []

        for page in pages:
            text = page.text
            start = None
            end = None

            for sentence in split_sentences(text):
                if start is not None:
                    candidate = text[start:sentence.end()].strip()
                    if len(candidate) > limit:
                        chunks.append(self._make_chunk(text[start:end], page, document_id, len(chunks)))
                        start = None
                if start is None:
                    start = sentence.start()
                end = sentence.end()

            if start is not None:
                chunks.append(self._make_chunk(text[start:end], page, document_id, len(chunks)))

        return chunks

    @staticmethod
    def _make_chunk(content: str, page: Page, document_id: str, chunk_index: int) -> Chunk:
        content = content.strip()
        return Chunk(
            document_id=document_id,
            page=page.page_number,
            chunk_index=chunk_index,
            content=content,
            keywords=extract_keywords(content),
        )
