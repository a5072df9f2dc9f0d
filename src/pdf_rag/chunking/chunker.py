"""
Chunker - Single Responsibility: split page texts into bounded chunks.

Greedy word packing per page:
- pages whose trimmed text is empty are skipped (page numbers still advance)
- words are appended to a buffer joined by single spaces
- when the next word would push the buffer past chunk_size, the buffer
  is emitted and a new one starts with that word
- a word longer than chunk_size is emitted on its own, never split

Chunk ids are derived from (document_id, page, chunk_index), so chunking
the same input twice yields identical ids and content.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pdf_rag.core.models import Chunk

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500


def make_chunk_id(document_id: str, page: int, chunk_index: int) -> str:
    """Deterministic chunk id."""
    return f"chunk_{document_id}_{page}_{chunk_index}"


def split_page(text: str, chunk_size: int) -> list[str]:
    """
    Pack the whitespace-delimited words of one page into chunk strings.

    This is a PURE FUNCTION - the unit every chunking property is tested on.
    """
    pieces: list[str] = []
    buffer = ""

    for word in text.split():
        if buffer and len(buffer) + 1 + len(word) > chunk_size:
            pieces.append(buffer)
            buffer = word
        else:
            buffer = f"{buffer} {word}" if buffer else word

    if buffer:
        pieces.append(buffer)

    return pieces


class TextChunker:
    """
    Page-aware chunker with a fixed chunk size.

    Injected into RagService so ingestion can be tested with a failing
    chunker (see the state machine tests).
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def chunk(
        self,
        page_texts: Sequence[str],
        filename: str,
        document_id: str,
        url: str,
    ) -> list[Chunk]:
        """
        Split ordered page texts into chunks.

        Args:
            page_texts: One string per page, page 1 first
            filename: Original filename, carried for source attribution
            document_id: Parent document id
            url: Public URL of the document

        Returns:
            Chunks ordered by page then chunk index
        """
        chunks: list[Chunk] = []

        for page_number, page_text in enumerate(page_texts, start=1):
            if not page_text or not page_text.strip():
                continue

            for chunk_index, content in enumerate(split_page(page_text, self.chunk_size)):
                chunks.append(
                    Chunk(
                        id=make_chunk_id(document_id, page_number, chunk_index),
                        document_id=document_id,
                        content=content,
                        page=page_number,
                        source_url=url,
                        filename=filename,
                        chunk_index=chunk_index,
                        section=f"Page {page_number}",
                    )
                )

        logger.debug(
            "Chunked %s into %d chunks across %d pages",
            filename, len(chunks), len(page_texts),
        )
        return chunks


def chunk_pages(
    page_texts: Sequence[str],
    filename: str,
    document_id: str,
    url: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[Chunk]:
    """Functional shortcut for TextChunker(chunk_size).chunk(...)."""
    return TextChunker(chunk_size).chunk(page_texts, filename, document_id, url)
