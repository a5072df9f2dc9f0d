"""
Chunking module - split extracted page texts into retrievable chunks.
"""

from pdf_rag.chunking.chunker import (
    DEFAULT_CHUNK_SIZE,
    TextChunker,
    chunk_pages,
    make_chunk_id,
    split_page,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "TextChunker",
    "chunk_pages",
    "make_chunk_id",
    "split_page",
]
