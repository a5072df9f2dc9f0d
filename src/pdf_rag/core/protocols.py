"""
Core protocols defining contracts for the external collaborators.

The engine never talks to a concrete database or API client. Stores and
providers are injected, which keeps every scorer and the synthesizer
testable with in-memory doubles.

PATTERN:
- Protocol defines the contract
- Multiple implementations possible (storage/, embeddings/, generation/)
- Factory functions for instantiation
- Test doubles for fast unit tests
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Protocol, Sequence, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from pdf_rag.core.models import Chunk, DocumentRecord, DocumentStatus


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations:
    - OpenAIEmbeddings (production)
    - MockEmbeddings (testing)
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# GENERATION PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class GenerationProvider(Protocol):
    """
    Contract for text generation.

    Implementations:
    - OpenAIGenerator (production, langchain-openai)
    - StaticGenerator (testing)
    """

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Return the model's text for one system + user prompt pair."""
        ...


# ---------------------------------------------------------------------------
# STORE PROTOCOLS
# ---------------------------------------------------------------------------


@runtime_checkable
class ChunkStore(Protocol):
    """
    Contract for chunk persistence.

    Implementations:
    - PgStore (PostgreSQL + pgvector)
    - JsonFileStore (single JSON file, used by the CLI)
    - InMemoryStore (testing/development)
    """

    def get_chunks(self, document_ids: Sequence[str]) -> list[Chunk]:
        """Return chunks of the given documents ordered by document, page, chunk index."""
        ...

    def put_chunks(self, chunks: Iterable[Chunk]) -> None:
        """Insert or replace chunks by id."""
        ...

    def update_chunk_embedding(self, chunk_id: str, vector: Any) -> None:
        """Attach an embedding to a stored chunk. Must be idempotent."""
        ...

    def delete_chunks(self, document_id: str) -> int:
        """Delete every chunk of a document. Returns the number removed."""
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """Contract for document metadata persistence."""

    def get_documents(
        self,
        ids: Sequence[str],
        status: DocumentStatus | None = None,
    ) -> list[DocumentRecord]:
        """Return the known documents among ids, optionally filtered by status."""
        ...

    def list_documents(self, status: DocumentStatus | None = None) -> list[DocumentRecord]:
        """Return every document, optionally filtered by status."""
        ...

    def add_document(self, record: DocumentRecord) -> None:
        """Insert or replace a document record."""
        ...

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        **extra: Any,
    ) -> DocumentRecord:
        """Apply a state-machine transition and persist it."""
        ...

    def delete_document(self, document_id: str) -> bool:
        """Remove a document record. Returns False if it did not exist."""
        ...
