"""
Error taxonomy for the RAG engine.

Three families, each handled differently by callers:

- PreconditionError: the caller asked for something invalid. Always raised.
- ProviderUnavailableError: an external provider is missing or failed.
  Never reaches the caller of answer(); it triggers the next fallback.
- IngestionError: chunking or persistence failed while ingesting. Raised
  after the document has been moved to FAILED.

No-result situations are NOT errors - they come back as a RagResult with an
explanatory answer.
"""

from __future__ import annotations


class RagError(Exception):
    """Base class for every error raised by pdf_rag."""


# ---------------------------------------------------------------------------
# PRECONDITION ERRORS (surfaced to the caller)
# ---------------------------------------------------------------------------


class PreconditionError(RagError):
    """The request violates a precondition of the engine."""


class EmptyQueryError(PreconditionError):
    """The query is blank."""


class DimensionMismatchError(PreconditionError):
    """Query and chunk embeddings live in different vector spaces."""

    def __init__(self, chunk_id: str, expected: int, actual: int):
        self.chunk_id = chunk_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension mismatch for chunk {chunk_id}: "
            f"query has {expected} dimensions, chunk has {actual}"
        )


class InvalidStatusTransition(PreconditionError):
    """A document status change not allowed by the state machine."""

    def __init__(self, document_id: str, current: str, requested: str):
        self.document_id = document_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Document {document_id}: cannot move from '{current}' to '{requested}'"
        )


class DocumentNotFoundError(PreconditionError):
    """The referenced document is not known to the document store."""


# ---------------------------------------------------------------------------
# PROVIDER ERRORS (trigger fallbacks, logged internally)
# ---------------------------------------------------------------------------


class ProviderUnavailableError(RagError):
    """An external provider is unconfigured or failed."""


class VectorSearchUnavailable(ProviderUnavailableError):
    """Vector search cannot run: no provider, no embedded chunks, or a degenerate query vector."""


class EmbeddingProviderError(ProviderUnavailableError):
    """The embedding provider call failed."""


class GenerationProviderError(ProviderUnavailableError):
    """The generation provider call failed."""


# ---------------------------------------------------------------------------
# INGESTION ERRORS
# ---------------------------------------------------------------------------


class IngestionError(RagError):
    """Chunking or chunk persistence failed for a document."""

    def __init__(self, document_id: str, message: str):
        self.document_id = document_id
        super().__init__(f"Ingestion failed for document {document_id}: {message}")
