"""
Domain models for the RAG engine.

Single responsibility: define the shapes that flow between the chunker,
the stores, the scorers and the synthesizer.

    page texts -> Chunk (persisted) -> ScoredChunk (transient ranking)

DocumentRecord carries the document status state machine:

    pending -> processing -> completed
                         \\-> failed

completed and failed are terminal. Only an explicit new ingestion may
restart a terminal document (DocumentRecord.restart).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pdf_rag.core.errors import InvalidStatusTransition


# ---------------------------------------------------------------------------
# CHUNKS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Chunk:
    """
    A bounded span of a document's text, tagged with its page.

    Frozen: chunks never change after ingestion. Adding an embedding
    later produces a new Chunk via with_embedding().
    """

    id: str
    document_id: str
    content: str
    page: int
    source_url: str
    filename: str
    chunk_index: int = 0
    section: str | None = None
    embedding: tuple[float, ...] | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"Chunk {self.id}: page must be >= 1, got {self.page}")

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None and len(self.embedding) > 0

    def with_embedding(self, vector: Any) -> "Chunk":
        """Return a copy carrying the given embedding vector."""
        return Chunk(
            id=self.id,
            document_id=self.document_id,
            content=self.content,
            page=self.page,
            source_url=self.source_url,
            filename=self.filename,
            chunk_index=self.chunk_index,
            section=self.section,
            embedding=tuple(float(x) for x in vector),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "document_id": self.document_id,
            "content": self.content,
            "page": self.page,
            "source_url": self.source_url,
            "filename": self.filename,
            "chunk_index": self.chunk_index,
            "section": self.section,
            "embedding": list(self.embedding) if self.embedding is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Chunk":
        embedding = data.get("embedding")
        return cls(
            id=data["id"],
            document_id=str(data["document_id"]),
            content=data["content"],
            page=int(data.get("page") or 1),
            source_url=data.get("source_url", ""),
            filename=data.get("filename") or "Unknown",
            chunk_index=int(data.get("chunk_index", 0)),
            section=data.get("section"),
            embedding=tuple(embedding) if embedding is not None else None,
        )


@dataclass(frozen=True)
class ScoredChunk:
    """A chunk with the relevance score a scorer assigned to it."""

    chunk: Chunk
    score: float


# ---------------------------------------------------------------------------
# DOCUMENTS
# ---------------------------------------------------------------------------


class DocumentStatus(str, Enum):
    """Lifecycle of an uploaded document."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.COMPLETED, DocumentStatus.FAILED)


STATUS_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.PROCESSING}),
    DocumentStatus.PROCESSING: frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED}),
    DocumentStatus.COMPLETED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


def can_transition(current: DocumentStatus, requested: DocumentStatus) -> bool:
    """Check the transition table."""
    return requested in STATUS_TRANSITIONS[current]


@dataclass
class DocumentRecord:
    """
    Metadata for an uploaded document.

    A document exclusively owns its chunks; deleting the record cascades
    to the chunk store (see RagService.delete_document).
    """

    id: str
    filename: str
    url: str
    status: DocumentStatus = DocumentStatus.PENDING
    size: int = 0
    total_chunks: int = 0
    error_message: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def transition_to(
        self,
        status: DocumentStatus,
        *,
        total_chunks: int | None = None,
        error_message: str | None = None,
    ) -> None:
        """
        Move to a new status, enforcing the state machine.

        Raises:
            InvalidStatusTransition: if the table does not allow the move.
        """
        status = DocumentStatus(status)
        if not can_transition(self.status, status):
            raise InvalidStatusTransition(self.id, self.status.value, status.value)

        self.status = status
        if status is DocumentStatus.COMPLETED:
            self.total_chunks = total_chunks if total_chunks is not None else self.total_chunks
            self.error_message = None
        elif status is DocumentStatus.FAILED:
            self.error_message = error_message or "Unknown error"

    def restart(self) -> None:
        """
        Return a terminal document to PENDING for an explicit re-ingestion.

        Kept outside the transition table. Only RagService.ingest calls it.
        """
        if not self.status.is_terminal:
            raise InvalidStatusTransition(self.id, self.status.value, DocumentStatus.PENDING.value)
        self.status = DocumentStatus.PENDING
        self.total_chunks = 0
        self.error_message = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "filename": self.filename,
            "url": self.url,
            "status": self.status.value,
            "size": self.size,
            "total_chunks": self.total_chunks,
            "error_message": self.error_message,
            "extra": dict(self.extra),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentRecord":
        return cls(
            id=str(data["id"]),
            filename=data["filename"],
            url=data.get("url", ""),
            status=DocumentStatus(data.get("status", DocumentStatus.PENDING.value)),
            size=int(data.get("size", 0)),
            total_chunks=int(data.get("total_chunks", 0)),
            error_message=data.get("error_message"),
            extra=dict(data.get("extra") or {}),
        )
