"""
In-memory chunk + document store (testing/development).

Implements both ChunkStore and DocumentStore without a database.
A single lock guards the maps; chunks themselves are immutable, so
readers get stable objects even while another thread writes.
"""

from __future__ import annotations

import threading
from typing import Any, Iterable, Sequence

import numpy as np

from pdf_rag.core.errors import DocumentNotFoundError
from pdf_rag.core.models import Chunk, DocumentRecord, DocumentStatus


def _copy(record: DocumentRecord) -> DocumentRecord:
    return DocumentRecord.from_dict(record.to_dict())


class InMemoryStore:
    """Dict-backed store. Returned records are copies; mutate via update_status."""

    def __init__(self) -> None:
        self._chunks: dict[str, Chunk] = {}
        self._documents: dict[str, DocumentRecord] = {}
        self._lock = threading.Lock()

    # -- change hook (JsonFileStore persists here) -----------------------

    def _changed(self) -> None:
        pass

    # -- ChunkStore ------------------------------------------------------

    def get_chunks(self, document_ids: Sequence[str]) -> list[Chunk]:
        wanted = set(document_ids)
        with self._lock:
            chunks = [c for c in self._chunks.values() if c.document_id in wanted]
        return sorted(chunks, key=lambda c: (c.document_id, c.page, c.chunk_index))

    def put_chunks(self, chunks: Iterable[Chunk]) -> None:
        with self._lock:
            for chunk in chunks:
                self._chunks[chunk.id] = chunk
            self._changed()

    def update_chunk_embedding(self, chunk_id: str, vector: Any) -> None:
        with self._lock:
            chunk = self._chunks.get(chunk_id)
            if chunk is None:
                return
            self._chunks[chunk_id] = chunk.with_embedding(np.asarray(vector).tolist())
            self._changed()

    def delete_chunks(self, document_id: str) -> int:
        with self._lock:
            doomed = [cid for cid, c in self._chunks.items() if c.document_id == document_id]
            for cid in doomed:
                del self._chunks[cid]
            if doomed:
                self._changed()
        return len(doomed)

    # -- DocumentStore ---------------------------------------------------

    def get_documents(
        self,
        ids: Sequence[str],
        status: DocumentStatus | None = None,
    ) -> list[DocumentRecord]:
        with self._lock:
            records = [self._documents[i] for i in ids if i in self._documents]
            return [_copy(r) for r in records if status is None or r.status == status]

    def list_documents(self, status: DocumentStatus | None = None) -> list[DocumentRecord]:
        with self._lock:
            return [
                _copy(r) for r in self._documents.values()
                if status is None or r.status == status
            ]

    def add_document(self, record: DocumentRecord) -> None:
        with self._lock:
            self._documents[record.id] = _copy(record)
            self._changed()

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        **extra: Any,
    ) -> DocumentRecord:
        with self._lock:
            record = self._documents.get(document_id)
            if record is None:
                raise DocumentNotFoundError(f"Unknown document: {document_id}")
            record.transition_to(status, **extra)
            self._changed()
            return _copy(record)

    def delete_document(self, document_id: str) -> bool:
        with self._lock:
            existed = self._documents.pop(document_id, None) is not None
            if existed:
                self._changed()
        return existed
