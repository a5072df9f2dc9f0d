"""
PostgreSQL store using pgvector.

Two tables:
- documents:        one row per uploaded PDF, carries the status machine
- document_chunks:  one row per chunk, FK to documents with ON DELETE CASCADE

WHY PGVECTOR:
- Chunk text, metadata and embeddings live in one transactional store
- Embedding backfill is a plain idempotent UPDATE
- No new infrastructure next to the Postgres the uploads already use

Similarity itself is computed by VectorScorer, not SQL, so the vector
and lexical paths rank exactly the same chunk set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np

from pdf_rag.core.errors import DocumentNotFoundError
from pdf_rag.core.models import Chunk, DocumentRecord, DocumentStatus

# Optional: Only import psycopg if available (for local dev without postgres)
try:
    import psycopg
    from pgvector.psycopg import register_vector

    PGVECTOR_AVAILABLE = True
except ImportError:
    PGVECTOR_AVAILABLE = False

logger = logging.getLogger(__name__)


@dataclass
class PgStoreConfig:
    """Configuration for the PostgreSQL store."""

    connection_string: str = "postgresql://localhost/pdf_rag"
    embedding_dim: int = 1536
    documents_table: str = "documents"
    chunks_table: str = "document_chunks"


_DOCUMENT_COLUMNS = "id, filename, url, status, size, total_chunks, error_message"
_CHUNK_COLUMNS = "id, document_id, content, page, source, filename, chunk_index, section, embedding"


def _row_to_document(row: Sequence[Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row[0],
        filename=row[1],
        url=row[2] or "",
        status=DocumentStatus(row[3]),
        size=row[4] or 0,
        total_chunks=row[5] or 0,
        error_message=row[6],
    )


def _row_to_chunk(row: Sequence[Any]) -> Chunk:
    embedding = row[8]
    return Chunk(
        id=row[0],
        document_id=row[1],
        content=row[2],
        page=row[3] or 1,
        source_url=row[4] or "",
        filename=row[5] or "Unknown",
        chunk_index=row[6] or 0,
        section=row[7],
        embedding=tuple(float(x) for x in embedding) if embedding is not None else None,
    )


class PgStore:
    """
    ChunkStore + DocumentStore on PostgreSQL.

    The connection is opened lazily on first use.
    """

    def __init__(self, config: PgStoreConfig | None = None):
        self.config = config or PgStoreConfig()
        self._conn = None

    # -- connection lifecycle ------------------------------------------

    def connect(self) -> None:
        """Establish database connection."""
        if not PGVECTOR_AVAILABLE:
            raise ImportError(
                "pgvector not available. Install with: pip install pgvector psycopg[binary]"
            )

        self._conn = psycopg.connect(self.config.connection_string, autocommit=True)
        self._conn.execute("CREATE EXTENSION IF NOT EXISTS vector")
        register_vector(self._conn)

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _db(self):
        if not self._conn:
            self.connect()
        return self._conn

    def create_schema(self) -> None:
        """Create both tables and their indexes."""
        db = self._db()
        docs, chunks = self.config.documents_table, self.config.chunks_table

        db.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {docs} (
                id TEXT PRIMARY KEY,
                filename TEXT NOT NULL,
                url TEXT NOT NULL DEFAULT '',
                status TEXT NOT NULL DEFAULT 'pending',
                size BIGINT NOT NULL DEFAULT 0,
                total_chunks INTEGER NOT NULL DEFAULT 0,
                error_message TEXT,
                created_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
        """
        )

        db.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {chunks} (
                id TEXT PRIMARY KEY,
                document_id TEXT NOT NULL REFERENCES {docs}(id) ON DELETE CASCADE,
                content TEXT NOT NULL,
                page INTEGER NOT NULL CHECK (page >= 1),
                source TEXT NOT NULL DEFAULT '',
                filename TEXT NOT NULL,
                chunk_index INTEGER NOT NULL DEFAULT 0,
                section TEXT,
                embedding vector({self.config.embedding_dim})
            )
        """
        )

        db.execute(
            f"""
            CREATE INDEX IF NOT EXISTS {chunks}_document_idx
            ON {chunks} (document_id, page, chunk_index)
        """
        )

    # -- ChunkStore ------------------------------------------------------

    def get_chunks(self, document_ids: Sequence[str]) -> list[Chunk]:
        if not document_ids:
            return []

        rows = self._db().execute(
            f"""
            SELECT {_CHUNK_COLUMNS}
            FROM {self.config.chunks_table}
            WHERE document_id = ANY(%s)
            ORDER BY document_id, page, chunk_index
            """,
            (list(document_ids),),
        ).fetchall()

        chunks = [_row_to_chunk(row) for row in rows]
        logger.debug("Fetched %d chunks for %d documents", len(chunks), len(document_ids))
        return chunks

    def put_chunks(self, chunks: Iterable[Chunk]) -> None:
        db = self._db()
        for chunk in chunks:
            embedding = np.asarray(chunk.embedding, dtype=np.float32) if chunk.has_embedding else None
            db.execute(
                f"""
                INSERT INTO {self.config.chunks_table} ({_CHUNK_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                    content = EXCLUDED.content,
                    page = EXCLUDED.page,
                    source = EXCLUDED.source,
                    filename = EXCLUDED.filename,
                    chunk_index = EXCLUDED.chunk_index,
                    section = EXCLUDED.section,
                    embedding = EXCLUDED.embedding
                """,
                (
                    chunk.id,
                    chunk.document_id,
                    chunk.content,
                    chunk.page,
                    chunk.source_url,
                    chunk.filename,
                    chunk.chunk_index,
                    chunk.section,
                    embedding,
                ),
            )

    def update_chunk_embedding(self, chunk_id: str, vector: Any) -> None:
        self._db().execute(
            f"UPDATE {self.config.chunks_table} SET embedding = %s WHERE id = %s",
            (np.asarray(vector, dtype=np.float32), chunk_id),
        )

    def delete_chunks(self, document_id: str) -> int:
        cursor = self._db().execute(
            f"DELETE FROM {self.config.chunks_table} WHERE document_id = %s",
            (document_id,),
        )
        return cursor.rowcount

    # -- DocumentStore ---------------------------------------------------

    def get_documents(
        self,
        ids: Sequence[str],
        status: DocumentStatus | None = None,
    ) -> list[DocumentRecord]:
        if not ids:
            return []

        if status is not None:
            rows = self._db().execute(
                f"""
                SELECT {_DOCUMENT_COLUMNS} FROM {self.config.documents_table}
                WHERE id = ANY(%s) AND status = %s
                ORDER BY created_at
                """,
                (list(ids), DocumentStatus(status).value),
            ).fetchall()
        else:
            rows = self._db().execute(
                f"""
                SELECT {_DOCUMENT_COLUMNS} FROM {self.config.documents_table}
                WHERE id = ANY(%s)
                ORDER BY created_at
                """,
                (list(ids),),
            ).fetchall()

        return [_row_to_document(row) for row in rows]

    def list_documents(self, status: DocumentStatus | None = None) -> list[DocumentRecord]:
        if status is not None:
            rows = self._db().execute(
                f"SELECT {_DOCUMENT_COLUMNS} FROM {self.config.documents_table} "
                f"WHERE status = %s ORDER BY created_at",
                (DocumentStatus(status).value,),
            ).fetchall()
        else:
            rows = self._db().execute(
                f"SELECT {_DOCUMENT_COLUMNS} FROM {self.config.documents_table} ORDER BY created_at"
            ).fetchall()
        return [_row_to_document(row) for row in rows]

    def add_document(self, record: DocumentRecord) -> None:
        self._db().execute(
            f"""
            INSERT INTO {self.config.documents_table} ({_DOCUMENT_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE SET
                filename = EXCLUDED.filename,
                url = EXCLUDED.url,
                status = EXCLUDED.status,
                size = EXCLUDED.size,
                total_chunks = EXCLUDED.total_chunks,
                error_message = EXCLUDED.error_message
            """,
            (
                record.id,
                record.filename,
                record.url,
                record.status.value,
                record.size,
                record.total_chunks,
                record.error_message,
            ),
        )

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        **extra: Any,
    ) -> DocumentRecord:
        """Read, transition in Python (the table enforces the rules), write back."""
        db = self._db()
        with db.transaction():
            row = db.execute(
                f"SELECT {_DOCUMENT_COLUMNS} FROM {self.config.documents_table} "
                f"WHERE id = %s FOR UPDATE",
                (document_id,),
            ).fetchone()
            if row is None:
                raise DocumentNotFoundError(f"Unknown document: {document_id}")

            record = _row_to_document(row)
            record.transition_to(status, **extra)

            db.execute(
                f"""
                UPDATE {self.config.documents_table}
                SET status = %s, total_chunks = %s, error_message = %s
                WHERE id = %s
                """,
                (record.status.value, record.total_chunks, record.error_message, document_id),
            )
        return record

    def delete_document(self, document_id: str) -> bool:
        cursor = self._db().execute(
            f"DELETE FROM {self.config.documents_table} WHERE id = %s",
            (document_id,),
        )
        return cursor.rowcount > 0
