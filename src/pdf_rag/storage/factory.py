"""
Store factory.

Follows the same pattern as get_embedding_provider: callers ask for a
backend by name and get something that satisfies ChunkStore and
DocumentStore.
"""

from __future__ import annotations

import logging

from pdf_rag.storage.json_file import JsonFileStore
from pdf_rag.storage.memory import InMemoryStore
from pdf_rag.storage.postgres import PGVECTOR_AVAILABLE, PgStore, PgStoreConfig

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "file", "postgres")


def get_store(
    backend: str = "memory",
    path: str = ".pdf_rag_store.json",
    database_url: str | None = None,
    embedding_dim: int = 1536,
) -> InMemoryStore | JsonFileStore | PgStore:
    """
    Build the store for a backend name.

    Args:
        backend: "memory", "file" or "postgres"
        path: JSON file for the file backend
        database_url: Connection string for the postgres backend
        embedding_dim: Vector column size for the postgres backend

    Raises:
        ValueError: unknown backend
        ImportError: postgres requested without psycopg/pgvector installed
    """
    if backend == "memory":
        return InMemoryStore()
    if backend == "file":
        return JsonFileStore(path)
    if backend == "postgres":
        if not PGVECTOR_AVAILABLE:
            raise ImportError(
                "pgvector not available. Install with: pip install pdf-rag-engine[postgres]"
            )
        config = PgStoreConfig(embedding_dim=embedding_dim)
        if database_url:
            config.connection_string = database_url
        store = PgStore(config)
        store.create_schema()
        return store

    raise ValueError(f"Unknown store backend {backend!r}, expected one of {STORE_BACKENDS}")
