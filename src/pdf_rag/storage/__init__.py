"""
Storage module - chunk and document persistence adapters.

Pattern: Protocol (core.protocols) -> implementations -> factory

- InMemoryStore: tests and development
- JsonFileStore: one JSON file, used by the CLI
- PgStore: PostgreSQL + pgvector (optional extra)
- get_store(): pick one by name
"""

from pdf_rag.storage.memory import InMemoryStore
from pdf_rag.storage.json_file import JsonFileStore
from pdf_rag.storage.postgres import PGVECTOR_AVAILABLE, PgStore, PgStoreConfig
from pdf_rag.storage.factory import STORE_BACKENDS, get_store

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "PGVECTOR_AVAILABLE",
    "PgStore",
    "PgStoreConfig",
    "STORE_BACKENDS",
    "get_store",
]
