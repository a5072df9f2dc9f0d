"""
Engine configuration.

Loads settings from environment variables, the same way the observability
config does. Every field has a default, so RagConfig() works out of the box.

Environment Variables:
    RAG_CHUNK_SIZE: Max characters per chunk (default: 500)
    RAG_DEFAULT_LIMIT: Chunks returned per query (default: 5)
    RAG_MIN_SIMILARITY: Cosine floor for the vector path (default: 0.0)
    RAG_EMBED_ON_INGEST: Embed chunks while ingesting (default: false)
    RAG_BACKFILL_EMBEDDINGS: Embed missing chunks after a query (default: false)
    RAG_LAST_RESORT: Return leading chunks when nothing matches (default: true)
    RAG_EMBEDDING_MODEL: OpenAI embedding model (default: text-embedding-3-small)
    RAG_GENERATION_MODEL: OpenAI chat model (default: gpt-4o-mini)
    RAG_STORE: memory, file or postgres (default: memory)
    RAG_STORE_PATH: JSON file for the file store (default: .pdf_rag_store.json)
    DATABASE_URL: PostgreSQL connection string for the postgres store
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class RagConfig:
    """Runtime settings for RagService and its collaborators."""

    chunk_size: int = 500
    default_limit: int = 5
    min_similarity: float = 0.0
    embed_on_ingest: bool = False
    backfill_embeddings: bool = False
    last_resort: bool = True
    embedding_model: str = "text-embedding-3-small"
    generation_model: str = "gpt-4o-mini"
    store_backend: str = "memory"
    store_path: str = ".pdf_rag_store.json"
    database_url: str = "postgresql://localhost/pdf_rag"

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.default_limit <= 0:
            raise ValueError(f"default_limit must be positive, got {self.default_limit}")

    @classmethod
    def from_env(cls) -> "RagConfig":
        """Load config from environment variables."""
        return cls(
            chunk_size=int(os.environ.get("RAG_CHUNK_SIZE", "500")),
            default_limit=int(os.environ.get("RAG_DEFAULT_LIMIT", "5")),
            min_similarity=float(os.environ.get("RAG_MIN_SIMILARITY", "0.0")),
            embed_on_ingest=_env_bool("RAG_EMBED_ON_INGEST", "false"),
            backfill_embeddings=_env_bool("RAG_BACKFILL_EMBEDDINGS", "false"),
            last_resort=_env_bool("RAG_LAST_RESORT", "true"),
            embedding_model=os.environ.get("RAG_EMBEDDING_MODEL", "text-embedding-3-small"),
            generation_model=os.environ.get("RAG_GENERATION_MODEL", "gpt-4o-mini"),
            store_backend=os.environ.get("RAG_STORE", "memory"),
            store_path=os.environ.get("RAG_STORE_PATH", ".pdf_rag_store.json"),
            database_url=os.environ.get("DATABASE_URL", "postgresql://localhost/pdf_rag"),
        )
