"""
Vector Scorer - Single Responsibility: cosine similarity over chunk embeddings.

Preconditions, in order:
1. An embedding provider is configured     -> else VectorSearchUnavailable
2. At least one chunk carries an embedding -> else VectorSearchUnavailable
3. The query embeds successfully           -> else EmbeddingProviderError
4. The query vector is usable (finite, non-zero) -> else VectorSearchUnavailable
5. Every chunk vector has the query's dimension  -> else DimensionMismatchError

1-4 are "provider unavailable" signals the orchestrator falls back on.
5 is a precondition violation and always propagates: two embedding spaces
mixed in one chunk set is a data bug, not a degraded mode.

No similarity floor is applied here. The orchestrator owns that policy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from pdf_rag.core.errors import (
    DimensionMismatchError,
    EmbeddingProviderError,
    VectorSearchUnavailable,
)
from pdf_rag.core.models import Chunk, ScoredChunk

if TYPE_CHECKING:
    from pdf_rag.core.protocols import ChunkStore, EmbeddingProvider

logger = logging.getLogger(__name__)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """dot(a, b) / (|a| * |b|); 0.0 when either vector has zero norm."""
    denom = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denom == 0.0:
        return 0.0
    return float(np.dot(a, b) / denom)


class VectorScorer:
    """
    Ranks precomputed chunk embeddings against a query embedding.

    Dependencies are INJECTED: pass MockEmbeddings (or a MagicMock) in tests.
    """

    def __init__(self, embeddings: EmbeddingProvider | None):
        self._embeddings = embeddings

    @property
    def available(self) -> bool:
        return self._embeddings is not None

    def embed_query(self, query: str) -> np.ndarray:
        """Embed the query, translating provider failures into EmbeddingProviderError."""
        if self._embeddings is None:
            raise VectorSearchUnavailable("No embedding provider configured")

        try:
            vector = np.asarray(self._embeddings.embed(query), dtype=np.float64)
        except Exception as e:
            raise EmbeddingProviderError(f"Query embedding failed: {e}") from e

        if vector.ndim != 1 or vector.size == 0:
            raise VectorSearchUnavailable(f"Query embedding has shape {vector.shape}")
        if not np.all(np.isfinite(vector)) or np.linalg.norm(vector) == 0.0:
            raise VectorSearchUnavailable("Query embedding is degenerate")
        return vector

    def score(self, query: str, chunks: Sequence[Chunk], limit: int = 5) -> list[ScoredChunk]:
        """
        Rank embedded chunks by cosine similarity to the query.

        Chunks without an embedding are not considered at all.

        Raises:
            VectorSearchUnavailable: no provider, no embedded chunks, degenerate query
            EmbeddingProviderError: the provider call failed
            DimensionMismatchError: a chunk vector lives in another space
        """
        if self._embeddings is None:
            raise VectorSearchUnavailable("No embedding provider configured")

        embedded = [c for c in chunks if c.has_embedding]
        if not embedded:
            raise VectorSearchUnavailable("No chunk carries an embedding")

        query_vec = self.embed_query(query)

        scored = []
        for chunk in embedded:
            chunk_vec = np.asarray(chunk.embedding, dtype=np.float64)
            if chunk_vec.shape[0] != query_vec.shape[0]:
                raise DimensionMismatchError(chunk.id, query_vec.shape[0], chunk_vec.shape[0])
            scored.append(ScoredChunk(chunk, cosine_similarity(query_vec, chunk_vec)))

        # Stable sort: equal similarities keep chunk order
        scored.sort(key=lambda s: s.score, reverse=True)

        logger.debug(
            "Vector search over %d/%d embedded chunks", len(embedded), len(chunks)
        )
        return scored[:limit]

    def backfill(self, chunks: Sequence[Chunk], store: ChunkStore) -> int:
        """
        Embed chunks that lack a vector and write the vectors back.

        Best effort: a provider or store failure is logged and stops the
        backfill without raising. Writing the same vector for the same
        chunk id twice is harmless, so concurrent backfills need no lock.

        Returns:
            Number of chunks whose embedding was written
        """
        if self._embeddings is None:
            return 0

        missing = [c for c in chunks if not c.has_embedding]
        if not missing:
            return 0

        try:
            vectors = self._embeddings.embed_batch([c.content for c in missing])
        except Exception as e:
            logger.warning("Embedding backfill skipped, provider failed: %s", e)
            return 0

        written = 0
        for chunk, vector in zip(missing, vectors):
            try:
                store.update_chunk_embedding(chunk.id, np.asarray(vector, dtype=np.float32))
            except Exception as e:
                logger.warning("Embedding backfill stopped at chunk %s: %s", chunk.id, e)
                break
            written += 1

        logger.info("Backfilled embeddings for %d chunks", written)
        return written
