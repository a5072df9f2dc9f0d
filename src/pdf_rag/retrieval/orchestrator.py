"""
Retrieval Orchestrator - choose the retrieval path and apply the fallbacks.

The fallback chain is an ORDERED LIST OF STRATEGIES, not nested try/except:

    VectorStrategy -> LexicalStrategy (which runs its own cascade)

Each strategy reports whether it applies, and either returns a ranking or
raises ProviderUnavailableError to hand over to the next one. Anything else
(e.g. DimensionMismatchError) propagates to the caller.

Single-attempt policy: a failed embedding call is not retried inline. The
orchestrator moves straight to the lexical strategy.

The orchestrator is stateless per call: retrieve() is a function of
(query, chunks, limit) plus the injected collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Sequence

from pdf_rag.core.errors import ProviderUnavailableError, VectorSearchUnavailable
from pdf_rag.core.models import Chunk, ScoredChunk
from pdf_rag.observability import (
    RAG_RETRIEVAL_ATTEMPTED,
    RAG_RETRIEVAL_CHUNK_COUNT,
    RAG_RETRIEVAL_RESULT_COUNT,
    RAG_RETRIEVAL_STRATEGY,
    get_tracer,
)
from pdf_rag.retrieval.lexical import LexicalScorer
from pdf_rag.retrieval.vector import VectorScorer

if TYPE_CHECKING:
    from pdf_rag.config import RagConfig
    from pdf_rag.core.protocols import ChunkStore, EmbeddingProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# OUTCOME
# ---------------------------------------------------------------------------


@dataclass
class RetrievalOutcome:
    """
    Ranked chunks plus how they were obtained.

    strategy is the stage that produced `scored` ("vector", "lexical",
    "loose", ...), or "none" when nothing was found.
    """

    scored: list[ScoredChunk] = field(default_factory=list)
    strategy: str = "none"
    attempted: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.scored

    @property
    def chunks(self) -> list[Chunk]:
        return [s.chunk for s in self.scored]


# ---------------------------------------------------------------------------
# STRATEGIES
# ---------------------------------------------------------------------------


class RetrievalStrategy(Protocol):
    """One step of the fallback pipeline."""

    name: str

    def applies(self, chunks: Sequence[Chunk]) -> bool:
        """Whether this strategy should be attempted at all."""
        ...

    def run(self, query: str, chunks: Sequence[Chunk], limit: int) -> tuple[list[ScoredChunk], str]:
        """Return (ranking, stage name). Raise ProviderUnavailableError to fall through."""
        ...


class VectorStrategy:
    """
    Cosine-similarity retrieval.

    Results at or below min_similarity are dropped; if none survive the
    vector path is degenerate and the next strategy runs.
    """

    name = "vector"

    def __init__(self, scorer: VectorScorer, min_similarity: float = 0.0):
        self.scorer = scorer
        self.min_similarity = min_similarity

    def applies(self, chunks: Sequence[Chunk]) -> bool:
        return self.scorer.available and any(c.has_embedding for c in chunks)

    def run(self, query: str, chunks: Sequence[Chunk], limit: int) -> tuple[list[ScoredChunk], str]:
        scored = [s for s in self.scorer.score(query, chunks, limit) if s.score > self.min_similarity]
        if not scored:
            raise VectorSearchUnavailable(
                f"No chunk above similarity floor {self.min_similarity}"
            )
        return scored, self.name


class LexicalStrategy:
    """Keyword retrieval. Always applies; its cascade decides the stage."""

    name = "lexical"

    def __init__(self, scorer: LexicalScorer):
        self.scorer = scorer

    def applies(self, chunks: Sequence[Chunk]) -> bool:
        return True

    def run(self, query: str, chunks: Sequence[Chunk], limit: int) -> tuple[list[ScoredChunk], str]:
        ranking = self.scorer.rank(query, chunks, limit)
        return ranking.scored, ranking.stage


# ---------------------------------------------------------------------------
# ORCHESTRATOR
# ---------------------------------------------------------------------------


class RetrievalOrchestrator:
    """
    Runs the strategy pipeline for one query.

    Args:
        strategies: Ordered strategies, tried first to last
        vector_scorer: Used for the optional embedding backfill
        chunk_store: Where backfilled embeddings are written
        backfill_embeddings: Embed chunks lacking vectors after ranking
    """

    def __init__(
        self,
        strategies: Sequence[RetrievalStrategy],
        vector_scorer: VectorScorer | None = None,
        chunk_store: ChunkStore | None = None,
        backfill_embeddings: bool = False,
    ):
        self.strategies = list(strategies)
        self._vector_scorer = vector_scorer
        self._chunk_store = chunk_store
        self._backfill = backfill_embeddings

    @classmethod
    def from_config(
        cls,
        embeddings: EmbeddingProvider | None,
        config: RagConfig,
        chunk_store: ChunkStore | None = None,
    ) -> "RetrievalOrchestrator":
        """Default pipeline: vector first, then lexical."""
        vector = VectorScorer(embeddings)
        lexical = LexicalScorer(last_resort=config.last_resort)
        return cls(
            strategies=[
                VectorStrategy(vector, min_similarity=config.min_similarity),
                LexicalStrategy(lexical),
            ],
            vector_scorer=vector,
            chunk_store=chunk_store,
            backfill_embeddings=config.backfill_embeddings,
        )

    def retrieve(self, query: str, chunks: Sequence[Chunk], limit: int = 5) -> RetrievalOutcome:
        """
        Rank chunks for a query.

        Returns an empty outcome (strategy "none") when there are no chunks
        or no strategy found anything. That is a result, not an error.

        Raises:
            PreconditionError: e.g. mismatched embedding dimensions
        """
        tracer = get_tracer()
        with tracer.start_span("rag.retrieve") as span:
            span.set_attribute(RAG_RETRIEVAL_CHUNK_COUNT, len(chunks))

            outcome = self._run_pipeline(query, chunks, limit)

            span.set_attribute(RAG_RETRIEVAL_STRATEGY, outcome.strategy)
            span.set_attribute(RAG_RETRIEVAL_RESULT_COUNT, len(outcome.scored))
            span.set_attribute(RAG_RETRIEVAL_ATTEMPTED, ",".join(outcome.attempted))

        if self._backfill and self._chunk_store is not None and self._vector_scorer is not None:
            self._vector_scorer.backfill(chunks, self._chunk_store)

        return outcome

    def _run_pipeline(self, query: str, chunks: Sequence[Chunk], limit: int) -> RetrievalOutcome:
        if not chunks:
            return RetrievalOutcome()

        attempted: list[str] = []
        for strategy in self.strategies:
            if not strategy.applies(chunks):
                logger.debug("Skipping %s retrieval", strategy.name)
                continue

            attempted.append(strategy.name)
            try:
                scored, stage = strategy.run(query, chunks, limit)
            except ProviderUnavailableError as e:
                logger.warning("%s retrieval unavailable, falling back: %s", strategy.name, e)
                continue

            if scored:
                logger.info("Retrieved %d chunks via %s", len(scored), stage)
                return RetrievalOutcome(scored=scored, strategy=stage, attempted=attempted)

        logger.info("No strategy produced a ranking for %d chunks", len(chunks))
        return RetrievalOutcome(attempted=attempted)
