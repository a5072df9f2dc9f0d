"""
Unit Tests for the Retrieval Orchestrator

Verifies the strategy order, the single-attempt policy and the
fallbacks between vector and lexical retrieval.
"""

import numpy as np
import pytest
from unittest.mock import MagicMock

from pdf_rag.config import RagConfig
from pdf_rag.core import Chunk, DimensionMismatchError
from pdf_rag.embeddings import MockEmbeddings
from pdf_rag.retrieval import (
    LexicalScorer,
    LexicalStrategy,
    RetrievalOrchestrator,
    VectorScorer,
    VectorStrategy,
)
from pdf_rag.storage import InMemoryStore


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------

TEXTS = [
    "Revenue was $100 billion in 2023, up 10% year over year.",
    "The board met four times during the year.",
    "Cash and cash equivalents were $24 billion.",
]


def make_chunks(embeddings=None) -> list[Chunk]:
    chunks = []
    for page, text in enumerate(TEXTS, start=1):
        chunk = Chunk(
            id=f"chunk_d_{page}_0",
            document_id="d",
            content=text,
            page=page,
            source_url="",
            filename="report.pdf",
        )
        if embeddings is not None:
            chunk = chunk.with_embedding(embeddings.embed(text))
        chunks.append(chunk)
    return chunks


@pytest.fixture
def mock_embeddings():
    return MockEmbeddings()


# ---------------------------------------------------------------------------
# PIPELINE
# ---------------------------------------------------------------------------


class TestRetrievalOrchestrator:
    """Test strategy selection and fallbacks."""

    def test_no_chunks(self, mock_embeddings):
        orchestrator = RetrievalOrchestrator.from_config(mock_embeddings, RagConfig())
        outcome = orchestrator.retrieve("revenue", [])

        assert outcome.is_empty
        assert outcome.strategy == "none"
        assert outcome.attempted == []

    def test_vector_path_when_embedded(self, mock_embeddings):
        orchestrator = RetrievalOrchestrator.from_config(mock_embeddings, RagConfig())
        outcome = orchestrator.retrieve("What was the revenue in 2023?", make_chunks(mock_embeddings))

        assert outcome.strategy == "vector"
        assert outcome.chunks[0].page == 1

    def test_lexical_when_no_provider(self):
        orchestrator = RetrievalOrchestrator.from_config(None, RagConfig())
        outcome = orchestrator.retrieve("revenue 2023", make_chunks())

        assert outcome.strategy == "lexical"
        assert outcome.attempted == ["lexical"]
        assert outcome.chunks[0].page == 1

    def test_lexical_when_no_chunk_is_embedded(self, mock_embeddings):
        orchestrator = RetrievalOrchestrator.from_config(mock_embeddings, RagConfig())
        outcome = orchestrator.retrieve("revenue 2023", make_chunks())

        assert outcome.attempted == ["lexical"]

    def test_provider_failure_falls_back_without_retry(self, mock_embeddings):
        failing = MagicMock()
        failing.embed.side_effect = TimeoutError("embedding timeout")
        orchestrator = RetrievalOrchestrator.from_config(failing, RagConfig())

        outcome = orchestrator.retrieve("revenue 2023", make_chunks(mock_embeddings))

        assert outcome.attempted == ["vector", "lexical"]
        assert outcome.strategy == "lexical"
        assert failing.embed.call_count == 1

    def test_similarity_floor_falls_back(self):
        embeddings = MagicMock()
        embeddings.embed.return_value = np.array([1.0, 0.0])
        chunks = [c.with_embedding([0.0, 1.0]) for c in make_chunks()]
        orchestrator = RetrievalOrchestrator.from_config(embeddings, RagConfig(min_similarity=0.5))

        outcome = orchestrator.retrieve("revenue 2023", chunks)

        assert outcome.strategy == "lexical"

    def test_dimension_mismatch_propagates(self):
        embeddings = MagicMock()
        embeddings.embed.return_value = np.array([1.0, 0.0, 0.0])
        chunks = [c.with_embedding([1.0, 0.0]) for c in make_chunks()]
        orchestrator = RetrievalOrchestrator.from_config(embeddings, RagConfig())

        with pytest.raises(DimensionMismatchError):
            orchestrator.retrieve("revenue", chunks)

    def test_empty_when_nothing_matches(self):
        orchestrator = RetrievalOrchestrator.from_config(None, RagConfig(last_resort=False))
        outcome = orchestrator.retrieve("zebra", make_chunks())

        assert outcome.is_empty
        assert outcome.strategy == "none"
        assert outcome.attempted == ["lexical"]

    def test_deterministic(self):
        orchestrator = RetrievalOrchestrator.from_config(None, RagConfig())
        chunks = make_chunks()

        first = orchestrator.retrieve("cash revenue", chunks)
        second = orchestrator.retrieve("cash revenue", chunks)
        assert first.scored == second.scored

    def test_custom_strategy_order(self):
        vector = VectorScorer(None)
        orchestrator = RetrievalOrchestrator(
            [LexicalStrategy(LexicalScorer()), VectorStrategy(vector)]
        )
        outcome = orchestrator.retrieve("revenue", make_chunks())

        assert outcome.strategy == "lexical"
        assert outcome.attempted == ["lexical"]


class TestBackfillAfterRetrieval:
    """Test the optional embedding backfill."""

    def test_backfill_when_enabled(self, mock_embeddings):
        store = InMemoryStore()
        chunks = make_chunks()
        store.put_chunks(chunks)
        orchestrator = RetrievalOrchestrator.from_config(
            mock_embeddings, RagConfig(backfill_embeddings=True), chunk_store=store
        )

        outcome = orchestrator.retrieve("revenue 2023", chunks)

        assert outcome.strategy == "lexical"
        assert all(c.has_embedding for c in store.get_chunks(["d"]))

    def test_no_backfill_by_default(self, mock_embeddings):
        store = InMemoryStore()
        chunks = make_chunks()
        store.put_chunks(chunks)
        orchestrator = RetrievalOrchestrator.from_config(mock_embeddings, RagConfig(), chunk_store=store)

        orchestrator.retrieve("revenue 2023", chunks)

        assert not any(c.has_embedding for c in store.get_chunks(["d"]))
