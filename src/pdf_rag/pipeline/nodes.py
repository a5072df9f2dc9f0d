"""
Answer pipeline nodes - isolated, testable functions.

PATTERN:
--------
1. Pure nodes (no dependencies) are plain functions
2. Nodes with dependencies use a factory: create_X_node(deps) -> node_fn

Each node returns only the state keys it writes.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

# Imported at runtime: LangGraph resolves node and router type hints
from pdf_rag.pipeline.state import AnswerState
from pdf_rag.schemas.results import RagResult
from pdf_rag.synthesis.messages import (
    NO_CHUNKS_FOUND,
    NO_DOCUMENTS_SELECTED,
    no_relevant_information,
)
from pdf_rag.synthesis.synthesizer import dedupe_filenames

if TYPE_CHECKING:
    from pdf_rag.core.protocols import ChunkStore
    from pdf_rag.retrieval.orchestrator import RetrievalOrchestrator
    from pdf_rag.synthesis.synthesizer import AnswerSynthesizer

logger = logging.getLogger(__name__)


def create_load_node(chunk_store: ChunkStore) -> Callable[[AnswerState], dict]:
    """Factory for the node that fetches the selected documents' chunks."""

    def load_chunks(state: AnswerState) -> dict:
        """
        Reads: document_ids
        Writes: chunks, and result when there is nothing to search
        """
        if not state["document_ids"]:
            return {"chunks": [], "result": RagResult(answer=NO_DOCUMENTS_SELECTED)}

        chunks = chunk_store.get_chunks(state["document_ids"])
        logger.debug("Loaded %d chunks from %d documents", len(chunks), len(state["document_ids"]))

        if not chunks:
            return {"chunks": [], "result": RagResult(answer=NO_CHUNKS_FOUND)}
        return {"chunks": chunks}

    return load_chunks


def create_retrieve_node(orchestrator: RetrievalOrchestrator) -> Callable[[AnswerState], dict]:
    """Factory for the ranking node."""

    def retrieve_chunks(state: AnswerState) -> dict:
        """
        Reads: query, chunks, limit
        Writes: outcome, retrieval_latency_ms
        """
        start = time.time()
        outcome = orchestrator.retrieve(state["query"], state["chunks"], state["limit"])
        return {
            "outcome": outcome,
            "retrieval_latency_ms": (time.time() - start) * 1000,
        }

    return retrieve_chunks


def report_no_results(state: AnswerState) -> dict:
    """
    Pure node: the searched-but-unmatched answer.

    Lists every filename that was searched so the caller can suggest
    other queries.
    """
    chunks = state["chunks"]
    max_page = max((c.page for c in chunks), default=0)
    return {
        "result": RagResult(
            answer=no_relevant_information(state["query"], max_page),
            selected_documents=dedupe_filenames(chunks),
            strategy="none",
        )
    }


def create_synthesize_node(synthesizer: AnswerSynthesizer) -> Callable[[AnswerState], dict]:
    """Factory for the answer node."""

    def synthesize_answer(state: AnswerState) -> dict:
        """
        Reads: query, outcome
        Writes: result, synthesis_latency_ms
        """
        start = time.time()
        outcome = state["outcome"]
        result = synthesizer.synthesize(state["query"], outcome.scored, strategy=outcome.strategy)
        return {
            "result": result,
            "synthesis_latency_ms": (time.time() - start) * 1000,
        }

    return synthesize_answer


# ---------------------------------------------------------------------------
# ROUTERS (pure)
# ---------------------------------------------------------------------------


def route_after_load(state: AnswerState) -> str:
    return "end" if state.get("result") is not None else "retrieve"


def route_after_retrieve(state: AnswerState) -> str:
    outcome = state.get("outcome")
    return "no_results" if outcome is None or outcome.is_empty else "synthesize"
