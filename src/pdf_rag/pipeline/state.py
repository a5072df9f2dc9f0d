"""
Answer pipeline state - the data flowing through the LangGraph.

Separated because the state shape changes for different reasons than
node logic or graph wiring.
"""

from __future__ import annotations

from typing import TypedDict

from pdf_rag.core.models import Chunk
from pdf_rag.retrieval.orchestrator import RetrievalOutcome
from pdf_rag.schemas.results import RagResult


class AnswerState(TypedDict):
    """
    State that flows through the answer graph.

    Input fields are set at invocation time.
    Intermediate fields are populated by nodes.
    `result` is set by whichever node ends the run.
    """

    # -------------------------------------------------------------------------
    # INPUT (set at invocation)
    # -------------------------------------------------------------------------
    query: str
    document_ids: list[str]
    limit: int

    # -------------------------------------------------------------------------
    # INTERMEDIATE (populated by nodes)
    # -------------------------------------------------------------------------
    chunks: list[Chunk]
    outcome: RetrievalOutcome | None

    # -------------------------------------------------------------------------
    # OUTPUT
    # -------------------------------------------------------------------------
    result: RagResult | None

    # -------------------------------------------------------------------------
    # METRICS
    # -------------------------------------------------------------------------
    retrieval_latency_ms: float
    synthesis_latency_ms: float


def create_initial_state(query: str, document_ids: list[str], limit: int = 5) -> AnswerState:
    """Build a complete initial state for graph invocation."""
    return AnswerState(
        query=query,
        document_ids=list(document_ids),
        limit=limit,
        chunks=[],
        outcome=None,
        result=None,
        retrieval_latency_ms=0,
        synthesis_latency_ms=0,
    )
