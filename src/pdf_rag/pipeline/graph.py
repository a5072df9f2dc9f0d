"""
Answer graph construction with dependency injection.

The graph is just WIRING - all logic lives in nodes.

    START -> load_chunks --(no docs / no chunks)--> END
                  |
                  v
           retrieve_chunks --(empty ranking)--> report_no_results -> END
                  |
                  v
           synthesize_answer -> END
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langgraph.graph import END, StateGraph

from pdf_rag.pipeline.nodes import (
    create_load_node,
    create_retrieve_node,
    create_synthesize_node,
    report_no_results,
    route_after_load,
    route_after_retrieve,
)
from pdf_rag.pipeline.state import AnswerState

if TYPE_CHECKING:
    from pdf_rag.core.protocols import ChunkStore
    from pdf_rag.retrieval.orchestrator import RetrievalOrchestrator
    from pdf_rag.synthesis.synthesizer import AnswerSynthesizer


def build_answer_graph(
    chunk_store: ChunkStore,
    orchestrator: RetrievalOrchestrator,
    synthesizer: AnswerSynthesizer,
):
    """
    Build the answer workflow with injected collaborators.

    Returns:
        Compiled graph; invoke it with create_initial_state(...)

    Example:
        store = InMemoryStore()
        graph = build_answer_graph(
            store,
            RetrievalOrchestrator.from_config(None, RagConfig()),
            AnswerSynthesizer(),
        )
        final = graph.invoke(create_initial_state("revenue 2023", ["doc-1"]))
        final["result"].answer
    """
    workflow = StateGraph(AnswerState)

    workflow.add_node("load_chunks", create_load_node(chunk_store))
    workflow.add_node("retrieve_chunks", create_retrieve_node(orchestrator))
    workflow.add_node("report_no_results", report_no_results)  # Pure, no deps needed
    workflow.add_node("synthesize_answer", create_synthesize_node(synthesizer))

    workflow.set_entry_point("load_chunks")
    workflow.add_conditional_edges(
        "load_chunks",
        route_after_load,
        {"retrieve": "retrieve_chunks", "end": END},
    )
    workflow.add_conditional_edges(
        "retrieve_chunks",
        route_after_retrieve,
        {"synthesize": "synthesize_answer", "no_results": "report_no_results"},
    )
    workflow.add_edge("report_no_results", END)
    workflow.add_edge("synthesize_answer", END)

    return workflow.compile()
