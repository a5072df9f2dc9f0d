"""
Answer pipeline - LangGraph wiring of load -> retrieve -> synthesize.

Nodes are created by factories with injected collaborators, so every
node is unit-testable without building the graph.
"""

from pdf_rag.pipeline.state import AnswerState, create_initial_state
from pdf_rag.pipeline.nodes import (
    create_load_node,
    create_retrieve_node,
    create_synthesize_node,
    report_no_results,
    route_after_load,
    route_after_retrieve,
)
from pdf_rag.pipeline.graph import build_answer_graph

__all__ = [
    "AnswerState",
    "create_initial_state",
    "create_load_node",
    "create_retrieve_node",
    "create_synthesize_node",
    "report_no_results",
    "route_after_load",
    "route_after_retrieve",
    "build_answer_graph",
]
