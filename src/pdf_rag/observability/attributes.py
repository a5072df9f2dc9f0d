"""
Span attribute keys.

GenAI keys follow the OpenTelemetry GenAI semantic conventions; the rag.*
namespace is ours.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# GENAI NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

GEN_AI_SYSTEM = "gen_ai.system"
GEN_AI_REQUEST_MODEL = "gen_ai.request.model"

# ---------------------------------------------------------------------------
# RAG NAMESPACE (custom)
# ---------------------------------------------------------------------------

# Ingestion
RAG_DOCUMENT_ID = "rag.document.id"
RAG_DOCUMENT_STATUS = "rag.document.status"
RAG_INGEST_PAGE_COUNT = "rag.ingest.page_count"
RAG_INGEST_CHUNK_COUNT = "rag.ingest.chunk_count"

# Query
RAG_QUERY = "rag.query"  # only when capture_content is on
RAG_QUERY_DOCUMENT_COUNT = "rag.query.document_count"
RAG_QUERY_LIMIT = "rag.query.limit"

# Retrieval
RAG_RETRIEVAL_STRATEGY = "rag.retrieval.strategy"  # "vector", "lexical", "loose", ...
RAG_RETRIEVAL_ATTEMPTED = "rag.retrieval.attempted"
RAG_RETRIEVAL_CHUNK_COUNT = "rag.retrieval.chunk_count"
RAG_RETRIEVAL_RESULT_COUNT = "rag.retrieval.result_count"

# Synthesis
RAG_SYNTHESIS_MODE = "rag.synthesis.mode"  # "generated", "template", "empty"
RAG_SYNTHESIS_SOURCE_COUNT = "rag.synthesis.source_count"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def ingest_attributes(document_id: str, page_count: int) -> dict:
    """Create attributes dict for an ingestion span."""
    return {
        RAG_DOCUMENT_ID: document_id,
        RAG_INGEST_PAGE_COUNT: page_count,
    }


def query_attributes(
    query: str,
    document_count: int,
    limit: int,
    capture_content: bool = False,
) -> dict:
    """Create attributes dict for an answer span. The query text is opt-in."""
    attrs = {
        RAG_QUERY_DOCUMENT_COUNT: document_count,
        RAG_QUERY_LIMIT: limit,
    }
    if capture_content:
        attrs[RAG_QUERY] = query
    return attrs


def model_attributes(model: str, system: str = "openai") -> dict:
    """Create attributes dict for a provider call span."""
    return {
        GEN_AI_SYSTEM: system,
        GEN_AI_REQUEST_MODEL: model,
    }
