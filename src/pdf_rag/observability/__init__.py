"""
Observability Module - Phoenix + OpenTelemetry Integration

Traces ingestion, retrieval and synthesis. Disabled unless PHOENIX_ENABLED
is set, in which case get_tracer() hands out real OTel spans.

USAGE:
------
from pdf_rag.observability import init_phoenix, get_tracer

init_phoenix()  # no-op unless PHOENIX_ENABLED=true

tracer = get_tracer()
with tracer.start_span("rag.answer") as span:
    span.set_attribute(RAG_RETRIEVAL_STRATEGY, "lexical")
"""

from __future__ import annotations

import logging

from pdf_rag.observability.config import (
    PhoenixConfig,
    get_config,
    reset_config,
)
from pdf_rag.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from pdf_rag.observability.attributes import (
    GEN_AI_SYSTEM,
    GEN_AI_REQUEST_MODEL,
    RAG_DOCUMENT_ID,
    RAG_DOCUMENT_STATUS,
    RAG_INGEST_PAGE_COUNT,
    RAG_INGEST_CHUNK_COUNT,
    RAG_QUERY,
    RAG_QUERY_DOCUMENT_COUNT,
    RAG_QUERY_LIMIT,
    RAG_RETRIEVAL_STRATEGY,
    RAG_RETRIEVAL_ATTEMPTED,
    RAG_RETRIEVAL_CHUNK_COUNT,
    RAG_RETRIEVAL_RESULT_COUNT,
    RAG_SYNTHESIS_MODE,
    RAG_SYNTHESIS_SOURCE_COUNT,
    ingest_attributes,
    model_attributes,
    query_attributes,
)

logger = logging.getLogger(__name__)

_phoenix_initialized = False


def init_phoenix(config: PhoenixConfig | None = None) -> bool:
    """
    Initialize Phoenix observability.

    Sets up the OpenTelemetry tracer provider and registers auto-instrumentors.

    Returns:
        True if Phoenix was initialized, False if disabled or failed
    """
    global _phoenix_initialized
    if _phoenix_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Phoenix observability disabled")
        return False

    try:
        import phoenix as px
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        if config.collector_endpoint:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
            exporter = OTLPSpanExporter(endpoint=config.collector_endpoint)
            logger.info(f"Phoenix connecting to remote: {config.collector_endpoint}")
        else:
            session = px.launch_app()
            exporter = px.otel.SimpleSpanProcessor.exporter()
            logger.info(f"Phoenix UI available at: {session.url}")

        provider = TracerProvider()
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        from pdf_rag.observability.instrumentation import register_instrumentors
        register_instrumentors()

        reset_tracer()
        _phoenix_initialized = True
        return True

    except ImportError as e:
        logger.warning(f"Phoenix not installed, observability disabled: {e}")
        return False
    except Exception as e:
        logger.error(f"Failed to initialize Phoenix: {e}")
        return False


def shutdown_phoenix() -> None:
    """Flush spans and reset tracing state."""
    global _phoenix_initialized

    if not _phoenix_initialized:
        return

    try:
        from opentelemetry import trace
        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
    except Exception as e:
        logger.warning(f"Error shutting down Phoenix: {e}")

    reset_tracer()
    reset_config()
    _phoenix_initialized = False


__all__ = [
    # Initialization
    "init_phoenix",
    "shutdown_phoenix",
    # Config
    "PhoenixConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "GEN_AI_SYSTEM",
    "GEN_AI_REQUEST_MODEL",
    "RAG_DOCUMENT_ID",
    "RAG_DOCUMENT_STATUS",
    "RAG_INGEST_PAGE_COUNT",
    "RAG_INGEST_CHUNK_COUNT",
    "RAG_QUERY",
    "RAG_QUERY_DOCUMENT_COUNT",
    "RAG_QUERY_LIMIT",
    "RAG_RETRIEVAL_STRATEGY",
    "RAG_RETRIEVAL_ATTEMPTED",
    "RAG_RETRIEVAL_CHUNK_COUNT",
    "RAG_RETRIEVAL_RESULT_COUNT",
    "RAG_SYNTHESIS_MODE",
    "RAG_SYNTHESIS_SOURCE_COUNT",
    # Helpers
    "ingest_attributes",
    "model_attributes",
    "query_attributes",
]
