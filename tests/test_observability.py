"""
Unit Tests for Observability Module

Tests the Phoenix/OpenTelemetry integration with focus on:
1. Graceful degradation (NoOpTracer when disabled)
2. Configuration loading from environment
3. The spans and attributes the engine emits
"""

import pytest
from contextlib import contextmanager
from unittest.mock import patch

from pdf_rag.config import RagConfig
from pdf_rag.core import Chunk
from pdf_rag.observability import init_phoenix
from pdf_rag.observability.config import (
    PhoenixConfig,
    get_config,
    reset_config,
)
from pdf_rag.observability.tracer import (
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from pdf_rag.observability.attributes import (
    GEN_AI_REQUEST_MODEL,
    GEN_AI_SYSTEM,
    RAG_DOCUMENT_ID,
    RAG_INGEST_PAGE_COUNT,
    RAG_QUERY,
    RAG_QUERY_DOCUMENT_COUNT,
    RAG_QUERY_LIMIT,
    RAG_RETRIEVAL_ATTEMPTED,
    RAG_RETRIEVAL_RESULT_COUNT,
    RAG_RETRIEVAL_STRATEGY,
    ingest_attributes,
    model_attributes,
    query_attributes,
)
from pdf_rag.retrieval import RetrievalOrchestrator


class RecordingSpan:
    def __init__(self, name, attributes):
        self.name = name
        self.attributes = dict(attributes or {})

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def set_status(self, status, description=None):
        self.attributes["status"] = status

    def record_exception(self, exception):
        self.attributes["exception"] = repr(exception)


class RecordingTracer:
    def __init__(self):
        self.spans = []

    @contextmanager
    def start_span(self, name, attributes=None):
        span = RecordingSpan(name, attributes)
        self.spans.append(span)
        yield span


# ---------------------------------------------------------------------------
# CONFIG TESTS
# ---------------------------------------------------------------------------


class TestPhoenixConfig:
    """Test configuration loading."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_config_defaults(self):
        """Config should have sensible defaults when env vars not set."""
        with patch.dict("os.environ", {}, clear=True):
            config = PhoenixConfig.from_env()

            assert config.enabled is False
            assert config.project_name == "pdf-rag"
            assert config.collector_endpoint is None
            # Uploaded PDFs may be confidential
            assert config.capture_content is False

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_config_enabled_values(self, value):
        with patch.dict("os.environ", {"PHOENIX_ENABLED": value}):
            assert PhoenixConfig.from_env().enabled is True

    @pytest.mark.parametrize("value", ["false", "0", "no"])
    def test_config_disabled_values(self, value):
        with patch.dict("os.environ", {"PHOENIX_ENABLED": value}):
            assert PhoenixConfig.from_env().enabled is False

    def test_config_from_env_values(self):
        env = {
            "PHOENIX_PROJECT_NAME": "my-project",
            "PHOENIX_COLLECTOR_ENDPOINT": "https://phoenix.example.com/v1/traces",
            "PHOENIX_CAPTURE_CONTENT": "true",
        }
        with patch.dict("os.environ", env):
            config = PhoenixConfig.from_env()

        assert config.project_name == "my-project"
        assert config.collector_endpoint == "https://phoenix.example.com/v1/traces"
        assert config.capture_content is True

    def test_get_config_singleton(self):
        assert get_config() is get_config()


# ---------------------------------------------------------------------------
# TRACER TESTS
# ---------------------------------------------------------------------------


class TestNoOpTracer:
    """Test NoOpTracer for graceful degradation."""

    def test_noop_span_accepts_everything(self):
        tracer = NoOpTracer()

        with tracer.start_span("test_span", attributes={"key": "value"}) as span:
            assert isinstance(span, NoOpSpan)
            span.set_attribute("number", 42)
            span.set_status("error", "Something went wrong")
            span.record_exception(ValueError("test error"))

    def test_noop_tracer_does_not_swallow_exceptions(self):
        with pytest.raises(ValueError):
            with NoOpTracer().start_span("failing_operation"):
                raise ValueError("Test error")


class TestGetTracer:
    """Test the get_tracer factory function."""

    def setup_method(self):
        reset_tracer()
        reset_config()

    def teardown_method(self):
        reset_tracer()
        reset_config()

    def test_get_tracer_returns_noop_when_disabled(self):
        with patch.dict("os.environ", {"PHOENIX_ENABLED": "false"}):
            assert isinstance(get_tracer(), NoOpTracer)

    def test_get_tracer_singleton(self):
        with patch.dict("os.environ", {"PHOENIX_ENABLED": "false"}):
            assert get_tracer() is get_tracer()

    def test_get_tracer_when_enabled(self):
        """Either an OTel tracer or a NoOpTracer, depending on what is installed."""
        with patch.dict("os.environ", {"PHOENIX_ENABLED": "true"}):
            tracer = get_tracer()
            assert callable(tracer.start_span)

    def test_init_phoenix_disabled(self):
        assert init_phoenix(PhoenixConfig(enabled=False)) is False


# ---------------------------------------------------------------------------
# ATTRIBUTE HELPER TESTS
# ---------------------------------------------------------------------------


class TestAttributeHelpers:
    def test_ingest_attributes(self):
        attrs = ingest_attributes("doc-1", 12)

        assert attrs[RAG_DOCUMENT_ID] == "doc-1"
        assert attrs[RAG_INGEST_PAGE_COUNT] == 12

    def test_query_attributes_omit_query_by_default(self):
        attrs = query_attributes("confidential question", 2, 5)

        assert attrs[RAG_QUERY_DOCUMENT_COUNT] == 2
        assert attrs[RAG_QUERY_LIMIT] == 5
        assert RAG_QUERY not in attrs

    def test_query_attributes_with_content(self):
        attrs = query_attributes("revenue", 1, 5, capture_content=True)
        assert attrs[RAG_QUERY] == "revenue"

    def test_model_attributes(self):
        attrs = model_attributes("text-embedding-3-small")

        assert attrs[GEN_AI_SYSTEM] == "openai"
        assert attrs[GEN_AI_REQUEST_MODEL] == "text-embedding-3-small"


# ---------------------------------------------------------------------------
# SPANS EMITTED BY THE ENGINE
# ---------------------------------------------------------------------------


class TestRetrievalSpan:
    def test_strategy_recorded(self):
        tracer = RecordingTracer()
        chunk = Chunk(
            id="c1", document_id="d", content="Revenue grew.", page=1,
            source_url="", filename="r.pdf",
        )
        orchestrator = RetrievalOrchestrator.from_config(None, RagConfig())

        with patch("pdf_rag.retrieval.orchestrator.get_tracer", return_value=tracer):
            orchestrator.retrieve("revenue", [chunk], 5)

        span = tracer.spans[0]
        assert span.name == "rag.retrieve"
        assert span.attributes[RAG_RETRIEVAL_STRATEGY] == "lexical"
        assert span.attributes[RAG_RETRIEVAL_RESULT_COUNT] == 1
        assert span.attributes[RAG_RETRIEVAL_ATTEMPTED] == "lexical"
