"""
The tracer behind every rag.* span.

Service, orchestrator and provider code all call get_tracer().start_span(...)
and never check whether tracing is on. When PHOENIX_ENABLED is off, the
OTel SDK is missing, or init_phoenix() has not installed a provider yet,
they get a NoOpTracer and the spans vanish.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    """What instrumented code may do with an open span."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """status is "ok" or "error"."""
        ...

    def record_exception(self, exception: Exception) -> None:
        ...


class TracerProtocol(Protocol):
    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[SpanProtocol]:
        ...


# ---------------------------------------------------------------------------
# TRACING OFF
# ---------------------------------------------------------------------------


class NoOpSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass


class NoOpTracer:
    """Hands out NoOpSpans; attributes are dropped unread."""

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# TRACING ON
# ---------------------------------------------------------------------------


class OTelSpan:
    """Wraps an OpenTelemetry span, mapping "ok"/"error" onto StatusCode."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import StatusCode
        code = StatusCode.OK if status == "ok" else StatusCode.ERROR
        self._span.set_status(code, description)

    def record_exception(self, exception: Exception) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Opens each span as the current span, so nested rag.* calls form one trace."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def _build_tracer(service_name: str) -> TracerProtocol:
    from pdf_rag.observability.config import get_config

    if not get_config().enabled:
        return NoOpTracer()

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError:
        return NoOpTracer()

    # still the default proxy provider until init_phoenix() runs
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()

    return OTelTracer(trace.get_tracer(service_name))


def get_tracer(service_name: str = "pdf-rag") -> TracerProtocol:
    """
    Process-wide tracer, chosen on first call and cached.

    Args:
        service_name: instrumentation scope name; ignored once cached
    """
    global _tracer
    if _tracer is None:
        _tracer = _build_tracer(service_name)
    return _tracer


def reset_tracer() -> None:
    """Drop the cached tracer; call after init_phoenix() or config changes."""
    global _tracer
    _tracer = None
