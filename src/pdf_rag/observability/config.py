"""
Tracing settings for the RAG engine.

Read once from PHOENIX_* environment variables and cached. With the
defaults every rag.* span goes to the no-op tracer.
"""

import os
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "false").lower() in _TRUTHY


@dataclass
class PhoenixConfig:
    """
    Where ingest and answer traces go, and how much of a document they carry.

    PHOENIX_ENABLED               turn on rag.ingest / rag.answer / rag.retrieve /
                                  rag.generate / rag.embed spans (off by default)
    PHOENIX_PROJECT_NAME          project the traces are filed under ("pdf-rag")
    PHOENIX_COLLECTOR_ENDPOINT    OTLP/HTTP collector URL; empty launches a local Phoenix app
    PHOENIX_CAPTURE_CONTENT       put query text on rag.answer spans (off by default)

    Spans otherwise hold only ids, counts and strategy names. Turning
    PHOENIX_CAPTURE_CONTENT on sends user questions about uploaded PDFs to
    the collector, so leave it off for confidential documents.
    """

    enabled: bool = False
    project_name: str = "pdf-rag"
    collector_endpoint: str | None = None
    capture_content: bool = False

    @classmethod
    def from_env(cls) -> "PhoenixConfig":
        return cls(
            enabled=_env_flag("PHOENIX_ENABLED"),
            project_name=os.environ.get("PHOENIX_PROJECT_NAME", "pdf-rag"),
            collector_endpoint=os.environ.get("PHOENIX_COLLECTOR_ENDPOINT") or None,
            capture_content=_env_flag("PHOENIX_CAPTURE_CONTENT"),
        )


_config: PhoenixConfig | None = None


def get_config() -> PhoenixConfig:
    """Process-wide settings, read from the environment on first use."""
    global _config
    if _config is None:
        _config = PhoenixConfig.from_env()
    return _config


def reset_config() -> None:
    """Forget the cached settings so the next get_config() rereads the env."""
    global _config
    _config = None
