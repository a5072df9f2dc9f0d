"""Output contracts returned by RagService."""

from pdf_rag.schemas.results import DocumentClassification, RagResult, Source

__all__ = [
    "DocumentClassification",
    "RagResult",
    "Source",
]
