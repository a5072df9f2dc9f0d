"""
pdf_rag - retrieval-augmented question answering over uploaded PDFs.

    pages -> chunking -> (store) -> retrieval -> synthesis -> RagResult

USAGE:
------
from pdf_rag import RagService
from pdf_rag.storage import InMemoryStore

store = InMemoryStore()
service = RagService(store, store)
service.ingest(["Revenue was $100 billion in 2023."], "report.pdf", "doc-1")
result = service.answer("What was the revenue in 2023?", ["doc-1"])
"""

from pdf_rag.config import RagConfig
from pdf_rag.schemas.results import DocumentClassification, RagResult, Source
from pdf_rag.service import RagService

__version__ = "0.1.0"

__all__ = [
    "RagConfig",
    "RagService",
    "RagResult",
    "Source",
    "DocumentClassification",
]
