"""
Embeddings module - text embedding generation.

Pattern:
1. Protocol (EmbeddingProvider, in core.protocols) defines the interface
2. Production implementation (OpenAIEmbeddings)
3. Test double (MockEmbeddings)
4. Factory function (get_embedding_provider)
"""

from pdf_rag.embeddings.openai_embeddings import (
    OpenAIEmbeddings,
    MockEmbeddings,
    get_embedding_provider,
)

__all__ = [
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]
