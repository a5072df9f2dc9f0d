"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to vector embeddings.
No store logic, no scoring - those live in storage/ and retrieval/.

Provider failures are raised as EmbeddingProviderError, which the
retrieval layer treats as "fall back to lexical search".
"""

from __future__ import annotations

import hashlib
import logging
import os
import re

import numpy as np
from openai import OpenAI

from pdf_rag.core.errors import EmbeddingProviderError
from pdf_rag.core.protocols import EmbeddingProvider
from pdf_rag.observability import get_tracer, model_attributes

logger = logging.getLogger(__name__)


class OpenAIEmbeddings:
    """
    OpenAI-based embedding provider.

    Uses text-embedding-3-small by default (1536 dimensions).
    """

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
    ):
        self.model = model
        self._client = OpenAI(api_key=api_key or os.environ.get("OPENAI_API_KEY"))

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions for the model."""
        model_dims = {
            "text-embedding-3-small": 1536,
            "text-embedding-3-large": 3072,
            "text-embedding-ada-002": 1536,
        }
        return model_dims.get(self.model, 1536)

    def _create(self, payload: str | list[str]):
        with get_tracer().start_span("rag.embed", attributes=model_attributes(self.model)):
            try:
                return self._client.embeddings.create(input=payload, model=self.model)
            except Exception as e:
                raise EmbeddingProviderError(f"OpenAI embedding call failed: {e}") from e

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        response = self._create(text)
        return np.array(response.data[0].embedding, dtype=np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts in one request."""
        if not texts:
            return []

        response = self._create(texts)
        return [np.array(item.embedding, dtype=np.float32) for item in response.data]


class MockEmbeddings:
    """
    Mock embedding provider for testing without API calls.

    Hashed bag-of-words: each word bumps one dimension chosen by a stable
    hash, then the vector is L2-normalized. Texts sharing words get a
    positive cosine similarity, so ranking tests behave sensibly.
    NOT for production use.
    """

    _WORD_RE = re.compile(r"\w+")

    def __init__(self, dimensions: int = 256):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self._dimensions, dtype=np.float32)
        for word in self._WORD_RE.findall(text.lower()):
            digest = hashlib.md5(word.encode("utf-8")).digest()
            vector[int.from_bytes(digest[:4], "little") % self._dimensions] += 1.0

        norm = np.linalg.norm(vector)
        return vector / norm if norm > 0 else vector

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(text) for text in texts]


def get_embedding_provider(
    use_mock: bool = False,
    model: str = "text-embedding-3-small",
) -> EmbeddingProvider | None:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        use_mock: If True, return MockEmbeddings (for testing)
        model: OpenAI embedding model

    Returns:
        A provider, or None when OPENAI_API_KEY is not set. None means
        "unconfigured": the engine runs lexical-only.
    """
    if use_mock:
        return MockEmbeddings()
    if not os.environ.get("OPENAI_API_KEY"):
        logger.info("OPENAI_API_KEY not set, vector search disabled")
        return None
    return OpenAIEmbeddings(model=model)
