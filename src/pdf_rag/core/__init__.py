"""
Core module - shared models, protocols and errors for the whole engine.

This module provides the foundational contracts that enable:
- Dependency injection of stores and providers
- Easy testing with in-memory implementations
- One error taxonomy for every component

USAGE:
------
from pdf_rag.core import Chunk, ChunkStore, EmbeddingProvider

class MyChunkStore:
    '''Implements ChunkStore protocol.'''
    ...
"""

from pdf_rag.core.errors import (
    RagError,
    PreconditionError,
    EmptyQueryError,
    DimensionMismatchError,
    InvalidStatusTransition,
    DocumentNotFoundError,
    ProviderUnavailableError,
    VectorSearchUnavailable,
    EmbeddingProviderError,
    GenerationProviderError,
    IngestionError,
)
from pdf_rag.core.models import (
    Chunk,
    ScoredChunk,
    DocumentRecord,
    DocumentStatus,
    STATUS_TRANSITIONS,
    can_transition,
)
from pdf_rag.core.protocols import (
    EmbeddingProvider,
    GenerationProvider,
    ChunkStore,
    DocumentStore,
)

__all__ = [
    # Errors
    "RagError",
    "PreconditionError",
    "EmptyQueryError",
    "DimensionMismatchError",
    "InvalidStatusTransition",
    "DocumentNotFoundError",
    "ProviderUnavailableError",
    "VectorSearchUnavailable",
    "EmbeddingProviderError",
    "GenerationProviderError",
    "IngestionError",
    # Models
    "Chunk",
    "ScoredChunk",
    "DocumentRecord",
    "DocumentStatus",
    "STATUS_TRANSITIONS",
    "can_transition",
    # Protocols
    "EmbeddingProvider",
    "GenerationProvider",
    "ChunkStore",
    "DocumentStore",
]
