"""
Retrieval module - rank chunks against a query.

This module provides:
- LexicalScorer: table-driven keyword scoring with its fallback cascade
- VectorScorer: cosine similarity over precomputed embeddings
- RetrievalOrchestrator: vector first, lexical as fallback

ARCHITECTURE:
-------------
Scorers are pure given their inputs. The orchestrator composes them as an
ordered list of strategies, each independently testable.
"""

from pdf_rag.retrieval.lexical import (
    LexicalRanking,
    LexicalScorer,
    LexicalWeights,
    QueryTerms,
    ScoreBreakdown,
    analyze_query,
    loose_score,
    score_chunk,
    tokenize,
)
from pdf_rag.retrieval.vector import VectorScorer, cosine_similarity
from pdf_rag.retrieval.orchestrator import (
    LexicalStrategy,
    RetrievalOrchestrator,
    RetrievalOutcome,
    RetrievalStrategy,
    VectorStrategy,
)
from pdf_rag.retrieval.vocabulary import (
    DOMAIN_PATTERNS,
    GENERIC_FINANCIAL_KEYWORDS,
    STOPWORDS,
    SYNONYM_TABLE,
    DomainPattern,
)

__all__ = [
    # Lexical
    "LexicalRanking",
    "LexicalScorer",
    "LexicalWeights",
    "QueryTerms",
    "ScoreBreakdown",
    "analyze_query",
    "loose_score",
    "score_chunk",
    "tokenize",
    # Vector
    "VectorScorer",
    "cosine_similarity",
    # Orchestration
    "LexicalStrategy",
    "RetrievalOrchestrator",
    "RetrievalOutcome",
    "RetrievalStrategy",
    "VectorStrategy",
    # Vocabulary
    "DOMAIN_PATTERNS",
    "GENERIC_FINANCIAL_KEYWORDS",
    "STOPWORDS",
    "SYNONYM_TABLE",
    "DomainPattern",
]
