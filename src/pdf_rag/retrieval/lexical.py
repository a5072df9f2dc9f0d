"""
Lexical Scorer - Single Responsibility: keyword relevance over chunks.

Used when vector search is skipped or fails. Scoring is table-driven:
the vocabulary lives in retrieval/vocabulary.py and the weights in
LexicalWeights, so each rule can be unit-tested on its own.

SCORING RULES (summed per chunk):
---------------------------------
(a) exact     - whole-word count of each query keyword (STOPWORDS excluded)
(b) synonym   - count of each expansion term
(c) substring - flat bonus per longer query keyword found anywhere in the chunk
(d) domain    - intent bonus (revenue, financial statement, growth, companies)
(e) year      - 4-digit year present in both query and chunk
(f) numeric   - chunk contains a monetary / percentage figure
(g) page      - small tie-breaker from the page number

(f) and (g) only apply to chunks that already matched through (a)-(e),
so an unrelated chunk keeps a score of 0.

FALLBACK CASCADE:
-----------------
    lexical (confident) -> loose -> lexical_low_confidence -> last_resort

The first stage that yields anything wins. Every stage is a pure function
of (query, chunks), so ranking is deterministic for identical inputs.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Callable, Sequence

from pdf_rag.core.models import Chunk, ScoredChunk
from pdf_rag.retrieval.vocabulary import (
    DOMAIN_PATTERNS,
    GENERIC_FINANCIAL_KEYWORDS,
    STOPWORDS,
    SYNONYM_TABLE,
    DomainPattern,
)

logger = logging.getLogger(__name__)

# ASCII alphanumeric runs, or runs of any other letters (CJK has no spaces,
# so script boundaries are the only split available inside a phrase).
_TOKEN_RE = re.compile(r"[a-z0-9]+|[^\W\da-z_]+")
_YEAR_RE = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)")
_NUMERIC_RE = re.compile(
    r"[$¥€£]\s?\d[\d,]*(?:\.\d+)?"
    r"|\d[\d,]*(?:\.\d+)?\s?(?:%|percent\b|billion\b|million\b|trillion\b|十億|百万|億|兆|円|ドル)"
)


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LexicalWeights:
    """
    Named weights for every scoring rule.

    Only the relative ordering they produce is a contract. The absolute
    values were tuned by hand against annual-report PDFs.
    """

    exact_match: float = 10.0
    synonym_match: float = 3.0
    substring_bonus: float = 2.0
    substring_min_length: int = 4
    year_match: float = 20.0
    numeric_pattern: float = 5.0
    page_modulus: int = 5
    page_tiebreak: float = 0.1
    min_confident_score: float = 10.0
    loose_word: float = 5.0
    loose_min_length: int = 3
    loose_keyword_bonus: float = 2.0
    last_resort_score: float = 0.01


# ---------------------------------------------------------------------------
# QUERY ANALYSIS (pure)
# ---------------------------------------------------------------------------


def normalize(text: str) -> str:
    """NFKC + lowercase, so full-width digits and letters compare equal."""
    return unicodedata.normalize("NFKC", text).lower()


def tokenize(text: str) -> list[str]:
    """Split normalized text into tokens, dropping tokens of length <= 1."""
    return [t for t in _TOKEN_RE.findall(normalize(text)) if len(t) > 1]


def expand_tokens(
    normalized_query: str,
    tokens: Sequence[str],
    table: dict[str, tuple[str, ...]] = SYNONYM_TABLE,
) -> frozenset[str]:
    """
    Collect synonym expansions for a query.

    ASCII keys must match a whole token. Non-ASCII keys (Japanese) match
    as substrings of the query. Terms already in the query are left out.
    """
    token_set = set(tokens)
    expanded: set[str] = set()

    for key, synonyms in table.items():
        if key.isascii():
            hit = key in token_set
        else:
            hit = key in normalized_query
        if hit:
            expanded.update(synonyms)

    return frozenset(expanded - token_set)


@dataclass(frozen=True)
class QueryTerms:
    """Everything the scoring rules need to know about a query."""

    text: str
    tokens: tuple[str, ...]
    expansions: frozenset[str]
    years: frozenset[str]
    intents: tuple[DomainPattern, ...]

    @property
    def keywords(self) -> tuple[str, ...]:
        """Tokens matched against chunk text: the query minus STOPWORDS."""
        return tuple(t for t in self.tokens if t not in STOPWORDS)

    @property
    def is_trivial(self) -> bool:
        return not self.keywords


def analyze_query(
    query: str,
    patterns: Sequence[DomainPattern] = DOMAIN_PATTERNS,
) -> QueryTerms:
    """Normalize, tokenize and expand a query once, for all chunks."""
    text = normalize(query)
    tokens = tuple(tokenize(query))
    return QueryTerms(
        text=text,
        tokens=tokens,
        expansions=expand_tokens(text, tokens),
        years=frozenset(_YEAR_RE.findall(text)),
        intents=tuple(p for p in patterns if any(t in text for t in p.triggers)),
    )


def count_term(term: str, content: str) -> int:
    """
    Count occurrences of a term in normalized content.

    ASCII terms count whole-word hits only; other scripts count substrings.
    """
    if term.isascii():
        pattern = r"(?<![a-z0-9])" + re.escape(term) + r"(?![a-z0-9])"
        return len(re.findall(pattern, content))
    return content.count(term)


# ---------------------------------------------------------------------------
# STRICT SCORING
# ---------------------------------------------------------------------------


@dataclass
class ScoreBreakdown:
    """Per-rule contributions for one chunk - the explanation of its rank."""

    exact: float = 0.0
    synonym: float = 0.0
    substring: float = 0.0
    domain: float = 0.0
    year: float = 0.0
    numeric: float = 0.0
    page: float = 0.0
    matched_intents: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return (self.exact + self.synonym + self.substring + self.domain + self.year) > 0

    @property
    def total(self) -> float:
        return (
            self.exact + self.synonym + self.substring + self.domain
            + self.year + self.numeric + self.page
        )


def score_chunk(
    terms: QueryTerms,
    chunk: Chunk,
    weights: LexicalWeights = LexicalWeights(),
) -> ScoreBreakdown:
    """Apply rules (a)-(g) to one chunk."""
    content = normalize(chunk.content)
    breakdown = ScoreBreakdown()

    for token in terms.keywords:
        breakdown.exact += count_term(token, content) * weights.exact_match
        if len(token) >= weights.substring_min_length and token in content:
            breakdown.substring += weights.substring_bonus

    for term in sorted(terms.expansions):
        breakdown.synonym += count_term(term, content) * weights.synonym_match

    for pattern in terms.intents:
        if any(word in content for word in pattern.vocabulary):
            breakdown.domain += pattern.bonus
            breakdown.matched_intents.append(pattern.name)

    if terms.years:
        shared = terms.years & set(_YEAR_RE.findall(content))
        breakdown.year = len(shared) * weights.year_match

    if breakdown.matched:
        if _NUMERIC_RE.search(content):
            breakdown.numeric = weights.numeric_pattern
        breakdown.page = (chunk.page % weights.page_modulus) * weights.page_tiebreak

    return breakdown


def rank_by_score(scored: list[ScoredChunk], limit: int) -> list[ScoredChunk]:
    """Keep positive scores, sort descending. sorted() is stable, so ties keep chunk order."""
    positive = [s for s in scored if s.score > 0]
    return sorted(positive, key=lambda s: s.score, reverse=True)[:limit]


# ---------------------------------------------------------------------------
# LOOSE SCORING
# ---------------------------------------------------------------------------


def loose_score(
    terms: QueryTerms,
    chunk: Chunk,
    weights: LexicalWeights = LexicalWeights(),
) -> float:
    """
    Permissive score: substring hits of any query keyword, plus a flat
    bonus when such a chunk also holds a generic financial keyword.

    Returns 0 when the query has no words long enough to search for, and
    for chunks containing none of them.
    """
    words = [t for t in terms.keywords if len(t) >= weights.loose_min_length]
    if not words:
        return 0.0

    content = normalize(chunk.content)
    hits = sum(content.count(word) for word in words)
    if hits == 0:
        return 0.0

    score = hits * weights.loose_word
    if any(keyword in content for keyword in GENERIC_FINANCIAL_KEYWORDS):
        score += weights.loose_keyword_bonus
    return score


# ---------------------------------------------------------------------------
# SCORER + CASCADE
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LexicalRanking:
    """Result of the cascade: the ranked chunks and the stage that produced them."""

    scored: list[ScoredChunk]
    stage: str


Stage = Callable[[QueryTerms, Sequence[Chunk], int], list[ScoredChunk]]


class LexicalScorer:
    """
    Table-driven lexical scorer with an ordered fallback cascade.

    Args:
        weights: Scoring weights (configuration, not semantics)
        last_resort: Return the leading chunks when nothing matches.
            Deliberate "always attempt an answer" policy; disable to get
            an empty ranking for non-matching queries.
    """

    def __init__(
        self,
        weights: LexicalWeights | None = None,
        last_resort: bool = True,
    ):
        self.weights = weights or LexicalWeights()
        self.last_resort = last_resort

    # -- stages ---------------------------------------------------------

    def _strict(self, terms: QueryTerms, chunks: Sequence[Chunk], limit: int) -> list[ScoredChunk]:
        scored = [ScoredChunk(c, score_chunk(terms, c, self.weights).total) for c in chunks]
        return rank_by_score(scored, limit)

    def _confident(self, terms: QueryTerms, chunks: Sequence[Chunk], limit: int) -> list[ScoredChunk]:
        ranked = self._strict(terms, chunks, limit)
        if ranked and ranked[0].score >= self.weights.min_confident_score:
            return ranked
        return []

    def _loose(self, terms: QueryTerms, chunks: Sequence[Chunk], limit: int) -> list[ScoredChunk]:
        scored = [ScoredChunk(c, loose_score(terms, c, self.weights)) for c in chunks]
        return rank_by_score(scored, limit)

    def _last_resort(self, terms: QueryTerms, chunks: Sequence[Chunk], limit: int) -> list[ScoredChunk]:
        if not self.last_resort or terms.is_trivial:
            return []
        return [ScoredChunk(c, self.weights.last_resort_score) for c in chunks[:limit]]

    def stages(self) -> list[tuple[str, Stage]]:
        """The cascade, in the order it is tried."""
        return [
            ("lexical", self._confident),
            ("loose", self._loose),
            ("lexical_low_confidence", self._strict),
            ("last_resort", self._last_resort),
        ]

    # -- public API -----------------------------------------------------

    def rank(self, query: str, chunks: Sequence[Chunk], limit: int = 5) -> LexicalRanking:
        """Run the cascade and report which stage produced the ranking."""
        if limit <= 0 or not chunks:
            return LexicalRanking(scored=[], stage="none")

        terms = analyze_query(query)
        if terms.is_trivial:
            logger.debug("Query %r has no usable tokens", query)

        for name, stage in self.stages():
            ranked = stage(terms, chunks, limit)
            if ranked:
                if name != "lexical":
                    logger.info("Lexical scoring fell back to '%s' stage", name)
                logger.debug(
                    "Stage %s ranked pages %s",
                    name, [s.chunk.page for s in ranked],
                )
                return LexicalRanking(scored=ranked, stage=name)

        return LexicalRanking(scored=[], stage="none")

    def score(self, query: str, chunks: Sequence[Chunk], limit: int = 5) -> list[ScoredChunk]:
        """Top-`limit` chunks with a positive score, best first."""
        return self.rank(query, chunks, limit).scored

    def explain(self, query: str, chunk: Chunk) -> ScoreBreakdown:
        """Per-rule breakdown of the strict score for one chunk."""
        return score_chunk(analyze_query(query), chunk, self.weights)
