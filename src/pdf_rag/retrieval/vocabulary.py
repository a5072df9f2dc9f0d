"""
Lexical vocabulary - the DATA behind the lexical scorer.

Everything here is a plain table so the scorer itself stays free of
per-term conditionals:

- SYNONYM_TABLE: bilingual query expansion (set union, never replacement)
- DOMAIN_PATTERNS: query intent -> chunk vocabulary -> bonus
- GENERIC_FINANCIAL_KEYWORDS: flat bonus terms used by the loose stage
- STOPWORDS: English function words that never count as query keywords

Keys and terms are stored already normalized (NFKC, lowercase).
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# SYNONYMS
# ---------------------------------------------------------------------------

_REVENUE = ("revenue", "revenues", "sales", "earnings", "income", "収益", "売上")

SYNONYM_TABLE: dict[str, tuple[str, ...]] = {
    # English financial terms
    "revenue": _REVENUE,
    "revenues": _REVENUE,
    "sales": ("revenue", "revenues", "net sales", "売上"),
    "earnings": ("revenue", "income", "profit", "net income"),
    "income": ("earnings", "profit", "net income", "利益"),
    "profit": ("income", "earnings", "margin", "利益"),
    "balance": ("sheet", "statement", "assets", "liabilities", "equity", "貸借対照表"),
    "sheet": ("balance", "statement"),
    "statement": ("balance", "sheet", "financial"),
    "cash": ("cash equivalents", "equivalents", "liquidity", "marketable securities", "現金"),
    "assets": ("asset", "total assets", "資産"),
    "liabilities": ("liability", "debt", "total liabilities", "負債"),
    "equity": ("shareholders", "stockholders", "net assets", "純資産"),
    "growth": ("increase", "increased", "expansion", "成長"),
    # Company names
    "apple": ("aapl", "iphone"),
    "google": ("alphabet", "googl"),
    "alphabet": ("google", "googl"),
    # Japanese financial terms -> English equivalents
    "収益": ("revenue", "revenues", "sales"),
    "総収益": ("total revenue", "revenue", "revenues"),
    "売上": ("sales", "net sales", "revenue"),
    "売上高": ("net sales", "sales", "revenue"),
    "現金": ("cash", "cash equivalents"),
    "現金同等物": ("cash equivalents", "cash"),
    "有価証券": ("securities", "marketable securities"),
    "資産": ("assets", "total assets"),
    "負債": ("liabilities", "total liabilities"),
    "純資産": ("equity", "net assets"),
    "貸借対照表": ("balance sheet", "balance", "statement"),
    "財務諸表": ("financial statements", "financial", "statement"),
    "財務": ("financial",),
    "利益": ("profit", "income", "earnings"),
    "純利益": ("net income", "profit"),
    "営業利益": ("operating income", "income"),
    "成長": ("growth", "increase"),
    "増加": ("increase", "growth"),
}


# ---------------------------------------------------------------------------
# DOMAIN PATTERNS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DomainPattern:
    """
    An intent the query can signal, and the vocabulary that satisfies it.

    The bonus is granted once per chunk when any trigger occurs in the
    query and any vocabulary term occurs in the chunk.
    """

    name: str
    triggers: tuple[str, ...]
    vocabulary: tuple[str, ...]
    bonus: float


DOMAIN_PATTERNS: tuple[DomainPattern, ...] = (
    DomainPattern(
        name="revenue",
        triggers=("revenue", "sales", "収益", "売上"),
        vocabulary=("revenue", "sales", "billion", "income", "earnings"),
        bonus=15.0,
    ),
    DomainPattern(
        name="financial_statement",
        triggers=("financial", "balance sheet", "statement", "財務", "貸借対照表"),
        vocabulary=("financial", "cash", "profit", "margin", "balance", "assets", "liabilities"),
        bonus=15.0,
    ),
    DomainPattern(
        name="growth",
        triggers=("growth", "increase", "成長", "増加"),
        vocabulary=("growth", "increase", "expansion", "development"),
        bonus=12.0,
    ),
    DomainPattern(
        name="company_apple",
        triggers=("apple",),
        vocabulary=("apple",),
        bonus=15.0,
    ),
    DomainPattern(
        name="company_google",
        triggers=("google", "alphabet"),
        vocabulary=("google", "alphabet"),
        bonus=15.0,
    ),
)


# ---------------------------------------------------------------------------
# LOOSE STAGE KEYWORDS
# ---------------------------------------------------------------------------

GENERIC_FINANCIAL_KEYWORDS: tuple[str, ...] = (
    "revenue",
    "income",
    "cash",
    "assets",
    "liabilities",
    "equity",
    "profit",
    "billion",
    "million",
    "financial",
    "収益",
    "売上",
    "現金",
    "資産",
    "負債",
    "利益",
)


# ---------------------------------------------------------------------------
# STOPWORDS
# ---------------------------------------------------------------------------

# Question and function words. They still take part in synonym and intent
# lookup, but are not matched against chunk text.
STOPWORDS: frozenset[str] = frozenset({
    "about", "after", "all", "also", "am", "an", "and", "any", "are", "as",
    "at", "be", "been", "before", "being", "but", "by", "can", "could",
    "did", "do", "does", "during", "each", "for", "from", "had", "has",
    "have", "how", "if", "in", "into", "is", "it", "its", "me", "much",
    "many", "my", "no", "not", "of", "on", "or", "our", "over", "shall",
    "should", "so", "such", "than", "that", "the", "their", "them", "then",
    "there", "these", "they", "this", "those", "to", "us", "was", "we",
    "were", "what", "when", "where", "which", "while", "who", "whom", "why",
    "will", "with", "would", "you", "your",
})
