"""
Template answers - the generation fallback.

Deterministic and offline: quotes the top chunk in full with its
filename/page attribution, then the remaining chunks as additional
context. Nothing is written that is not in the chunks, apart from the
fixed preamble chosen by the question type.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Sequence

from pdf_rag.core.models import Chunk
from pdf_rag.synthesis.messages import NO_INFORMATION_APOLOGY


@dataclass(frozen=True)
class QuestionType:
    """A kind of question, recognised by marker phrases, and how to open the answer."""

    name: str
    markers: tuple[str, ...]
    preamble: str


# Checked in order; the first match wins. "how much" precedes "how".
QUESTION_TYPES: tuple[QuestionType, ...] = (
    QuestionType(
        name="amount",
        markers=("how much", "how many", "いくら", "金額"),
        preamble='For your question "{query}", the uploaded PDFs contain the following figures.',
    ),
    QuestionType(
        name="reason",
        markers=("why", "reason", "なぜ", "理由"),
        preamble='On the reasons behind "{query}", the PDFs give this explanation.',
    ),
    QuestionType(
        name="method",
        markers=("how", "どのように", "方法"),
        preamble='On "{query}", the PDFs describe it as follows.',
    ),
)

GENERAL_PREAMBLE = 'Regarding "{query}", the following information was extracted from the uploaded PDFs.'


def _has_marker(marker: str, text: str) -> bool:
    # English markers must be whole words ("how" is not in "show")
    if marker.isascii():
        return re.search(r"(?<![a-z])" + re.escape(marker) + r"(?![a-z])", text) is not None
    return marker in text


def classify_question(query: str) -> str:
    """Return the question type name, or "general"."""
    text = unicodedata.normalize("NFKC", query).lower()
    for question_type in QUESTION_TYPES:
        if any(_has_marker(marker, text) for marker in question_type.markers):
            return question_type.name
    return "general"


def preamble_for(query: str) -> str:
    kind = classify_question(query)
    for question_type in QUESTION_TYPES:
        if question_type.name == kind:
            return question_type.preamble.format(query=query)
    return GENERAL_PREAMBLE.format(query=query)


def render_template_answer(query: str, chunks: Sequence[Chunk]) -> str:
    """Build the offline answer from ranked chunks (best first)."""
    if not chunks:
        return NO_INFORMATION_APOLOGY

    top, rest = chunks[0], chunks[1:]
    lines = [
        preamble_for(query),
        "",
        f"According to {top.filename}, page {top.page}:",
        top.content,
    ]

    if rest:
        lines += ["", "Additional context:"]
        for chunk in rest:
            lines.append(f"- {chunk.filename}, page {chunk.page}: {chunk.content}")

    return "\n".join(lines)
