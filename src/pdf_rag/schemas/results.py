"""
Result Schemas

These Pydantic models define the OUTPUT CONTRACT of the engine.
Every answer() call returns a RagResult, including the degraded and
no-result paths, so callers never have to special-case a missing field.

WHY PYDANTIC:
-------------
1. The result crosses the boundary to a UI or CLI layer, which wants JSON.
   model_dump() / model_dump_json() give that for free.
2. Field constraints (page >= 1) catch broken source attribution early.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from pdf_rag.core.models import Chunk


class Source(BaseModel):
    """One cited chunk, as shown to the user."""

    filename: str = Field(description="Original filename of the cited document")
    page: int = Field(ge=1, description="1-based page number the text came from")
    text: str = Field(description="Full chunk text that was used")
    url: str = Field(default="", description="Public URL of the document")

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "Source":
        return cls(
            filename=chunk.filename,
            page=chunk.page,
            text=chunk.content,
            url=chunk.source_url,
        )


class RagResult(BaseModel):
    """
    Answer to one query.

    sources mirrors the chunks the answer was built from, in rank order.
    selected_documents lists each contributing filename once.
    """

    answer: str = Field(description="Natural-language answer with citations")
    sources: list[Source] = Field(default_factory=list)
    selected_documents: list[str] = Field(default_factory=list)

    strategy: str | None = Field(
        default=None,
        description="Retrieval stage that produced the sources (vector, lexical, loose, ...)",
    )
    generated: bool = Field(
        default=False,
        description="True when the answer text came from the generation provider",
    )


class DocumentClassification(BaseModel):
    """Which of the selected documents a query will be answered from, and why."""

    documents: list[str] = Field(default_factory=list)
    reasoning: str = ""
