"""
Prompt construction for the generation provider.

PURE FUNCTIONS - same chunks and query always produce the same prompts,
so they are tested without any model.
"""

from __future__ import annotations

from typing import Sequence

from pdf_rag.core.models import Chunk

SYSTEM_PROMPT = """You answer questions about uploaded PDF documents such as annual reports.

Rules:
- Use ONLY the information in the supplied context.
- Cite the page for every fact, using the tag shown before each excerpt, e.g. [report.pdf, page 12].
- If the context does not contain the answer, say that it cannot be answered from the documents.
- Answer in the language of the question."""


def citation_tag(chunk: Chunk) -> str:
    return f"[{chunk.filename}, page {chunk.page}]"


def build_context_block(chunks: Sequence[Chunk]) -> str:
    """Concatenate chunks, each prefixed with its citation tag."""
    return "\n\n".join(f"{citation_tag(c)}\n{c.content}" for c in chunks)


def build_user_prompt(query: str, chunks: Sequence[Chunk]) -> str:
    return f"""Context:
{build_context_block(chunks)}

Question: {query}

Answer:"""
