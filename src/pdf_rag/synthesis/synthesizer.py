"""
Answer Synthesizer - ranked chunks + query -> cited RagResult.

Three modes:
- empty:     no chunks -> NO_INFORMATION_APOLOGY, no sources
- generated: one generation-provider call, text returned verbatim
- template:  deterministic offline answer (no provider, provider error,
             or a blank response)

In every mode `sources` mirrors the chunks used, in rank order, and
`selected_documents` lists their filenames once each.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from pdf_rag.core.models import Chunk, ScoredChunk
from pdf_rag.observability import (
    RAG_SYNTHESIS_MODE,
    RAG_SYNTHESIS_SOURCE_COUNT,
    get_tracer,
)
from pdf_rag.schemas.results import RagResult, Source
from pdf_rag.synthesis.messages import NO_INFORMATION_APOLOGY
from pdf_rag.synthesis.prompts import SYSTEM_PROMPT, build_user_prompt
from pdf_rag.synthesis.template import render_template_answer

if TYPE_CHECKING:
    from pdf_rag.core.protocols import GenerationProvider

logger = logging.getLogger(__name__)


def dedupe_filenames(chunks: Sequence[Chunk]) -> list[str]:
    """Filenames in first-seen order, each once."""
    return list(dict.fromkeys(c.filename for c in chunks))


class AnswerSynthesizer:
    """
    Turns a ranking into an answer.

    Args:
        generator: Optional generation provider. None means template-only.
        system_prompt: Instruction sent with every generation call
    """

    def __init__(
        self,
        generator: GenerationProvider | None = None,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self._generator = generator
        self.system_prompt = system_prompt

    def synthesize(
        self,
        query: str,
        ranked: Sequence[ScoredChunk | Chunk],
        strategy: str | None = None,
    ) -> RagResult:
        """Build the RagResult for a ranking (best chunk first)."""
        chunks = [r.chunk if isinstance(r, ScoredChunk) else r for r in ranked]

        with get_tracer().start_span("rag.synthesize") as span:
            span.set_attribute(RAG_SYNTHESIS_SOURCE_COUNT, len(chunks))

            if not chunks:
                span.set_attribute(RAG_SYNTHESIS_MODE, "empty")
                return RagResult(answer=NO_INFORMATION_APOLOGY, strategy=strategy)

            answer = self._generate(query, chunks)
            generated = answer is not None
            if answer is None:
                answer = render_template_answer(query, chunks)

            span.set_attribute(RAG_SYNTHESIS_MODE, "generated" if generated else "template")

        return RagResult(
            answer=answer,
            sources=[Source.from_chunk(c) for c in chunks],
            selected_documents=dedupe_filenames(chunks),
            strategy=strategy,
            generated=generated,
        )

    def _generate(self, query: str, chunks: Sequence[Chunk]) -> str | None:
        """One generation attempt. None means "use the template"."""
        if self._generator is None:
            return None

        try:
            text = self._generator.generate(self.system_prompt, build_user_prompt(query, chunks))
        except Exception as e:
            logger.warning("Generation failed, using template answer: %s", e)
            return None

        if not text or not text.strip():
            logger.warning("Generation returned empty text, using template answer")
            return None
        return text
