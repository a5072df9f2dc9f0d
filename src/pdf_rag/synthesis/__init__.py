"""
Synthesis module - turn ranked chunks into a cited answer.
"""

from pdf_rag.synthesis.messages import (
    NO_CHUNKS_FOUND,
    NO_DOCUMENTS_SELECTED,
    NO_INFORMATION_APOLOGY,
    no_relevant_information,
)
from pdf_rag.synthesis.prompts import (
    SYSTEM_PROMPT,
    build_context_block,
    build_user_prompt,
    citation_tag,
)
from pdf_rag.synthesis.synthesizer import AnswerSynthesizer, dedupe_filenames
from pdf_rag.synthesis.template import classify_question, render_template_answer

__all__ = [
    "NO_CHUNKS_FOUND",
    "NO_DOCUMENTS_SELECTED",
    "NO_INFORMATION_APOLOGY",
    "no_relevant_information",
    "SYSTEM_PROMPT",
    "build_context_block",
    "build_user_prompt",
    "citation_tag",
    "AnswerSynthesizer",
    "dedupe_filenames",
    "classify_question",
    "render_template_answer",
]
