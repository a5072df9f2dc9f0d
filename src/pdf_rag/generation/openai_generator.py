"""
Generation provider - one system + user prompt in, answer text out.

The model is injectable so tests can pass a fake chat model; by default a
ChatOpenAI is created lazily on first use, the same way the LangGraph nodes
create theirs.
"""

from __future__ import annotations

import logging
import os

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from pdf_rag.core.errors import GenerationProviderError
from pdf_rag.core.protocols import GenerationProvider
from pdf_rag.observability import get_tracer, model_attributes

logger = logging.getLogger(__name__)


class OpenAIGenerator:
    """
    Chat-model generation provider.

    Temperature is fixed at 0: answers should lean deterministic and stay
    close to the supplied context.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        chat_model: BaseChatModel | None = None,
    ):
        self.model = model
        self._llm = chat_model

    def _get_llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = ChatOpenAI(model=self.model, temperature=0)
        return self._llm

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """
        Issue a single generation call.

        Raises:
            GenerationProviderError: the model call failed
        """
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        with get_tracer().start_span("rag.generate", attributes=model_attributes(self.model)):
            try:
                response = self._get_llm().invoke(messages)
            except Exception as e:
                raise GenerationProviderError(f"Generation call failed: {e}") from e

        content = response.content
        if isinstance(content, list):
            content = "".join(
                part if isinstance(part, str) else part.get("text", "")
                for part in content
            )
        return str(content)


class StaticGenerator:
    """Returns the same text for every prompt and remembers the last call."""

    def __init__(self, response: str):
        self.response = response
        self.calls: list[tuple[str, str]] = []

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        return self.response


def get_generation_provider(model: str = "gpt-4o-mini") -> GenerationProvider | None:
    """
    Factory for the generation provider.

    Returns None when OPENAI_API_KEY is not set; the synthesizer then
    answers from its deterministic template.
    """
    if not os.environ.get("OPENAI_API_KEY"):
        logger.info("OPENAI_API_KEY not set, using template answers")
        return None
    return OpenAIGenerator(model=model)
