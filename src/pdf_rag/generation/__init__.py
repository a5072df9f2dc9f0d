"""
Generation module - chat-model answer generation.

- OpenAIGenerator: langchain-openai ChatOpenAI at temperature 0
- StaticGenerator: canned response, for tests and demos
- get_generation_provider: returns None when unconfigured
"""

from pdf_rag.generation.openai_generator import (
    OpenAIGenerator,
    StaticGenerator,
    get_generation_provider,
)

__all__ = [
    "OpenAIGenerator",
    "StaticGenerator",
    "get_generation_provider",
]
