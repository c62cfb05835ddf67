"""LLM package initialization."""

from agent_workflows.llm.factory import LLMFactory
from agent_workflows.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
