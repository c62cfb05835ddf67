"""Core package initialization."""

from agent_workflows.core.config import EngineConfig, LLMConfig, WorkflowsConfig

__all__ = [
    "EngineConfig",
    "LLMConfig",
    "WorkflowsConfig",
]
