"""Agent Workflows.

Reusable orchestration patterns for composing LLM calls into multi-step
pipelines:
- prompt chaining with early termination
- parallel fan-out with aggregation
- orchestrator-workers task decomposition
- evaluator-optimizer refinement loops
"""

__version__ = "0.1.0"

from agent_workflows.core.config import WorkflowsConfig
from agent_workflows.core.workflows import WorkflowEngine

__all__ = ["__version__", "WorkflowEngine", "WorkflowsConfig"]
