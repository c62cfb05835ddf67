"""Workflow engine: four orchestration patterns over a completion port.

- prompt chaining with early termination (:mod:`.chain`)
- parallel fan-out with aggregation (:mod:`.parallel`)
- orchestrator-workers task decomposition (:mod:`.orchestrator_workers`)
- evaluator-optimizer refinement (:mod:`.evaluator_optimizer`)

The runners are independent; they share only the completion port and the
prompt template renderer. Prompts are always passed in by the caller.
"""

from .cancellation import CancellationToken
from .chain import ChainAborted, ChainResult, ChainStep, run_chain
from .completion import CompletionPort, DecodeResult, LLMCompletionPort, decode_structured
from .errors import (
    AggregationFailedError,
    DecodeError,
    DecompositionFailedError,
    StepFailedError,
    UnboundPlaceholderError,
    WorkflowCancelledError,
    WorkflowError,
)
from .events import WorkflowEvent
from .evaluator_optimizer import RefinedResponse, RefineFailed, run_refine_loop
from .orchestrator_workers import DispatchResult, SubtaskOutcome, run_decompose_dispatch
from .parallel import AggregatedResult, run_fan_out_aggregate
from .prompt import PromptTemplate, render
from .schemas import Decomposition, Evaluation, Generation, Task, Verdict

__all__ = [
    "AggregatedResult",
    "AggregationFailedError",
    "CancellationToken",
    "ChainAborted",
    "ChainResult",
    "ChainStep",
    "CompletionPort",
    "DecodeError",
    "DecodeResult",
    "Decomposition",
    "DecompositionFailedError",
    "DispatchResult",
    "Evaluation",
    "Generation",
    "LLMCompletionPort",
    "PromptTemplate",
    "RefineFailed",
    "RefinedResponse",
    "StepFailedError",
    "SubtaskOutcome",
    "Task",
    "UnboundPlaceholderError",
    "Verdict",
    "WorkflowCancelledError",
    "WorkflowError",
    "WorkflowEvent",
    "decode_structured",
    "render",
    "run_chain",
    "run_decompose_dispatch",
    "run_fan_out_aggregate",
    "run_refine_loop",
]
