"""Exception types raised by the workflow runners.

``ChainAborted`` is deliberately absent: a chain stopped by its failure
marker is a result, not an error (see :mod:`agent_workflows.engine.chain`).
"""

from __future__ import annotations


class WorkflowError(RuntimeError):
    """Base class for every error raised by the engine."""


class UnboundPlaceholderError(WorkflowError):
    """A template references names that the bindings do not provide."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Unbound placeholder(s): {', '.join(self.missing)}")


class DecodeError(WorkflowError):
    """A structured completion did not match the expected schema."""

    def __init__(self, message: str, *, raw: str, schema: str) -> None:
        self.raw = raw
        self.schema = schema
        super().__init__(f"Could not decode {schema}: {message}")


class WorkflowCancelledError(WorkflowError):
    """The caller cancelled the workflow through its cancellation token."""


class StepFailedError(WorkflowError):
    """A chain step's completion call failed; the chain stops there."""

    def __init__(self, index: int, cause: BaseException) -> None:
        self.index = index
        self.cause = cause
        super().__init__(f"Chain step {index} failed: {cause}")


class AggregationFailedError(WorkflowError):
    """A fan-out invocation or the aggregation call failed.

    ``index`` is the position of the failed input, or ``None`` when the final
    aggregation call itself failed. No partial results are exposed.
    """

    def __init__(self, index: int | None, cause: BaseException) -> None:
        self.index = index
        self.cause = cause
        where = "aggregation call" if index is None else f"fan-out input {index}"
        super().__init__(f"{where} failed: {cause}")


class DecompositionFailedError(WorkflowError):
    """The orchestrator call did not produce a usable task list."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Task decomposition failed: {cause}")
