"""Prompt chaining: each step consumes the previous step's output.

A step may carry a failure marker. When the model's output for that step
contains the marker, the chain stops and reports :class:`ChainAborted`
instead of running the remaining steps.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .cancellation import CancellationToken
from .completion import CompletionPort
from .errors import StepFailedError, WorkflowCancelledError
from .events import EventHandler, emit
from .prompt import PromptTemplate, as_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChainStep:
    """One link of a chain.

    The template is rendered with ``input`` bound to the previous output.
    """

    template: PromptTemplate | str
    failure_marker: str | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class ChainResult:
    output: str
    outputs: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ChainAborted:
    """The model signalled that the chain cannot proceed.

    ``outputs`` holds every output produced up to and including the
    aborting step.
    """

    index: int
    output: str
    outputs: tuple[str, ...] = ()


def run_chain(
    port: CompletionPort,
    steps: Sequence[ChainStep],
    initial_input: str,
    *,
    cancel: CancellationToken | None = None,
    on_event: EventHandler | None = None,
) -> ChainResult | ChainAborted:
    """Run ``steps`` in order starting from ``initial_input``.

    Raises:
        StepFailedError: A completion call failed. Later steps never run.
        UnboundPlaceholderError: A step template references a name other
            than ``input``.
        WorkflowCancelledError: ``cancel`` was triggered.
    """

    outputs: list[str] = []
    current = initial_input

    logger.info("Starting chain", extra={"workflow": "chain", "steps": len(steps)})

    for index, step in enumerate(steps):
        label = step.name or f"step {index}"
        prompt = as_template(step.template).render(input=current)

        logger.info(f"Chain {label} running", extra={"workflow": "chain", "step": index})
        try:
            current = port.complete(prompt, cancel=cancel)
        except WorkflowCancelledError:
            raise
        except Exception as e:
            logger.error(f"Chain {label} failed: {e}", extra={"workflow": "chain", "step": index})
            raise StepFailedError(index, e) from e

        outputs.append(current)
        emit(on_event, "chain.step_completed", index=index, name=step.name, output=current)

        if step.failure_marker and step.failure_marker in current:
            logger.info(
                f"Chain aborted at {label}: output contains failure marker",
                extra={"workflow": "chain", "step": index, "marker": step.failure_marker},
            )
            emit(on_event, "chain.aborted", index=index, output=current)
            return ChainAborted(index=index, output=current, outputs=tuple(outputs))

    logger.info("Chain completed", extra={"workflow": "chain", "steps": len(steps)})
    return ChainResult(output=current, outputs=tuple(outputs))
