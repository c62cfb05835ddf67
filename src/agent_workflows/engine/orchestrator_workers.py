"""Orchestrator-workers: decompose a task, then dispatch one worker per subtask.

Unlike fan-out aggregation, subtask failures are local. Each outcome records
either the worker's output or the error it raised, and one failed worker
never prevents the others from completing.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass

from .cancellation import CancellationToken
from .completion import CompletionPort
from .errors import DecompositionFailedError, WorkflowCancelledError
from .events import EventHandler, emit
from .pool import worker_pool
from .prompt import PromptTemplate, as_template
from .schemas import Decomposition, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubtaskOutcome:
    task: Task
    output: str | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class DispatchResult:
    analysis: str
    outcomes: tuple[SubtaskOutcome, ...] = ()

    @property
    def failed(self) -> tuple[SubtaskOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if not outcome.ok)


def decompose(
    port: CompletionPort,
    task: str,
    orchestrator_template: PromptTemplate | str,
    *,
    cancel: CancellationToken | None = None,
) -> Decomposition:
    """Ask the model to split ``task`` into typed subtasks.

    Raises:
        DecompositionFailedError: The call failed or its output did not decode.
    """

    prompt = as_template(orchestrator_template).render(task=task)
    try:
        return port.complete_structured(prompt, Decomposition, cancel=cancel)
    except WorkflowCancelledError:
        raise
    except Exception as e:
        logger.error(f"Decomposition failed: {e}", extra={"workflow": "orchestrator_workers"})
        raise DecompositionFailedError(e) from e


def _run_worker(
    port: CompletionPort,
    prompt: str,
    subtask: Task,
    cancel: CancellationToken | None,
) -> SubtaskOutcome:
    logger.info(
        f"Worker handling subtask: {subtask.type}",
        extra={"workflow": "orchestrator_workers", "task_type": subtask.type},
    )
    try:
        output = port.complete(prompt, cancel=cancel)
    except WorkflowCancelledError:
        raise
    except Exception as e:
        logger.warning(
            f"Subtask {subtask.type!r} failed: {e}",
            extra={"workflow": "orchestrator_workers", "task_type": subtask.type},
        )
        return SubtaskOutcome(task=subtask, error=e)
    return SubtaskOutcome(task=subtask, output=output)


def run_decompose_dispatch(
    port: CompletionPort,
    task: str,
    orchestrator_template: PromptTemplate | str,
    worker_template: PromptTemplate | str,
    *,
    parallel: bool = True,
    max_workers: int | None = None,
    executor: Executor | None = None,
    cancel: CancellationToken | None = None,
    on_event: EventHandler | None = None,
) -> DispatchResult:
    """Decompose ``task`` and run one worker call per subtask.

    ``orchestrator_template`` is rendered with ``task``; ``worker_template``
    with ``original_task``, ``task_type`` and ``task_description``. Outcomes
    are returned in decomposition order whether or not workers run
    concurrently.

    Raises:
        DecompositionFailedError: See :func:`decompose`.
        UnboundPlaceholderError: A template references an unknown name.
        WorkflowCancelledError: ``cancel`` was triggered.
    """

    decomposition = decompose(port, task, orchestrator_template, cancel=cancel)
    emit(
        on_event,
        "orchestrator.decomposed",
        analysis=decomposition.analysis,
        tasks=[t.model_dump() for t in decomposition.tasks],
    )
    logger.info(
        f"Decomposed task into {len(decomposition.tasks)} subtask(s)",
        extra={"workflow": "orchestrator_workers", "subtasks": len(decomposition.tasks)},
    )

    if not decomposition.tasks:
        return DispatchResult(analysis=decomposition.analysis)

    worker = as_template(worker_template)
    prompts = [
        worker.render(
            original_task=task,
            task_type=subtask.type,
            task_description=subtask.description,
        )
        for subtask in decomposition.tasks
    ]
    pairs = list(zip(prompts, decomposition.tasks))

    if parallel:
        width = min(len(pairs), max_workers or len(pairs))
        with worker_pool(width, executor) as pool:
            futures = [
                pool.submit(_run_worker, port, prompt, subtask, cancel) for prompt, subtask in pairs
            ]
            try:
                outcomes = [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
    else:
        outcomes = [_run_worker(port, prompt, subtask, cancel) for prompt, subtask in pairs]

    for index, outcome in enumerate(outcomes):
        emit(
            on_event,
            "orchestrator.subtask_completed",
            index=index,
            task_type=outcome.task.type,
            ok=outcome.ok,
        )

    return DispatchResult(analysis=decomposition.analysis, outcomes=tuple(outcomes))
