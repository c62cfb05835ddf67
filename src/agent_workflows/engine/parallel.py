"""Parallelization: fan one template out over many inputs, then aggregate.

All invocations run concurrently on a worker pool so that latency is bounded
by the slowest call rather than the sum of calls. The join is fail-fast: the
aggregator expects a complete result set, so a single failed invocation fails
the whole run and no aggregation call is made.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Executor, Future, as_completed
from dataclasses import dataclass

from .cancellation import CancellationToken
from .completion import CompletionPort
from .errors import AggregationFailedError, UnboundPlaceholderError, WorkflowCancelledError
from .events import EventHandler, emit
from .pool import worker_pool
from .prompt import PromptTemplate, as_template

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\n\n---\n\n"

_AGGREGATE_BINDINGS = ("results", "task")


@dataclass(frozen=True, slots=True)
class AggregatedResult:
    """``individual_results[i]`` is the output for ``inputs[i]``."""

    individual_results: tuple[str, ...]
    aggregated_output: str


def _fan_out(
    port: CompletionPort,
    prompts: list[str],
    *,
    pool: Executor,
    cancel: CancellationToken | None,
    on_event: EventHandler | None,
) -> list[str]:
    # Siblings share a child token: a failure stops them without cancelling the caller.
    siblings = cancel.child() if cancel is not None else CancellationToken()
    futures: dict[Future[str], int] = {}
    results: list[str] = [""] * len(prompts)

    try:
        for index, prompt in enumerate(prompts):
            futures[pool.submit(port.complete, prompt, cancel=siblings)] = index

        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = future.result()
            except Exception as e:
                if isinstance(e, WorkflowCancelledError) and cancel is not None and cancel.cancelled:
                    raise
                logger.error(
                    f"Fan-out input {index} failed: {e}",
                    extra={"workflow": "fan_out", "index": index},
                )
                raise AggregationFailedError(index, e) from e

            logger.info(
                f"Fan-out input {index} completed",
                extra={"workflow": "fan_out", "index": index},
            )
            emit(on_event, "fan_out.completed", index=index, output=results[index])
    except BaseException:
        siblings.cancel()
        for future in futures:
            future.cancel()
        raise

    return results


def run_fan_out_aggregate(
    port: CompletionPort,
    template: PromptTemplate | str,
    aggregate_template: PromptTemplate | str,
    inputs: Sequence[str],
    *,
    task: str | None = None,
    separator: str = DEFAULT_SEPARATOR,
    max_workers: int | None = None,
    executor: Executor | None = None,
    cancel: CancellationToken | None = None,
    on_event: EventHandler | None = None,
) -> AggregatedResult:
    """Run ``template`` once per input concurrently and aggregate the outputs.

    ``template`` is rendered with ``input``. ``aggregate_template`` is
    rendered with ``results`` (the outputs joined by ``separator`` in input
    order) and ``task``, which defaults to the fan-out template text.

    A private pool of ``min(len(inputs), max_workers)`` threads is used unless
    a shared ``executor`` is given.

    Raises:
        ValueError: ``inputs`` is empty.
        AggregationFailedError: Any fan-out call or the aggregation call failed.
        UnboundPlaceholderError: A template references an unknown name.
        WorkflowCancelledError: ``cancel`` was triggered.
    """

    if not inputs:
        raise ValueError("Fan-out needs at least one input")

    template = as_template(template)
    aggregate_template = as_template(aggregate_template)

    # Check both templates before spending any model calls.
    unknown = [p for p in aggregate_template.placeholders if p not in _AGGREGATE_BINDINGS]
    if unknown:
        raise UnboundPlaceholderError(unknown)
    prompts = [template.render(input=value) for value in inputs]

    width = min(len(prompts), max_workers or len(prompts))
    logger.info(
        f"Fanning out {len(prompts)} input(s)",
        extra={"workflow": "fan_out", "inputs": len(prompts), "workers": width},
    )

    with worker_pool(width, executor) as pool:
        results = _fan_out(port, prompts, pool=pool, cancel=cancel, on_event=on_event)

    aggregate_prompt = aggregate_template.render(
        results=separator.join(results),
        task=task if task is not None else template.template,
    )

    logger.info("Aggregating fan-out results", extra={"workflow": "fan_out"})
    try:
        aggregated = port.complete(aggregate_prompt, cancel=cancel)
    except WorkflowCancelledError:
        raise
    except Exception as e:
        logger.error(f"Aggregation call failed: {e}", extra={"workflow": "fan_out"})
        raise AggregationFailedError(None, e) from e

    emit(on_event, "fan_out.aggregated", output=aggregated)
    return AggregatedResult(individual_results=tuple(results), aggregated_output=aggregated)
