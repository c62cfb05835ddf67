"""Evaluator-optimizer: generate, evaluate, feed the critique back, repeat.

The loop is explicit and bounded. Each round makes one structured generation
call followed by one structured evaluation call of that generation; rounds
never overlap. ``PASS`` and ``FAIL`` end the loop, ``NEEDS_IMPROVEMENT``
starts another round with the previous attempt and its feedback as context,
until ``max_iterations`` rounds have been spent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .cancellation import CancellationToken
from .completion import CompletionPort
from .events import EventHandler, emit
from .prompt import PromptTemplate, as_template
from .schemas import Evaluation, Generation, Verdict

logger = logging.getLogger(__name__)

CONTEXT_TEMPLATE = PromptTemplate(
    "previous attempt:\n{response}\n\nfeedback:\n{feedback}\n\nimprove accordingly."
)


@dataclass(frozen=True, slots=True)
class RefinedResponse:
    solution: str
    iterations: int
    chain_of_thought: tuple[Generation, ...] = ()


@dataclass(frozen=True, slots=True)
class RefineFailed:
    """The loop ended without a passing solution.

    ``reason`` is ``"fail"`` when the evaluator returned ``FAIL`` and
    ``"max_iterations"`` when the round budget ran out.
    """

    feedback: str
    iterations: int
    last_response: str
    reason: Literal["fail", "max_iterations"]
    chain_of_thought: tuple[Generation, ...] = ()


@dataclass(slots=True)
class IterationState:
    """Loop state, owned and mutated only by :func:`run_refine_loop`."""

    iteration: int = 0
    context: str = ""


def run_refine_loop(
    port: CompletionPort,
    task: str,
    generation_template: PromptTemplate | str,
    evaluation_template: PromptTemplate | str,
    max_iterations: int,
    *,
    cancel: CancellationToken | None = None,
    on_event: EventHandler | None = None,
) -> RefinedResponse | RefineFailed:
    """Refine a solution to ``task`` until it passes evaluation.

    ``generation_template`` is rendered with ``task`` and ``context``;
    ``evaluation_template`` with ``task`` and ``response``. Both calls expect
    structured output, and a reply that does not decode raises
    :class:`~agent_workflows.engine.errors.DecodeError`. Completion errors
    propagate unchanged.
    """

    if max_iterations < 1:
        raise ValueError("max_iterations must be at least 1")

    generator = as_template(generation_template)
    evaluator = as_template(evaluation_template)
    state = IterationState()
    history: list[Generation] = []

    while True:
        round_number = state.iteration + 1
        extra = {"workflow": "refine", "iteration": round_number}

        logger.info(f"Refine round {round_number}/{max_iterations}: generating", extra=extra)
        generation = port.complete_structured(
            generator.render(task=task, context=state.context), Generation, cancel=cancel
        )
        history.append(generation)
        emit(
            on_event,
            "refine.generated",
            iteration=round_number,
            thoughts=generation.thoughts,
            response=generation.response,
        )

        evaluation = port.complete_structured(
            evaluator.render(task=task, response=generation.response), Evaluation, cancel=cancel
        )
        state.iteration = round_number
        logger.info(
            f"Refine round {round_number}: {evaluation.evaluation.value}",
            extra={**extra, "verdict": evaluation.evaluation.value},
        )
        logger.debug(f"Evaluator feedback: {evaluation.feedback}", extra=extra)
        emit(
            on_event,
            "refine.evaluated",
            iteration=round_number,
            verdict=evaluation.evaluation.value,
            feedback=evaluation.feedback,
        )

        if evaluation.evaluation is Verdict.PASS:
            return RefinedResponse(
                solution=generation.response,
                iterations=state.iteration,
                chain_of_thought=tuple(history),
            )

        if evaluation.evaluation is Verdict.FAIL or state.iteration >= max_iterations:
            reason: Literal["fail", "max_iterations"] = (
                "fail" if evaluation.evaluation is Verdict.FAIL else "max_iterations"
            )
            logger.warning(
                f"Refine loop stopped without a passing solution ({reason})",
                extra={**extra, "reason": reason},
            )
            return RefineFailed(
                feedback=evaluation.feedback,
                iterations=state.iteration,
                last_response=generation.response,
                reason=reason,
                chain_of_thought=tuple(history),
            )

        state.context = CONTEXT_TEMPLATE.render(
            response=generation.response, feedback=evaluation.feedback
        )
