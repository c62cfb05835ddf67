#!/usr/bin/env python3
"""Run one of the four workflow patterns against a configured model.

Settings (API key, base URL, model, ...) are loaded from `.env`; see
`agent_workflows.core.config`. For an OpenAI-compatible endpoint such as
DashScope set `WORKFLOWS_LLM_OPENAI_BASE_URL`.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from agent_workflows import WorkflowEngine
from agent_workflows.engine import (
    ChainAborted,
    RefinedResponse,
    WorkflowError,
    WorkflowEvent,
)

REQUIREMENTS = """An e-commerce platform needs to upgrade its order processing system:
1. Handle 1000 orders per second
2. Support multiple payment methods and coupons
3. Real-time inventory management and alerts
4. Real-time order status tracking
5. Analytics and reporting
Current system: Spring Boot + MySQL, 100k orders per day
"""

DEPARTMENTS = ["IT department", "Sales department", "Finance department", "HR department"]

PROJECT = "Build an online course platform with video streaming, quizzes and payments"

CODING_TASK = (
    "Interview question: convert a list of 10000 User objects into a map keyed by id "
    "efficiently, without using streams."
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an agent workflow pattern (example).")
    parser.add_argument(
        "pattern",
        choices=["chain", "parallel", "orchestrator", "refine"],
        help="Workflow pattern to run",
    )
    return parser.parse_args(argv)


def _print_event(event: WorkflowEvent) -> None:
    print(f"[{event.type}] {', '.join(f'{k}={v!s:.80}' for k, v in event.payload.items())}")


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    with WorkflowEngine() as engine:
        try:
            if args.pattern == "chain":
                chained = engine.run_chain(REQUIREMENTS, on_event=_print_event)
                if isinstance(chained, ChainAborted):
                    print(f"Stopped at step {chained.index}: requirement is not feasible")
                    return 1
                print(chained.output)
            elif args.pattern == "parallel":
                aggregated = engine.run_fan_out_aggregate(DEPARTMENTS, on_event=_print_event)
                print(aggregated.aggregated_output)
            elif args.pattern == "orchestrator":
                dispatched = engine.run_decompose_dispatch(PROJECT, on_event=_print_event)
                print(f"Analysis: {dispatched.analysis}")
                for outcome in dispatched.outcomes:
                    print(f"\n## {outcome.task.type}\n")
                    print(outcome.output if outcome.ok else f"FAILED: {outcome.error}")
            else:
                refined = engine.run_refine_loop(CODING_TASK, on_event=_print_event)
                if isinstance(refined, RefinedResponse):
                    print(refined.solution)
                else:
                    print(f"No passing solution after {refined.iterations} round(s)")
                    print(refined.feedback)
                    return 1
        except WorkflowError as exc:
            print(f"Workflow failed: {exc}")
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
