"""Unit tests for the prompt chain runner."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from agent_workflows.engine.chain import ChainAborted, ChainResult, ChainStep, run_chain
from agent_workflows.engine.completion import LLMCompletionPort
from agent_workflows.engine.errors import StepFailedError, UnboundPlaceholderError
from agent_workflows.engine.events import WorkflowEvent


def _steps(count: int, marker: str | None = None) -> list[ChainStep]:
    return [ChainStep(f"step{i}({{input}})", failure_marker=marker) for i in range(count)]


def test_empty_chain_returns_initial_input(make_port: Callable[..., LLMCompletionPort]) -> None:
    port = make_port(lambda prompt: pytest.fail("no call expected"))

    result = run_chain(port, [], "requirements")

    assert result == ChainResult(output="requirements", outputs=())
    assert port.provider.prompts == []


def test_each_step_consumes_previous_output(make_port: Callable[..., LLMCompletionPort]) -> None:
    port = make_port(lambda prompt: f"<{prompt}>")

    result = run_chain(port, _steps(3), "x")

    assert isinstance(result, ChainResult)
    assert result.outputs == ("<step0(x)>", "<step1(<step0(x)>)>", "<step2(<step1(<step0(x)>)>)>")
    assert result.output == result.outputs[-1]


def test_failure_marker_aborts_before_later_steps(
    make_port: Callable[..., LLMCompletionPort],
) -> None:
    def responder(prompt: str) -> str:
        return "FAIL: not feasible" if prompt.startswith("step1") else "fine"

    port = make_port(responder)

    result = run_chain(port, _steps(4, marker="FAIL"), "x")

    assert isinstance(result, ChainAborted)
    assert result.index == 1
    assert result.output == "FAIL: not feasible"
    assert result.outputs == ("fine", "FAIL: not feasible")
    assert len(port.provider.prompts) == 2


def test_marker_only_checked_on_steps_that_configure_it(
    make_port: Callable[..., LLMCompletionPort],
) -> None:
    port = make_port(lambda prompt: "FAIL")
    steps = [ChainStep("a {input}"), ChainStep("b {input}", failure_marker="FAIL")]

    result = run_chain(port, steps, "x")

    assert isinstance(result, ChainAborted)
    assert result.index == 1


def test_completion_error_is_fatal_step_failure(
    make_port: Callable[..., LLMCompletionPort],
) -> None:
    boom = ConnectionError("provider down")

    def responder(prompt: str) -> str:
        if prompt.startswith("step1"):
            raise boom
        return "ok"

    port = make_port(responder)

    with pytest.raises(StepFailedError) as excinfo:
        run_chain(port, _steps(3), "x")

    assert excinfo.value.index == 1
    assert excinfo.value.cause is boom
    assert len(port.provider.prompts) == 2


def test_unbound_placeholder_in_step_template(make_port: Callable[..., LLMCompletionPort]) -> None:
    port = make_port(lambda prompt: "ok")

    with pytest.raises(UnboundPlaceholderError):
        run_chain(port, [ChainStep("{input} and {context}")], "x")


def test_chain_emits_progress_events(make_port: Callable[..., LLMCompletionPort]) -> None:
    events: list[WorkflowEvent] = []
    port = make_port(lambda prompt: "FAIL")

    run_chain(port, _steps(2, marker="FAIL"), "x", on_event=events.append)

    assert [e.type for e in events] == ["chain.step_completed", "chain.aborted"]
    assert events[1].payload["index"] == 0


def test_failing_event_handler_does_not_abort_chain(
    make_port: Callable[..., LLMCompletionPort],
) -> None:
    port = make_port(lambda prompt: prompt.upper())

    def handler(event: WorkflowEvent) -> None:
        raise RuntimeError("dashboard offline")

    result = run_chain(port, _steps(2), "x", on_event=handler)

    assert isinstance(result, ChainResult)
    assert len(result.outputs) == 2
