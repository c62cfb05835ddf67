"""Unit tests for orchestrator-workers decomposition and dispatch."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest

from agent_workflows.engine.completion import LLMCompletionPort
from agent_workflows.engine.errors import DecodeError, DecompositionFailedError
from agent_workflows.engine.events import WorkflowEvent
from agent_workflows.engine.orchestrator_workers import run_decompose_dispatch
from agent_workflows.engine.schemas import Task

ORCHESTRATOR = "DECOMPOSE {task}"
WORKER = "WORK [{task_type}] {task_description} for {original_task}"

TASKS = [
    {"type": "backend", "description": "REST API"},
    {"type": "frontend", "description": "responsive UI"},
    {"type": "database", "description": "schema and indexes"},
]


def _responder(
    tasks: list[dict[str, str]], fail_type: str | None = None
) -> Callable[[str], str]:
    def responder(prompt: str) -> str:
        if prompt.startswith("DECOMPOSE"):
            return json.dumps({"analysis": "three specialist areas", "tasks": tasks})
        task_type = prompt.split("[", 1)[1].split("]", 1)[0]
        if task_type == fail_type:
            raise RuntimeError(f"{task_type} worker crashed")
        return f"done: {task_type}"

    return responder


def _worker_prompts(port: LLMCompletionPort) -> list[str]:
    return [p for p in port.provider.prompts if p.startswith("WORK")]


@pytest.mark.parametrize("parallel", [True, False])
def test_one_outcome_per_task_in_decomposition_order(
    make_port: Callable[..., LLMCompletionPort], parallel: bool
) -> None:
    port = make_port(_responder(TASKS))

    result = run_decompose_dispatch(port, "build a shop", ORCHESTRATOR, WORKER, parallel=parallel)

    assert result.analysis == "three specialist areas"
    assert [o.task for o in result.outcomes] == [Task(**t) for t in TASKS]
    assert [o.output for o in result.outcomes] == ["done: backend", "done: frontend", "done: database"]
    assert all(o.ok for o in result.outcomes)


def test_worker_prompt_binds_original_task_and_subtask(
    make_port: Callable[..., LLMCompletionPort],
) -> None:
    port = make_port(_responder(TASKS[:1]))

    run_decompose_dispatch(port, "build a shop", ORCHESTRATOR, WORKER)

    assert _worker_prompts(port) == ["WORK [backend] REST API for build a shop"]


def test_empty_decomposition_dispatches_nothing(
    make_port: Callable[..., LLMCompletionPort],
) -> None:
    port = make_port(_responder([]))

    result = run_decompose_dispatch(port, "trivial", ORCHESTRATOR, WORKER)

    assert result.outcomes == ()
    assert _worker_prompts(port) == []


def test_subtask_failure_is_local(make_port: Callable[..., LLMCompletionPort]) -> None:
    port = make_port(_responder(TASKS, fail_type="frontend"))

    result = run_decompose_dispatch(port, "build a shop", ORCHESTRATOR, WORKER)

    assert len(result.outcomes) == 3
    backend, frontend, database = result.outcomes
    assert backend.output == "done: backend"
    assert database.output == "done: database"
    assert not frontend.ok
    assert frontend.output is None
    assert isinstance(frontend.error, RuntimeError)
    assert result.failed == (frontend,)


def test_malformed_decomposition_is_fatal(make_port: Callable[..., LLMCompletionPort]) -> None:
    port = make_port(lambda prompt: '{"analysis": "a", "tasks": 3}')

    with pytest.raises(DecompositionFailedError) as excinfo:
        run_decompose_dispatch(port, "build a shop", ORCHESTRATOR, WORKER)

    assert isinstance(excinfo.value.cause, DecodeError)
    assert _worker_prompts(port) == []


def test_decomposition_call_failure_is_fatal(make_port: Callable[..., LLMCompletionPort]) -> None:
    def responder(prompt: str) -> str:
        raise ConnectionError("offline")

    port = make_port(responder)

    with pytest.raises(DecompositionFailedError) as excinfo:
        run_decompose_dispatch(port, "build a shop", ORCHESTRATOR, WORKER)

    assert isinstance(excinfo.value.cause, ConnectionError)


def test_dispatch_emits_events(make_port: Callable[..., LLMCompletionPort]) -> None:
    events: list[WorkflowEvent] = []
    port = make_port(_responder(TASKS[:2], fail_type="frontend"))

    run_decompose_dispatch(port, "x", ORCHESTRATOR, WORKER, on_event=events.append)

    assert [e.type for e in events] == [
        "orchestrator.decomposed",
        "orchestrator.subtask_completed",
        "orchestrator.subtask_completed",
    ]
    assert [e.payload["ok"] for e in events[1:]] == [True, False]
