"""Test configuration and fixtures."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from agent_workflows.core.config import EngineConfig, LLMConfig, WorkflowsConfig
from agent_workflows.engine.completion import LLMCompletionPort
from agent_workflows.llm.provider import LLMProvider

Responder = Callable[[str], str]


class ScriptedProvider(LLMProvider):
    """Deterministic provider: every prompt is answered by ``responder``.

    Prompts are recorded in call order; the responder may raise to simulate
    a failing completion.
    """

    def __init__(self, responder: Responder) -> None:
        self.responder = responder
        self.prompts: list[str] = []
        self._lock = threading.Lock()

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        with self._lock:
            self.prompts.append(prompt)
        return self.responder(prompt)

    def count_tokens(self, text: str) -> int:
        return len(text.split())


@pytest.fixture
def make_port() -> Callable[[Responder], LLMCompletionPort]:
    """Build a completion port over a scripted provider.

    The provider, with its recorded prompts, is reachable as ``port.provider``.
    """

    def _make(responder: Responder) -> LLMCompletionPort:
        return LLMCompletionPort(ScriptedProvider(responder))

    return _make


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no WORKFLOWS_* variables set."""
    for key in list(os.environ):
        if key.startswith("WORKFLOWS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def llm_config(clean_env: Path) -> LLMConfig:
    """Provide a test LLM configuration."""
    return LLMConfig(
        provider="openai",
        openai_api_key="test-key",
        openai_model="gpt-4o-mini",
    )


@pytest.fixture
def engine_config(clean_env: Path) -> EngineConfig:
    """Provide a test runner configuration."""
    return EngineConfig(max_iterations=3, max_workers=4)


@pytest.fixture
def workflows_config(llm_config: LLMConfig, engine_config: EngineConfig) -> WorkflowsConfig:
    """Provide a test workflows configuration."""
    return WorkflowsConfig(
        log_level="DEBUG",
        debug=True,
        llm=llm_config,
        engine=engine_config,
    )
