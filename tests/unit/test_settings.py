"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_workflows.core.config import EngineConfig, LLMConfig, WorkflowsConfig


def test_llm_config_defaults(clean_env: Path) -> None:
    """Test LLM config default values."""
    config = LLMConfig(openai_api_key="test-key")

    assert config.provider == "openai"
    assert config.openai_base_url is None
    assert config.openai_temperature == 0.7
    assert config.request_timeout_seconds == 600.0
    assert config.llama_n_ctx == 4096


def test_engine_config_defaults(clean_env: Path) -> None:
    """Test runner config default values."""
    config = EngineConfig()

    assert config.max_iterations == 5
    assert config.max_workers == 8
    assert config.parallel_dispatch is True
    assert config.result_separator == "\n\n---\n\n"


def test_engine_config_rejects_zero_iterations(clean_env: Path) -> None:
    with pytest.raises(ValidationError):
        EngineConfig(max_iterations=0)


def test_config_loads_from_dotenv(clean_env: Path) -> None:
    (clean_env / ".env").write_text(
        "\n".join(
            [
                "WORKFLOWS_LLM_OPENAI_API_KEY=sk-test",
                "WORKFLOWS_LLM_OPENAI_BASE_URL=https://dashscope.aliyuncs.com/compatible-mode/v1",
                "WORKFLOWS_ENGINE_MAX_ITERATIONS=7",
                "WORKFLOWS_LOG_LEVEL=DEBUG",
                "",
            ]
        ),
        encoding="utf-8",
    )

    config = WorkflowsConfig()

    assert config.log_level == "DEBUG"
    assert config.llm.openai_api_key == "sk-test"
    assert config.llm.openai_base_url == "https://dashscope.aliyuncs.com/compatible-mode/v1"
    assert config.engine.max_iterations == 7


def test_workflows_config_composition(clean_env: Path) -> None:
    """Test workflows config with nested configs."""
    config = WorkflowsConfig(
        log_level="DEBUG",
        debug=True,
    )

    assert config.log_level == "DEBUG"
    assert config.debug is True
    assert isinstance(config.llm, LLMConfig)
    assert isinstance(config.engine, EngineConfig)
