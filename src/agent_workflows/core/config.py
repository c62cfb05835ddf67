"""Core configuration for the workflow engine."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_workflows.logging import configure_logging


class LLMConfig(BaseSettings):
    """Configuration for LLM providers."""

    provider: Literal["openai", "llama"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    # OpenAI (and OpenAI-compatible) settings
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Base URL of an OpenAI-compatible endpoint (None = api.openai.com)",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model to use",
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    request_timeout_seconds: float = Field(
        default=600.0,
        gt=0,
        description="Read/connect timeout for a single completion request",
    )

    # LLaMA settings
    llama_model_path: Path | None = Field(
        default=None,
        description="Path to LLaMA model file",
    )
    llama_n_ctx: int = Field(
        default=4096,
        gt=0,
        description="Context window size for LLaMA",
    )
    llama_n_threads: int | None = Field(
        default=None,
        description="Number of threads for LLaMA (None = auto)",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOWS_LLM_",
        env_file=".env",
        extra="ignore",
    )


class EngineConfig(BaseSettings):
    """Configuration for the workflow runners."""

    max_iterations: int = Field(
        default=5,
        ge=1,
        description="Upper bound on generate/evaluate rounds in the refine loop",
    )
    max_workers: int = Field(
        default=8,
        ge=1,
        description="Size of the shared worker pool used for fan-out and dispatch",
    )
    parallel_dispatch: bool = Field(
        default=True,
        description="Run orchestrator-worker subtasks concurrently",
    )
    result_separator: str = Field(
        default="\n\n---\n\n",
        description="Separator placed between fan-out results before aggregation",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOWS_ENGINE_",
        env_file=".env",
        extra="ignore",
    )


class WorkflowsConfig(BaseSettings):
    """Main configuration for the workflow engine."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit structured JSON log lines instead of plain text",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    engine: EngineConfig = Field(
        default_factory=EngineConfig,
        description="Runner configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOWS_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        if self.json_logs:
            configure_logging(self.log_level)
        else:
            level = getattr(logging, self.log_level.upper(), logging.INFO)
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        if self.debug:
            logging.getLogger("agent_workflows").setLevel(logging.DEBUG)
