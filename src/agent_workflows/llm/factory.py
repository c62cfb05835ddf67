"""Factory for creating LLM providers."""

import logging

from agent_workflows.core.config import LLMConfig
from agent_workflows.llm.llama_provider import LLaMAProvider
from agent_workflows.llm.openai_provider import OpenAIProvider
from agent_workflows.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class LLMFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def validate(config: LLMConfig) -> None:
        """Check that ``config`` carries what its provider needs.

        Runs before any provider is constructed, so a misconfigured engine
        fails without loading a model or building an HTTP client.

        Raises:
            ValueError: If a required setting is missing.
        """
        if config.provider == "openai" and not config.openai_api_key:
            raise ValueError(
                "OpenAI API key is required (set WORKFLOWS_LLM_OPENAI_API_KEY)"
            )
        if config.provider == "llama" and not config.llama_model_path:
            raise ValueError(
                "LLaMA model path is required (set WORKFLOWS_LLM_LLAMA_MODEL_PATH)"
            )

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """Create an LLM provider based on configuration.

        Args:
            config: LLM configuration specifying the provider.

        Returns:
            Configured LLM provider instance.

        Raises:
            ValueError: If provider type is not supported or misconfigured.
        """
        LLMFactory.validate(config)

        if config.provider == "openai":
            endpoint = config.openai_base_url or "api.openai.com"
            logger.info(f"Creating OpenAI provider for {config.openai_model} at {endpoint}")
            return OpenAIProvider(config)
        elif config.provider == "llama":
            logger.info(f"Creating LLaMA provider from {config.llama_model_path}")
            return LLaMAProvider(config)
        else:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")
