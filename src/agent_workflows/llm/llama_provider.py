"""Local LLaMA LLM provider implementation."""

import logging
import threading
from typing import Any

from agent_workflows.core.config import LLMConfig
from agent_workflows.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class LLaMAProvider(LLMProvider):
    """Local LLaMA model provider implementation.

    Requires llama-cpp-python to be installed:
        pip install "agent-workflows[llama]"

    The underlying model is not thread-safe, so calls coming from fan-out
    workers are serialised behind a lock.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the LLaMA provider.

        Args:
            config: LLM configuration.

        Raises:
            ValueError: If model path is not provided.
            ImportError: If llama-cpp-python is not installed.
        """
        if not config.llama_model_path:
            raise ValueError("LLaMA model path is required")

        try:
            from llama_cpp import Llama
        except ImportError as e:
            raise ImportError(
                "llama-cpp-python is required for LLaMA provider. "
                "Install it with: pip install llama-cpp-python"
            ) from e

        self.config = config
        self._lock = threading.Lock()

        logger.info(f"Loading LLaMA model from: {config.llama_model_path}")

        self.llm = Llama(
            model_path=str(config.llama_model_path),
            n_ctx=config.llama_n_ctx,
            n_threads=config.llama_n_threads,
            verbose=False,
        )

        logger.info("LLaMA model loaded successfully")

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Generate a chat completion for a single user prompt.

        Args:
            prompt: The input prompt.
            max_tokens: Maximum tokens to generate.
            temperature: Sampling temperature.
            **kwargs: Additional llama-cpp-specific parameters.

        Returns:
            Generated text completion.
        """
        logger.debug(f"Generating completion for prompt: {prompt[:100]}...")

        with self._lock:
            result = self.llm.create_chat_completion(
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens or 512,
                temperature=temperature if temperature is not None else 0.7,
                **kwargs,
            )

        content = result["choices"][0]["message"]["content"] or ""
        logger.debug(f"Generated {len(content)} characters")

        return content

    def count_tokens(self, text: str) -> int:
        """Count tokens using the LLaMA tokenizer."""
        with self._lock:
            tokens = self.llm.tokenize(text.encode("utf-8"))
        return len(tokens)
