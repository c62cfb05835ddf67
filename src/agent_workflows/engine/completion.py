"""The completion port: the engine's only view of a language model.

Runners depend on the :class:`CompletionPort` protocol. The default
implementation, :class:`LLMCompletionPort`, adapts any
:class:`~agent_workflows.llm.provider.LLMProvider` and adds structured output:
it appends JSON format instructions derived from a pydantic model to the
prompt and decodes the reply back into that model.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from agent_workflows.llm.provider import LLMProvider

from .cancellation import CancellationToken
from .errors import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCE = re.compile(r"```(?:json)?\s*(.*?)\s*```", flags=re.IGNORECASE | re.DOTALL)


class CompletionPort(Protocol):
    """Submit a prompt, get model output back.

    Implementations must tolerate concurrent calls from fan-out workers.
    """

    def complete(self, prompt: str, *, cancel: CancellationToken | None = None) -> str: ...

    def complete_structured(
        self, prompt: str, schema: type[T], *, cancel: CancellationToken | None = None
    ) -> T: ...


@dataclass(frozen=True, slots=True)
class DecodeResult(Generic[T]):
    """Outcome of decoding model text into ``schema``.

    Exactly one of ``value`` (when ``ok``) or ``error`` is meaningful.
    """

    ok: bool
    value: T | None = None
    error: str = ""

    def unwrap(self, *, raw: str, schema: type[BaseModel]) -> T:
        if not self.ok or self.value is None:
            raise DecodeError(self.error, raw=raw, schema=schema.__name__)
        return self.value


def format_instructions(schema: type[BaseModel]) -> str:
    """Instructions appended to a prompt that expects ``schema`` back."""

    json_schema = json.dumps(schema.model_json_schema(), indent=2, ensure_ascii=False)
    return (
        "Your response should be in JSON format.\n"
        "Do not include any explanations, only provide a RFC8259 compliant JSON response "
        "following this format without deviation.\n"
        "Do not include markdown code blocks in your response.\n"
        "Here is the JSON Schema instance your output must adhere to:\n"
        f"```{json_schema}```"
    )


def _parse_json(text: str) -> Any:
    candidates: list[str] = []
    stripped = text.strip()
    if stripped:
        candidates.append(stripped)

    # Models wrap JSON in markdown fences despite being told not to.
    fence_match = _FENCE.search(text)
    if fence_match and fence_match.group(1).strip():
        candidates.insert(0, fence_match.group(1).strip())

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            pass

    # Fall back to the first JSON object embedded in surrounding prose.
    start = stripped.find("{")
    if start != -1:
        try:
            parsed, _ = json.JSONDecoder().raw_decode(stripped[start:])
            return parsed
        except json.JSONDecodeError:
            pass

    raise json.JSONDecodeError("No valid JSON found in response", text, 0)


def decode_structured(text: str, schema: type[T]) -> DecodeResult[T]:
    """Decode model output into ``schema`` without raising."""

    try:
        payload = _parse_json(text)
    except json.JSONDecodeError as e:
        return DecodeResult(ok=False, error=str(e))

    try:
        return DecodeResult(ok=True, value=schema.model_validate(payload))
    except ValidationError as e:
        return DecodeResult(ok=False, error=str(e))


class LLMCompletionPort:
    """Completion port backed by an :class:`LLMProvider`.

    The port itself holds no mutable state; thread safety is the provider's.
    Provider errors propagate unchanged and are never retried here.
    """

    def __init__(self, provider: LLMProvider, **generate_kwargs: Any) -> None:
        self.provider = provider
        self._generate_kwargs = generate_kwargs

    def complete(self, prompt: str, *, cancel: CancellationToken | None = None) -> str:
        if cancel is not None:
            cancel.raise_if_cancelled()

        # Tokenizing can be costly (and serialised for local models).
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Submitting prompt",
                extra={
                    "prompt_chars": len(prompt),
                    "prompt_tokens": self.provider.count_tokens(prompt),
                },
            )
        text = self.provider.generate(prompt, **self._generate_kwargs)

        # A result that arrives after cancellation is discarded.
        if cancel is not None:
            cancel.raise_if_cancelled()
        return text

    def complete_structured(
        self, prompt: str, schema: type[T], *, cancel: CancellationToken | None = None
    ) -> T:
        full_prompt = f"{prompt}\n\n{format_instructions(schema)}"
        text = self.complete(full_prompt, cancel=cancel)
        result = decode_structured(text, schema)
        if not result.ok:
            logger.warning(
                f"Structured output did not match {schema.__name__}",
                extra={"schema": schema.__name__, "error": result.error},
            )
        return result.unwrap(raw=text, schema=schema)
