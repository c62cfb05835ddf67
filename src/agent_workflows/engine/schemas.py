"""Structured output shapes agreed between call sites and the model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Task(BaseModel):
    """A subtask produced by decomposition.

    ``type`` names the specialist that should handle it.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    description: str


class Decomposition(BaseModel):
    model_config = ConfigDict(frozen=True)

    analysis: str
    tasks: list[Task]


class Generation(BaseModel):
    model_config = ConfigDict(frozen=True)

    thoughts: str = ""
    response: str


class Verdict(str, Enum):
    PASS = "PASS"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"
    FAIL = "FAIL"


class Evaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    evaluation: Verdict
    feedback: str = ""

    @field_validator("evaluation", mode="before")
    @classmethod
    def _normalise_verdict(cls, value: object) -> object:
        # "needs improvement", " pass " and friends
        if isinstance(value, str):
            return value.strip().upper().replace(" ", "_").replace("-", "_")
        return value
