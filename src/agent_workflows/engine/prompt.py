"""Prompt templates with ``{name}`` placeholders.

Only ``{identifier}`` is treated as a placeholder. Any other brace text, such
as a JSON example embedded in a prompt, is left as is. Substitution happens in
a single pass, so braces inside bound values are never expanded.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import UnboundPlaceholderError

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def placeholders(template: str) -> list[str]:
    """Names referenced by ``template``, in order of first use."""

    seen: dict[str, None] = {}
    for match in _PLACEHOLDER.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)


def render(template: str, bindings: Mapping[str, object]) -> str:
    """Substitute every placeholder in ``template`` from ``bindings``.

    Rendering is all-or-nothing: if any referenced name is unbound,
    :class:`UnboundPlaceholderError` lists all of them and nothing is returned.
    Bindings the template does not reference are ignored.
    """

    missing = [name for name in placeholders(template) if name not in bindings]
    if missing:
        raise UnboundPlaceholderError(missing)
    return _PLACEHOLDER.sub(lambda m: str(bindings[m.group(1)]), template)


@dataclass(frozen=True, slots=True)
class PromptTemplate:
    template: str

    @property
    def placeholders(self) -> list[str]:
        return placeholders(self.template)

    def render(self, bindings: Mapping[str, object] | None = None, /, **kwargs: object) -> str:
        merged: dict[str, object] = dict(bindings or {})
        merged.update(kwargs)
        return render(self.template, merged)

    def __str__(self) -> str:
        return self.template


def as_template(value: str | PromptTemplate) -> PromptTemplate:
    return value if isinstance(value, PromptTemplate) else PromptTemplate(value)
