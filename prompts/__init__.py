"""Prompt templates for the meetup planner's generative-text calls.

Templates live next to this module as Markdown files so they can be edited
without touching code. Each one can be replaced at runtime through an
environment variable, either with a file path or with the literal prompt text.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

__all__ = ["PROMPT_FILES", "PromptTemplate", "load_prompt_template", "render_prompt"]

_PROMPT_ROOT = Path(__file__).resolve().parent
_ENV_PREFIX = "MEETUP_PLANNER_PROMPT_"

PROMPT_FILES: Dict[str, str] = {
    "extract_venues": "extract_venues.md",
    "theme_itinerary": "theme_itinerary.md",
    "ai_suggestions": "ai_suggestions.md",
}


def _resolve_override(name: str) -> str | None:
    override_value = os.getenv(_ENV_PREFIX + name.upper())
    if not override_value:
        return None

    override_path = Path(override_value)
    if override_path.is_file():
        return override_path.read_text(encoding="utf-8")

    return override_value


@dataclass(frozen=True)
class PromptTemplate:
    """A ``str.format`` template; literal braces in the file are doubled."""

    name: str
    text: str

    def format(self, **kwargs: Any) -> str:
        try:
            return self.text.format(**kwargs)
        except KeyError as exc:
            raise ValueError(f"Prompt '{self.name}' is missing placeholder value {exc}") from exc


@lru_cache(maxsize=None)
def load_prompt_template(name: str, filename: str | None = None) -> PromptTemplate:
    """Load the template registered as ``name``.

    ``MEETUP_PLANNER_PROMPT_<NAME>`` takes precedence when set. Otherwise the
    file ``filename`` (or the registered file for ``name``) is read from this
    package.
    """

    override = _resolve_override(name)
    if override is not None:
        return PromptTemplate(name, override)

    filename = filename or PROMPT_FILES.get(name)
    if not filename:
        raise KeyError(f"Unknown prompt: {name}")
    path = _PROMPT_ROOT / filename
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return PromptTemplate(name, path.read_text(encoding="utf-8"))


def render_prompt(name: str, **kwargs: Any) -> str:
    """Render a registered prompt in one call."""

    return load_prompt_template(name).format(**kwargs)
