# agents/llm_json.py
"""Lenient JSON recovery for LLM responses."""
from __future__ import annotations

import json
import re
from typing import Any, Iterable, List, Optional

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", flags=re.DOTALL)
_CLOSERS = {"[": "]", "{": "}"}


def _balanced_span(text: str, start: int) -> Optional[str]:
    """Return the JSON value that opens at ``start``, ignoring brackets in strings."""
    stack: List[str] = []
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        ch = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("]", "}"):
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return text[start : pos + 1]
    return None


def _candidates(text: str) -> Iterable[str]:
    fenced = _FENCE_RE.findall(text)
    for block in fenced:
        yield block.strip()
    yield text.strip()


def parse_llm_json(text: str) -> Any:
    """Return the first JSON array or object found in ``text``, or None."""
    if not text:
        return None

    for candidate in _candidates(text):
        if not candidate:
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            pass
        for match in re.finditer(r"[\[{]", candidate):
            span = _balanced_span(candidate, match.start())
            if span is None:
                continue
            try:
                return json.loads(span)
            except json.JSONDecodeError:
                continue
    return None


def extract_list(payload: Any, *keys: str) -> Optional[List[Any]]:
    """Accept a bare list or an object that wraps one under any of ``keys``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return None
