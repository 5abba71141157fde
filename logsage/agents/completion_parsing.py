"""
Untrusted completion output.

Every call site that expects structured output gets either ``Structured``
(the reply honoured its JSON contract) or ``Fallback`` (a deterministic
default built from the caller's own inputs). Neither variant raises.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class Structured(Generic[T]):
    value: T


@dataclass(frozen=True)
class Fallback(Generic[T]):
    value: T
    reason: str


CompletionOutcome = Union[Structured[T], Fallback[T]]


def parse_json_object(text: Optional[str]) -> Optional[dict]:
    """Parse a completion as a single JSON object.

    Accepts a bare object or one wrapped in a single markdown code fence.
    Returns None for anything else, including valid JSON that is not an object.
    """
    if not text or not text.strip():
        return None
    candidate = text.strip()
    fenced = _FENCE_RE.match(candidate)
    if fenced:
        candidate = fenced.group(1)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def optional_str(value) -> Optional[str]:
    """A non-blank string, or None."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def string_map(value) -> dict[str, str]:
    """Keep string-valued entries of a JSON object; scalars are stringified."""
    if not isinstance(value, dict):
        return {}
    result: dict[str, str] = {}
    for key, item in value.items():
        if isinstance(item, str):
            result[str(key)] = item
        elif isinstance(item, bool):
            result[str(key)] = "true" if item else "false"
        elif isinstance(item, (int, float)):
            result[str(key)] = str(item)
    return result


def string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
