"""Tagging of decoded JSON field values.

Field values arrive as whatever the record decoder produced. Everything
downstream (classification, shape validation, analysis, diffing) switches on
the ValueKind tag computed here instead of probing the value ad hoc.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Tag of a structured field value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    """Return the tag for a decoded JSON value.

    Booleans are tested before numbers since bool is an int subclass.
    Anything that is not a JSON-like value raises TypeError.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if isinstance(value, Sequence):
        return ValueKind.ARRAY
    raise TypeError(f"Unsupported field value type: {type(value).__name__}")


def serialize(value: Any) -> str:
    """Canonical, human-readable serialization used for display and comparison."""
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, default=str)


def fingerprint(key: str, value: Any) -> str:
    """Compact identity of a (key, value) pair."""
    return json.dumps([key, value], sort_keys=True, separators=(",", ":"), default=str)
