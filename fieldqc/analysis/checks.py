"""Quality checks for categorised field values.

Produces Issue models with a confidence ceiling + message. Unknown or
malformed data is reported as an issue, never raised.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from fieldqc.values import ValueKind, kind_of

RECT_COMPONENTS = ("top", "left", "width", "height")

RECT_CONFIDENCE = 0.3
IMAGE_CONFIDENCE = 0.4
ACTION_CONFIDENCE = 0.2

IMAGE_TYPES = frozenset({"image", "screenshot"})


class Issue(BaseModel):
    """Quality problem detected in a field value."""

    type: str  # "RectComponent", "ImageUrl", "UnknownAction"
    message: str
    confidence: float  # Upper bound on confidence while this issue stands


def rect_problems(value: Any) -> list[str]:
    """Describe everything wrong with a rectangle value (empty list if valid)."""
    kind = kind_of(value)
    if kind is not ValueKind.OBJECT:
        return [
            f"rectangle must be an object with {', '.join(RECT_COMPONENTS)} (got {kind.value})"
        ]

    problems: list[str] = []
    for name in RECT_COMPONENTS:
        if name not in value or value[name] is None:
            problems.append(f"rectangle {name} is missing")
            continue
        component = value[name]
        if kind_of(component) is not ValueKind.NUMBER:
            problems.append(f"rectangle {name} must be a number (got {kind_of(component).value})")
        elif not math.isfinite(component):
            problems.append(f"rectangle {name} must be finite (got {component})")
        elif component < 0:
            problems.append(f"rectangle {name} must be non-negative (got {component:g})")
    return problems


def compute_issues(
    category: str,
    value: Any,
    valid_actions: Sequence[str],
) -> list[Issue]:
    """Evaluate quality issues for a field of the given category.

    Args:
        category: Rule type the field resolved to
        value: Decoded field value
        valid_actions: Whitelist for action fields

    Returns:
        List of Issue models (empty list if no issues detected)
    """
    issues: list[Issue] = []
    kind = kind_of(value)

    if category == "rect":
        for problem in rect_problems(value):
            issues.append(Issue(type="RectComponent", message=problem, confidence=RECT_CONFIDENCE))

    elif category in IMAGE_TYPES and kind is ValueKind.STRING:
        if not value.startswith("http"):
            issues.append(
                Issue(
                    type="ImageUrl",
                    message=f"image path is not an HTTP URL: {value}",
                    confidence=IMAGE_CONFIDENCE,
                )
            )

    elif category == "action":
        if kind is not ValueKind.STRING:
            issues.append(
                Issue(
                    type="UnknownAction",
                    message=f"action must be a string (got {kind.value})",
                    confidence=ACTION_CONFIDENCE,
                )
            )
        elif value not in valid_actions:
            issues.append(
                Issue(
                    type="UnknownAction",
                    message=f"unknown action type: {value}",
                    confidence=ACTION_CONFIDENCE,
                )
            )

    return issues


def suggestions_for(category: str, value: Any) -> list[str]:
    """Generic advice for a category, independent of detected issues."""
    if category == "rect":
        return ["ensure all coordinate values are non-negative numbers"]
    if category in IMAGE_TYPES and kind_of(value) is ValueKind.STRING:
        return ["verify the image URL is reachable"]
    return []
