"""Shape validation for edits.

Some categories imply a value shape. An edit that does not fit the shape is
rejected before it reaches the ledger.
"""

from __future__ import annotations

from typing import Any

from fieldqc.analysis.checks import rect_problems
from fieldqc.values import ValueKind, kind_of

_EXPECTED_KINDS: dict[str, frozenset[ValueKind]] = {
    "action": frozenset({ValueKind.STRING}),
    "image": frozenset({ValueKind.STRING}),
    "screenshot": frozenset({ValueKind.STRING}),
    "url": frozenset({ValueKind.STRING}),
    "timestamp": frozenset({ValueKind.STRING, ValueKind.NUMBER}),
}


class EditValidationError(ValueError):
    """Edited value does not fit the field's declared shape."""

    def __init__(self, category: str, problems: list[str]):
        self.category = category
        self.problems = problems
        super().__init__(f"Invalid {category} value: {'; '.join(problems)}")


def shape_problems(category: str, value: Any) -> list[str]:
    """List shape violations for a category (empty if valid or shapeless)."""
    if category == "rect":
        return rect_problems(value)

    expected = _EXPECTED_KINDS.get(category)
    if expected is None:
        return []

    kind = kind_of(value)
    if kind not in expected:
        allowed = " or ".join(sorted(k.value for k in expected))
        return [f"{category} value must be a {allowed} (got {kind.value})"]
    return []


def validate_shape(category: str, value: Any) -> None:
    """Raise EditValidationError if value does not fit the category's shape."""
    problems = shape_problems(category, value)
    if problems:
        raise EditValidationError(category, problems)
