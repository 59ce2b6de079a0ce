"""Structural comparison of version values."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fieldqc.models import NodeVersion, ReviewStatus
from fieldqc.values import ValueKind, kind_of, serialize

NO_CHANGE = "no change"


class ChangeKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class ValueChange:
    kind: ChangeKind
    path: tuple[str, ...]
    old: Any = None
    new: Any = None

    def describe(self, root: str = "value") -> str:
        location = ".".join((root,) + self.path)
        if self.kind == ChangeKind.ADDED:
            return f"added {location}: {_short(self.new)}"
        if self.kind == ChangeKind.REMOVED:
            return f"removed {location}: {_short(self.old)}"
        return f"modified {location}: {_short(self.old)} -> {_short(self.new)}"


@dataclass(slots=True)
class VersionDiff:
    older_id: str
    newer_id: str
    entries: list[ValueChange] = field(default_factory=list)
    older_text: str | None = None  # Only set when the values differ
    newer_text: str | None = None
    status_before: ReviewStatus | None = None
    status_after: ReviewStatus | None = None

    @property
    def changed(self) -> bool:
        return len(self.entries) > 0

    @property
    def status_changed(self) -> bool:
        return self.status_before != self.status_after

    def summary(self) -> str:
        if not self.changed:
            return NO_CHANGE
        return "; ".join(entry.describe() for entry in self.entries)


def compare_values(old: Any, new: Any, path: tuple[str, ...] = ()) -> list[ValueChange]:
    """Walk two values in parallel and list their differences."""
    old_kind, new_kind = kind_of(old), kind_of(new)

    if old_kind != new_kind:
        return [ValueChange(ChangeKind.MODIFIED, path, old, new)]

    if old_kind is ValueKind.OBJECT:
        changes: list[ValueChange] = []
        for name in sorted(set(old) | set(new), key=str):
            child = path + (str(name),)
            if name not in new:
                changes.append(ValueChange(ChangeKind.REMOVED, child, old=old[name]))
            elif name not in old:
                changes.append(ValueChange(ChangeKind.ADDED, child, new=new[name]))
            else:
                changes.extend(compare_values(old[name], new[name], child))
        return changes

    if old_kind is ValueKind.ARRAY:
        changes = []
        for index in range(max(len(old), len(new))):
            child = path + (str(index),)
            if index >= len(new):
                changes.append(ValueChange(ChangeKind.REMOVED, child, old=old[index]))
            elif index >= len(old):
                changes.append(ValueChange(ChangeKind.ADDED, child, new=new[index]))
            else:
                changes.extend(compare_values(old[index], new[index], child))
        return changes

    if old != new:
        return [ValueChange(ChangeKind.MODIFIED, path, old, new)]
    return []


def diff(older: NodeVersion, newer: NodeVersion) -> VersionDiff:
    """Compare two versions' values and review status."""
    result = VersionDiff(
        older_id=older.id,
        newer_id=newer.id,
        entries=compare_values(older.value, newer.value),
        status_before=older.quality_assessment.status,
        status_after=newer.quality_assessment.status,
    )
    if result.changed:
        result.older_text = serialize(older.value)
        result.newer_text = serialize(newer.value)
    return result


def describe_changes(key: str, old: Any, new: Any) -> list[str]:
    """Change descriptions for an edit, one per structural difference."""
    entries = compare_values(old, new)
    if not entries:
        return [NO_CHANGE]
    return [entry.describe(root=key) for entry in entries]


def change_type_hint(description: str) -> ChangeKind:
    """Guess a change kind from the leading word of a free-text description.

    Only a display convention: descriptions written outside this module
    need not follow it. Use VersionDiff.entries for anything that matters.
    """
    for kind in (ChangeKind.ADDED, ChangeKind.REMOVED, ChangeKind.MODIFIED):
        if description.startswith(kind.value):
            return kind
    return ChangeKind.UNKNOWN


def _short(value: Any, limit: int = 60) -> str:
    text = serialize(value).replace("\n", " ")
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."
