"""Task record loading and field enumeration.

A task record is a decoded JSON tree. Every node in the tree (leaves and
containers) is a field identified by its key and its path from the root.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fieldqc.values import ValueKind, kind_of


class RecordLoadError(Exception):
    """Task record file is missing or not valid JSON."""

    pass


@dataclass(frozen=True, slots=True)
class FieldRef:
    key: str
    value: Any
    path: tuple[str, ...]  # Includes key as the last element

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.value)


def load_record(path: Path) -> Any:
    """Read a task record from a JSON file.

    Raises:
        RecordLoadError: If the file is missing or cannot be decoded
    """
    if not path.exists():
        raise RecordLoadError(f"Record not found: {path}")
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RecordLoadError(f"Invalid JSON in {path}: {e}") from e


def iter_fields(record: Any, path: tuple[str, ...] = ()) -> Iterator[FieldRef]:
    """Yield every field under record depth-first, parents before children."""
    kind = kind_of(record)
    if kind is ValueKind.OBJECT:
        children = ((str(name), child) for name, child in record.items())
    elif kind is ValueKind.ARRAY:
        children = ((str(index), child) for index, child in enumerate(record))
    else:
        return

    for key, child in children:
        child_path = path + (key,)
        yield FieldRef(key=key, value=child, path=child_path)
        yield from iter_fields(child, child_path)


def find_field(record: Any, dotted_path: str) -> FieldRef:
    """Resolve a dotted path such as ``steps.0.rect``.

    Raises:
        KeyError: If any segment does not exist
    """
    parts = tuple(part for part in dotted_path.split(".") if part)
    if not parts:
        raise KeyError("Empty field path")

    node = record
    for depth, part in enumerate(parts):
        kind = kind_of(node)
        if kind is ValueKind.OBJECT and part in node:
            node = node[part]
        elif kind is ValueKind.ARRAY and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            raise KeyError(f"No field '{'.'.join(parts[: depth + 1])}'")
    return FieldRef(key=parts[-1], value=node, path=parts)
