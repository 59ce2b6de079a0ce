"""YAML-driven field classification rule table.

Each rule maps a field to a presentation category. Rules are resolved in
priority order (highest first); equal priorities keep their table order.
The table must end in a single catch-all `default` rule so that every field
resolves to some category.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

import yaml

from fieldqc.config import get_config
from fieldqc.values import ValueKind, kind_of

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "default"


class ConfigurationError(Exception):
    """Rule table file is invalid or missing."""

    pass


@dataclass(frozen=True)
class FieldMapping:
    """A single classification rule.

    Attributes:
        type: Category name (e.g. "rect", "action")
        pattern: Literal key (matched case-insensitively) or compiled regex
        component: Presentation tag consumed by viewers
        priority: Higher wins; ties fall back to table order
        metadata: Optional read-only extras for the category
    """

    type: str
    pattern: str | re.Pattern[str]
    component: str
    priority: int
    metadata: Optional[Mapping[str, Any]] = field(default=None, hash=False)

    def matches(self, key: str, value: Any) -> bool:
        """Check whether this rule claims the field.

        Literal patterns only look at the key. Regex patterns are searched in
        the key and, for string values, in the value.
        """
        if isinstance(self.pattern, str):
            return key.lower() == self.pattern.lower()

        if self.pattern.search(key):
            return True
        return kind_of(value) is ValueKind.STRING and bool(self.pattern.search(value))

    @property
    def is_catch_all(self) -> bool:
        if isinstance(self.pattern, str):
            return False
        return self.pattern.fullmatch("") is not None


class RuleTable:
    """Immutable, ordered set of classification rules."""

    def __init__(self, rules: Iterable[FieldMapping]):
        """Build and validate a rule table.

        Args:
            rules: Rules in table order (position breaks priority ties)

        Raises:
            ConfigurationError: If the table has no single lowest-priority catch-all default
        """
        self._rules: tuple[FieldMapping, ...] = tuple(rules)
        if not self._rules:
            raise ConfigurationError("Rule table is empty")

        defaults = [rule for rule in self._rules if rule.type == DEFAULT_TYPE]
        if len(defaults) != 1:
            raise ConfigurationError(
                f"Rule table needs exactly one '{DEFAULT_TYPE}' rule, found {len(defaults)}"
            )
        default = defaults[0]
        if not default.is_catch_all:
            raise ConfigurationError("The default rule pattern must match any key")
        if any(rule.priority <= default.priority for rule in self._rules if rule is not default):
            raise ConfigurationError("The default rule must have the lowest priority")

        self._default = default
        # sorted() is stable, so equal priorities keep table order
        self._ordered = tuple(sorted(self._rules, key=lambda rule: rule.priority, reverse=True))

    @classmethod
    def from_yaml(cls, path: Path) -> RuleTable:
        """Load a rule table from YAML.

        Raises:
            ConfigurationError: If the file is missing, not YAML, or holds a bad rule
        """
        if not path.exists():
            raise ConfigurationError(f"Rule table not found: {path}")

        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        entries = data.get("rules") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ConfigurationError(f"Expected a 'rules' list in {path}")

        rules = [_parse_rule(idx, entry) for idx, entry in enumerate(entries)]
        logger.debug(f"Loaded {len(rules)} field rules from {path}")
        return cls(rules)

    @property
    def default(self) -> FieldMapping:
        return self._default

    def ordered(self) -> tuple[FieldMapping, ...]:
        """Rules in resolution order."""
        return self._ordered

    def by_type(self, type_name: str) -> FieldMapping | None:
        for rule in self._rules:
            if rule.type == type_name:
                return rule
        return None

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def _parse_rule(idx: int, entry: Any) -> FieldMapping:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Rule at index {idx} is not a mapping")

    missing = [name for name in ("type", "component", "priority") if name not in entry]
    if missing:
        raise ConfigurationError(f"Rule at index {idx} is missing {', '.join(missing)}")
    if ("pattern" in entry) == ("literal" in entry):
        raise ConfigurationError(f"Rule at index {idx} needs exactly one of 'pattern' or 'literal'")

    pattern: str | re.Pattern[str]
    if "literal" in entry:
        pattern = str(entry["literal"])
    else:
        flags = re.IGNORECASE if entry.get("ignore_case", False) else 0
        try:
            pattern = re.compile(str(entry["pattern"]), flags)
        except re.error as e:
            raise ConfigurationError(f"Rule at index {idx} has an invalid pattern: {e}") from e

    try:
        priority = int(entry["priority"])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Rule at index {idx} has a non-integer priority") from e

    metadata = entry.get("metadata")
    return FieldMapping(
        type=str(entry["type"]),
        pattern=pattern,
        component=str(entry["component"]),
        priority=priority,
        metadata=MappingProxyType(dict(metadata)) if metadata else None,
    )


def load_rule_table(path: Optional[Path] = None) -> RuleTable:
    """Load the configured rule table (packaged table unless FIELDQC_RULES_PATH is set)."""
    if path is None:
        path = get_config().effective_rules_path
    return RuleTable.from_yaml(path)


# Singleton instance
_rule_table: Optional[RuleTable] = None


def get_rule_table() -> RuleTable:
    """Get or create the process-wide default rule table.

    Raises:
        ConfigurationError: If the configured rule table is invalid
    """
    global _rule_table
    if _rule_table is None:
        _rule_table = load_rule_table()
    return _rule_table


def reset_rule_table() -> None:
    """Drop the cached rule table so the next get_rule_table() reloads it."""
    global _rule_table
    _rule_table = None
