"""Field classifier: resolves a (key, value) pair to exactly one rule."""

from __future__ import annotations

from typing import Any, Optional

import structlog

from fieldqc.classification.rules import FieldMapping, RuleTable, get_rule_table

logger = structlog.get_logger(__name__)


class FieldClassifier:
    """Resolve fields against an injected rule table.

    Resolution is pure: the same key and value against the same table always
    give the same mapping. Unmatched fields fall back to the default rule.
    """

    def __init__(self, rule_table: Optional[RuleTable] = None):
        self.rule_table = rule_table if rule_table is not None else get_rule_table()

    def resolve(self, key: str, value: Any) -> FieldMapping:
        for mapping in self.rule_table.ordered():
            if mapping.matches(key, value):
                logger.debug("field_classified", key=key, type=mapping.type)
                return mapping

        return self.rule_table.default

    def component_for(self, key: str, value: Any) -> str:
        """Presentation tag for a field."""
        return self.resolve(key, value).component


def classify_field(key: str, value: Any) -> FieldMapping:
    """Classify a field with the default rule table (convenience function)."""
    return FieldClassifier().resolve(key, value)
