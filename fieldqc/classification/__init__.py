"""Field classification: rule table and classifier."""

from fieldqc.classification.classifier import FieldClassifier, classify_field
from fieldqc.classification.rules import (
    ConfigurationError,
    FieldMapping,
    RuleTable,
    get_rule_table,
    load_rule_table,
)

__all__ = [
    "ConfigurationError",
    "FieldClassifier",
    "FieldMapping",
    "RuleTable",
    "classify_field",
    "get_rule_table",
    "load_rule_table",
]
