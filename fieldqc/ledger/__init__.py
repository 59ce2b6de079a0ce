"""Version ledger: edits, version selection and diffs."""

from fieldqc.ledger.diff import (
    ChangeKind,
    ValueChange,
    VersionDiff,
    change_type_hint,
    compare_values,
    diff,
)
from fieldqc.ledger.validation import EditValidationError, shape_problems, validate_shape
from fieldqc.ledger.versions import (
    commit_edit,
    find_version,
    new_context,
    pending_assessment,
    select_version,
)

__all__ = [
    "ChangeKind",
    "EditValidationError",
    "ValueChange",
    "VersionDiff",
    "change_type_hint",
    "commit_edit",
    "compare_values",
    "diff",
    "find_version",
    "new_context",
    "pending_assessment",
    "select_version",
    "shape_problems",
    "validate_shape",
]
