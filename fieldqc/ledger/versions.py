"""Append-only version ledger for an inspected field.

Versions are kept newest-first: ``context.versions[0]`` is the head. Ids are
assigned in creation order as ``v1``, ``v2``, ... and never reused.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any, Optional

import structlog

from fieldqc.classification.rules import FieldMapping
from fieldqc.config import LedgerConfig, get_config
from fieldqc.ledger.diff import describe_changes
from fieldqc.ledger.validation import EditValidationError, validate_shape
from fieldqc.models import (
    NodeContext,
    NodeVersion,
    QualityAssessment,
    Reviewer,
    ReviewStatus,
)

logger = structlog.get_logger(__name__)

INITIAL_CHANGE = "initial version"


def pending_assessment(seed_confidence: float) -> QualityAssessment:
    """Assessment carried by a version nobody has judged yet."""
    return QualityAssessment(
        status=ReviewStatus.PENDING,
        confidence=seed_confidence,
        reviewer=Reviewer.HUMAN,
    )


def new_context(
    key: str,
    value: Any,
    mapping: FieldMapping,
    path: Sequence[str] = (),
    author: Optional[str] = None,
    config: Optional[LedgerConfig] = None,
) -> NodeContext:
    """Create a context for a freshly selected field, seeded with version v1."""
    config = config or get_config().ledger
    seed = NodeVersion(
        id="v1",
        value=copy.deepcopy(value),
        author=author or config.default_author,
        changes=[INITIAL_CHANGE],
        quality_assessment=pending_assessment(config.seed_confidence),
    )
    return NodeContext(
        key=key,
        value=copy.deepcopy(value),
        path=[str(part) for part in path],
        type=mapping.type,
        versions=[seed],
    )


def commit_edit(
    context: NodeContext,
    new_value: Any,
    author: Optional[str] = None,
    changes: Optional[list[str]] = None,
    config: Optional[LedgerConfig] = None,
) -> NodeContext:
    """Record an edit as a new head version.

    Args:
        context: Field being edited
        new_value: Replacement value
        author: Editor (defaults to the configured author)
        changes: Change descriptions; derived from a structural diff when omitted
        config: Ledger settings

    Returns:
        The same context, updated in place

    Raises:
        EditValidationError: If new_value does not fit the field's shape.
            The context is left untouched.
    """
    config = config or get_config().ledger

    try:
        validate_shape(context.type, new_value)
    except EditValidationError as e:
        logger.info(
            "edit_rejected",
            key=context.key,
            type=context.type,
            problems=e.problems,
        )
        raise

    if changes is None:
        changes = describe_changes(context.key, context.value, new_value)

    version = NodeVersion(
        id=f"v{len(context.versions) + 1}",
        value=copy.deepcopy(new_value),
        author=author or config.default_author,
        changes=list(changes),
        quality_assessment=pending_assessment(config.seed_confidence),
    )
    context.versions.insert(0, version)
    context.value = copy.deepcopy(new_value)

    logger.info("edit_committed", key=context.key, version=version.id, changes=len(version.changes))
    return context


def select_version(context: NodeContext, version: NodeVersion) -> NodeContext:
    """Show an older value without truncating or reordering the ledger."""
    context.value = copy.deepcopy(version.value)
    logger.debug("version_selected", key=context.key, version=version.id)
    return context


def find_version(context: NodeContext, version_id: str) -> NodeVersion:
    """Look up a version by id.

    Raises:
        KeyError: If the context has no such version
    """
    for version in context.versions:
        if version.id == version_id:
            return version
    raise KeyError(f"No version {version_id} for field '{context.key}'")
