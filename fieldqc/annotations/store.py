"""Append-only annotations attached to an inspected field."""

from __future__ import annotations

import structlog

from fieldqc.models import AnnotationData, AnnotationType, NodeContext

logger = structlog.get_logger(__name__)


def add_annotation(context: NodeContext, annotation: AnnotationData) -> NodeContext:
    """Append an annotation. Existing annotations are never touched."""
    context.annotations.append(annotation)
    logger.debug(
        "annotation_added",
        key=context.key,
        type=annotation.type.value,
        count=len(context.annotations),
    )
    return context


def annotations_of_type(
    context: NodeContext, annotation_type: AnnotationType
) -> list[AnnotationData]:
    return [a for a in context.annotations if a.type == annotation_type]
