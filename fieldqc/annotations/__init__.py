"""Annotation store."""

from fieldqc.annotations.store import add_annotation, annotations_of_type

__all__ = ["add_annotation", "annotations_of_type"]
