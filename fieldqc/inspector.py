"""Inspector session: the field currently under review.

Holds one NodeContext at a time. Selecting another field cancels any
analysis still running for the previous one; every mutation goes through
the ledger, quality engine or annotation store and returns the context.

When an event loop is running, selecting a field, committing an edit or
viewing another version schedules automated analysis of the new value.
The task is kept in `pending_analysis`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any, Optional

import structlog

from fieldqc.analysis.analyzer import HeuristicAnalyzer
from fieldqc.annotations.store import add_annotation
from fieldqc.classification.classifier import FieldClassifier
from fieldqc.classification.rules import FieldMapping
from fieldqc.config import AppConfig, get_config
from fieldqc.ledger.diff import VersionDiff, diff
from fieldqc.ledger.versions import commit_edit, find_version, new_context, select_version
from fieldqc.models import AnnotationData, NodeContext, ReviewStatus
from fieldqc.quality.engine import AnalysisOutcome, QualityEngine

logger = structlog.get_logger(__name__)


class NoFieldSelectedError(RuntimeError):
    """An operation needs a selected field but none is selected."""

    pass


class FieldInspector:
    def __init__(
        self,
        classifier: Optional[FieldClassifier] = None,
        engine: Optional[QualityEngine] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.config = config or get_config()
        self.classifier = classifier or FieldClassifier()
        self.engine = engine or QualityEngine(
            HeuristicAnalyzer(self.classifier, self.config.analyzer),
            config=self.config.analyzer,
        )
        self._context: NodeContext | None = None
        self._mapping: FieldMapping | None = None
        self.pending_analysis: asyncio.Task[AnalysisOutcome] | None = None

    @property
    def current(self) -> NodeContext:
        if self._context is None:
            raise NoFieldSelectedError("No field selected")
        return self._context

    @property
    def mapping(self) -> FieldMapping:
        if self._mapping is None:
            raise NoFieldSelectedError("No field selected")
        return self._mapping

    def select(self, key: str, value: Any, path: Sequence[str] = ()) -> NodeContext:
        """Start inspecting a field, discarding the previous context."""
        self.close()
        self._mapping = self.classifier.resolve(key, value)
        self._context = new_context(
            key,
            value,
            self._mapping,
            path=path,
            config=self.config.ledger,
        )
        logger.info(
            "field_selected",
            key=key,
            path=list(self._context.path),
            type=self._mapping.type,
            component=self._mapping.component,
        )
        self._schedule_analysis()
        return self._context

    def close(self) -> None:
        """Cancel any analysis still running for the current field."""
        self._cancel_pending()
        if self._context is not None:
            self.engine.cancel(self._context)

    async def analyze(self) -> AnalysisOutcome:
        """Analyse the current value now, replacing any scheduled run."""
        self._cancel_pending()
        return await self.engine.analyze(self.current)

    def commit_edit(self, new_value: Any, author: Optional[str] = None) -> NodeContext:
        context = commit_edit(self.current, new_value, author=author, config=self.config.ledger)
        self._schedule_analysis()
        return context

    def review(self, decision: ReviewStatus | str, reason: str | None = None) -> NodeContext:
        return self.engine.review(self.current, decision, reason)

    def annotate(self, annotation: AnnotationData) -> NodeContext:
        return add_annotation(self.current, annotation)

    def select_version(self, version_id: str) -> NodeContext:
        context = select_version(self.current, find_version(self.current, version_id))
        self._schedule_analysis()
        return context

    def diff(self, older_id: str, newer_id: str) -> VersionDiff:
        context = self.current
        return diff(find_version(context, older_id), find_version(context, newer_id))

    def _schedule_analysis(self) -> asyncio.Task[AnalysisOutcome] | None:
        # Earlier scheduled runs start first, so the engine supersedes them
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.pending_analysis = None
            return None
        self.pending_analysis = loop.create_task(self.engine.analyze(self.current))
        return self.pending_analysis

    def _cancel_pending(self) -> None:
        if self.pending_analysis is not None and not self.pending_analysis.done():
            self.pending_analysis.cancel()
        self.pending_analysis = None
