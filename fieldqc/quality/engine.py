"""Quality engine: automated and human judgments on a field's head version.

Automated analysis runs as an asyncio task per context. Starting a new
analysis for a context cancels the previous one, and a result is only applied
if it is still the registered task for that context and the context still
holds the (key, value) pair the analysis was started for.
"""

from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

import structlog

from fieldqc.analysis.analyzer import Analyzer, AnalyzerError, HeuristicAnalyzer, run_analyzer
from fieldqc.config import AnalyzerConfig, get_config
from fieldqc.models import (
    AnalysisRecord,
    AnalysisResult,
    NodeContext,
    QualityAssessment,
    Reviewer,
    ReviewStatus,
)
from fieldqc.values import fingerprint

logger = structlog.get_logger(__name__)

HUMAN_DECISIONS = (ReviewStatus.APPROVED, ReviewStatus.REJECTED)


class AnalysisStatus(str, Enum):
    """What happened to one analysis run."""

    APPLIED = "applied"
    STALE = "stale"  # Finished, but the context moved on
    CANCELLED = "cancelled"  # Superseded or field switched before finishing
    FAILED = "failed"  # Analyzer error or timeout; assessment unchanged


@dataclass(slots=True)
class AnalysisOutcome:
    status: AnalysisStatus
    assessment: QualityAssessment | None = None
    result: AnalysisResult | None = None
    error: AnalyzerError | None = None

    @property
    def applied(self) -> bool:
        return self.status == AnalysisStatus.APPLIED


@dataclass(slots=True)
class _InFlight:
    task: asyncio.Task
    fingerprint: str


class QualityEngine:
    """Turns analyzer output and human decisions into head-version assessments."""

    def __init__(
        self,
        analyzer: Optional[Analyzer] = None,
        config: Optional[AnalyzerConfig] = None,
    ) -> None:
        self.config = config or get_config().analyzer
        self.analyzer = analyzer or HeuristicAnalyzer(config=self.config)
        self._in_flight: dict[UUID, _InFlight] = {}

    # -- assessments -------------------------------------------------------

    def assessment_from_analysis(self, result: AnalysisResult) -> QualityAssessment:
        return QualityAssessment(
            status=ReviewStatus.NEEDS_REVIEW if result.has_issues else ReviewStatus.APPROVED,
            confidence=result.confidence,
            reviewer=Reviewer.AI,
            reason="; ".join(result.quality_issues) if result.has_issues else None,
            suggestions=list(result.suggestions),
        )

    def human_assessment(
        self,
        context: NodeContext,
        decision: ReviewStatus | str,
        reason: str | None = None,
    ) -> QualityAssessment:
        """Build a human judgment for the context's current value.

        The reviewer is recorded as hybrid when automated output exists for
        the same (key, value) pair.

        Raises:
            ValueError: If decision is not approved or rejected
        """
        status = ReviewStatus(decision)
        if status not in HUMAN_DECISIONS:
            raise ValueError(f"Human decision must be approved or rejected, got '{status.value}'")

        last = context.last_analysis
        same_value = last is not None and last.fingerprint == fingerprint(context.key, context.value)

        return QualityAssessment(
            status=status,
            confidence=1.0,
            reviewer=Reviewer.HYBRID if same_value else Reviewer.HUMAN,
            reason=_clean_reason(reason),
            suggestions=list(last.result.suggestions) if last is not None else None,
        )

    def apply_assessment(self, context: NodeContext, assessment: QualityAssessment) -> NodeContext:
        """Replace the head version's assessment (last write wins).

        No version is created and older versions keep their assessments.
        """
        head = context.versions[0]
        context.versions[0] = head.model_copy(update={"quality_assessment": assessment})
        logger.info(
            "assessment_applied",
            key=context.key,
            version=head.id,
            status=assessment.status.value,
            reviewer=assessment.reviewer.value,
            confidence=assessment.confidence,
        )
        return context

    def review(
        self,
        context: NodeContext,
        decision: ReviewStatus | str,
        reason: str | None = None,
    ) -> NodeContext:
        """Apply a human approve/reject decision to the head version."""
        return self.apply_assessment(context, self.human_assessment(context, decision, reason))

    # -- automated analysis ------------------------------------------------

    def is_analyzing(self, context: NodeContext) -> bool:
        entry = self._in_flight.get(context.id)
        return entry is not None and not entry.task.done()

    def cancel(self, context: NodeContext) -> bool:
        """Cancel in-flight analysis for a context. Returns True if one was running."""
        entry = self._in_flight.pop(context.id, None)
        if entry is None or entry.task.done():
            return False
        entry.task.cancel()
        logger.info("analysis_cancelled", key=context.key)
        return True

    async def analyze(self, context: NodeContext) -> AnalysisOutcome:
        """Run the analyzer on the context's current value and apply the result.

        Supersedes any analysis already running for this context.
        """
        self.cancel(context)

        key, value = context.key, copy.deepcopy(context.value)
        entry = _InFlight(
            task=asyncio.create_task(
                run_analyzer(self.analyzer, key, value, self.config.timeout_seconds)
            ),
            fingerprint=fingerprint(key, value),
        )
        self._in_flight[context.id] = entry
        logger.debug("analysis_started", key=key)

        try:
            await asyncio.wait({entry.task})
        except asyncio.CancelledError:
            entry.task.cancel()
            self._release(context, entry)
            raise

        superseded = self._in_flight.get(context.id) is not entry
        self._release(context, entry)

        if entry.task.cancelled():
            return AnalysisOutcome(AnalysisStatus.CANCELLED)

        error = entry.task.exception()
        if error is not None:
            if not isinstance(error, AnalyzerError):
                raise error
            logger.warning("analysis_failed", key=key, error=str(error))
            return AnalysisOutcome(AnalysisStatus.FAILED, error=error)

        result = entry.task.result()
        if superseded or entry.fingerprint != fingerprint(context.key, context.value):
            logger.info("analysis_stale", key=key)
            return AnalysisOutcome(AnalysisStatus.STALE, result=result)

        context.last_analysis = AnalysisRecord(result=result, fingerprint=entry.fingerprint)
        assessment = self.assessment_from_analysis(result)
        self.apply_assessment(context, assessment)
        return AnalysisOutcome(AnalysisStatus.APPLIED, assessment=assessment, result=result)

    def _release(self, context: NodeContext, entry: _InFlight) -> None:
        if self._in_flight.get(context.id) is entry:
            del self._in_flight[context.id]


def _clean_reason(reason: str | None) -> str | None:
    if reason is None:
        return None
    reason = reason.strip()
    return reason or None
