"""Automated field analyzer.

An analyzer is any coroutine function ``analyze(key, value) -> AnalysisResult``.
The quality engine treats it as a remote model: it may be slow, may fail, and
its result may arrive after the field has moved on.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol

import structlog

from fieldqc.analysis.checks import compute_issues, suggestions_for
from fieldqc.classification.classifier import FieldClassifier
from fieldqc.config import AnalyzerConfig, get_config
from fieldqc.models import AnalysisResult
from fieldqc.values import kind_of

logger = structlog.get_logger(__name__)

BASE_CONFIDENCE = 0.8


class AnalyzerError(Exception):
    """Automated analysis failed; the caller may retry."""

    pass


class AnalyzerTimeout(AnalyzerError):
    """Automated analysis did not finish in time."""

    pass


class Analyzer(Protocol):
    async def __call__(self, key: str, value: Any) -> AnalysisResult: ...


class HeuristicAnalyzer:
    """Deterministic rule-of-thumb analyzer.

    Flags incomplete or negative rectangles, image paths that are not HTTP
    URLs and actions outside the whitelist. Each finding lowers confidence
    to the issue's ceiling; the lowest ceiling wins.
    """

    def __init__(
        self,
        classifier: Optional[FieldClassifier] = None,
        config: Optional[AnalyzerConfig] = None,
    ) -> None:
        self.classifier = classifier or FieldClassifier()
        self.config = config or get_config().analyzer

    async def __call__(self, key: str, value: Any) -> AnalysisResult:
        if self.config.latency_seconds > 0:
            await asyncio.sleep(self.config.latency_seconds)
        return self.analyze_now(key, value)

    def analyze_now(self, key: str, value: Any) -> AnalysisResult:
        """Synchronous core of the analysis."""
        category = self.classifier.resolve(key, value).type
        issues = compute_issues(category, value, self.config.valid_actions)

        confidence = min([BASE_CONFIDENCE] + [issue.confidence for issue in issues])

        return AnalysisResult(
            confidence=confidence,
            suggestions=suggestions_for(category, value),
            reasoning=f'analysed field "{key}" based on its {kind_of(value).value} value',
            quality_issues=[issue.message for issue in issues],
        )


async def run_analyzer(
    analyzer: Analyzer,
    key: str,
    value: Any,
    timeout_seconds: float,
) -> AnalysisResult:
    """Invoke a pluggable analyzer with a timeout.

    Raises:
        AnalyzerTimeout: If the analyzer exceeds timeout_seconds
        AnalyzerError: If the analyzer raises or returns something unusable
    """
    try:
        result = await asyncio.wait_for(analyzer(key, value), timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        raise AnalyzerTimeout(f"Analysis of '{key}' timed out after {timeout_seconds:g}s") from e
    except Exception as e:
        raise AnalyzerError(f"Analysis of '{key}' failed: {e}") from e

    if not isinstance(result, AnalysisResult):
        raise AnalyzerError(
            f"Analyzer returned {type(result).__name__}, expected AnalysisResult"
        )
    return result
