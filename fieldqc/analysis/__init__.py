"""Automated analysis of field values."""

from fieldqc.analysis.analyzer import (
    Analyzer,
    AnalyzerError,
    AnalyzerTimeout,
    HeuristicAnalyzer,
    run_analyzer,
)
from fieldqc.analysis.checks import Issue, compute_issues, rect_problems

__all__ = [
    "Analyzer",
    "AnalyzerError",
    "AnalyzerTimeout",
    "HeuristicAnalyzer",
    "Issue",
    "compute_issues",
    "rect_problems",
    "run_analyzer",
]
