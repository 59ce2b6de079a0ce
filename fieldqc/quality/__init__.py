"""Quality engine: automated and human review of field values."""

from fieldqc.quality.engine import AnalysisOutcome, AnalysisStatus, QualityEngine

__all__ = ["AnalysisOutcome", "AnalysisStatus", "QualityEngine"]
