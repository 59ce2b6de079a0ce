"""fieldqc Pydantic models for type-safe data validation.

A NodeContext is the aggregate for one inspected field: its current value,
the version ledger (index 0 = newest) and the annotations attached to it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewStatus(str, Enum):
    """Quality review status of a value."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    NEEDS_REVIEW = "needs_review"


class Reviewer(str, Enum):
    """Source of a judgment."""

    HUMAN = "human"
    AI = "ai"
    HYBRID = "hybrid"  # Human decision following automated output on the same value


class AnnotationType(str, Enum):
    BBOX = "bbox"
    POINT = "point"
    TEXT = "text"
    ERROR = "error"
    SUGGESTION = "suggestion"


class QualityAssessment(BaseModel):
    """A single judgment about a field value."""

    status: ReviewStatus
    confidence: float
    reviewer: Reviewer
    timestamp: datetime = Field(default_factory=utcnow)
    reason: str | None = None
    suggestions: list[str] | None = None

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("confidence must be between 0 and 1")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "needs_review",
                "confidence": 0.3,
                "reviewer": "ai",
                "reason": "rectangle width must be non-negative (got -5)",
                "suggestions": ["ensure all coordinate values are non-negative numbers"],
            }
        }
    )


class NodeVersion(BaseModel):
    """Historical snapshot of a field value plus its judgment at that point."""

    id: str  # "v1", "v2", ... in creation order
    value: Any
    timestamp: datetime = Field(default_factory=utcnow)
    author: str
    changes: list[str] = Field(default_factory=list)
    quality_assessment: QualityAssessment


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float | None = None
    height: float | None = None

    @field_validator("width", "height")
    @classmethod
    def validate_extent(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("width and height must be non-negative")
        return v


class AnnotationData(BaseModel):
    """Spatial or textual note attached to a field. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    type: AnnotationType
    content: str
    author: str
    coordinates: Coordinates | None = None
    timestamp: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def validate_coordinates(self) -> AnnotationData:
        if self.type in (AnnotationType.BBOX, AnnotationType.POINT) and self.coordinates is None:
            raise ValueError(f"{self.type.value} annotations require coordinates")
        if self.type == AnnotationType.BBOX and self.coordinates is not None:
            if self.coordinates.width is None or self.coordinates.height is None:
                raise ValueError("bbox annotations require width and height")
        return self


class AnalysisResult(BaseModel):
    """Output of an automated analyzer for one (key, value) pair."""

    confidence: float
    suggestions: list[str] = Field(default_factory=list)
    reasoning: str = ""
    quality_issues: list[str] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return max(0.0, min(1.0, v))

    @property
    def has_issues(self) -> bool:
        return len(self.quality_issues) > 0


class AnalysisRecord(BaseModel):
    """Last automated result applied to a context, tied to the value it judged."""

    result: AnalysisResult
    fingerprint: str
    completed_at: datetime = Field(default_factory=utcnow)


class NodeContext(BaseModel):
    """Aggregate root for one inspected field."""

    id: UUID = Field(default_factory=uuid4)
    key: str
    value: Any
    path: list[str] = Field(default_factory=list)
    type: str
    versions: list[NodeVersion]
    annotations: list[AnnotationData] = Field(default_factory=list)
    last_analysis: AnalysisRecord | None = None

    @field_validator("versions")
    @classmethod
    def validate_versions(cls, v: list[NodeVersion]) -> list[NodeVersion]:
        if not v:
            raise ValueError("a NodeContext always holds at least one version")
        return v

    @property
    def head(self) -> NodeVersion:
        return self.versions[0]

    @property
    def status(self) -> ReviewStatus:
        return self.head.quality_assessment.status
