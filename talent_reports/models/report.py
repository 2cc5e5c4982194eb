"""Report record models."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from .feedback import ReportFeedbackAssignment


class GroupNorm(BaseModel):
    """Average score of a norm group on one dimension."""
    model_config = ConfigDict(frozen=True)

    dimension_id: str
    avg_score: float
    participant_count: int = Field(..., ge=1)


class DimensionResult(BaseModel):
    """One dimension's score block on a report."""
    model_config = ConfigDict(frozen=True)

    dimension_id: str
    target_score: float
    industry_benchmark: Optional[float] = None
    group_norm: Optional[float] = None
    group_norm_participant_count: int = Field(default=0, ge=0)
    improvement_needed: bool = Field(
        default=False,
        description="Target score below the industry benchmark or the group norm"
    )


class ReportRecord(BaseModel):
    """Persisted report for one assignment: scores, norms and assigned feedback."""
    model_config = ConfigDict(from_attributes=True)

    assignment_id: str
    overall_score: Optional[float] = Field(
        default=None,
        description="Mean of the dimension target scores"
    )
    dimension_scores: List[DimensionResult] = Field(default_factory=list)
    feedback_assigned: List[ReportFeedbackAssignment] = Field(default_factory=list)
    calculated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportGenerationResponse(BaseModel):
    """Result of a report generation request."""
    assignment_id: str
    regenerated: bool = Field(
        ...,
        description="False when previously persisted feedback was reused"
    )
    count: int = Field(..., ge=0)
    report: ReportRecord
