"""Survey summary models (computed views, never persisted)."""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from .enums import CompletionStatus, HIGH_COMPLETION_THRESHOLD


def completion_percent(completed: int, total: int) -> int:
    """Completion ratio as a whole percentage, rounding halves up.

    Returns 0 for an empty survey.
    """
    if total <= 0:
        return 0
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def completion_bucket(completed: int, total: int) -> CompletionStatus:
    """Bucket a survey's completion for dashboard display.

    ``complete`` only when every assignment is done and there is at least
    one; otherwise ``high`` from 50% upwards, else ``low``.
    """
    if total > 0 and completed == total:
        return CompletionStatus.COMPLETE
    if completion_percent(completed, total) >= HIGH_COMPLETION_THRESHOLD:
        return CompletionStatus.HIGH
    return CompletionStatus.LOW


class SurveySummary(BaseModel):
    """Completion summary for one assessment administration."""
    model_config = ConfigDict(frozen=True)

    survey_id: str
    assessment_id: str
    assessment_title: Optional[str] = None
    first_created_at: datetime = Field(
        ...,
        description="Earliest created_at among the survey's assignments"
    )
    total_assignments: int = Field(..., ge=0)
    completed_assignments: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_counts(self) -> "SurveySummary":
        """Ensure completed_assignments <= total_assignments."""
        if self.completed_assignments > self.total_assignments:
            raise ValueError("completed_assignments must be <= total_assignments")
        return self

    @computed_field
    @property
    def completion_percent(self) -> int:
        return completion_percent(self.completed_assignments, self.total_assignments)

    @computed_field
    @property
    def completion_status(self) -> CompletionStatus:
        return completion_bucket(self.completed_assignments, self.total_assignments)


class SurveySubject(BaseModel):
    """One subject (target) rated within a survey."""
    model_config = ConfigDict(frozen=True)

    target_id: str
    assignment_count: int = Field(..., ge=0)
    completed_count: int = Field(..., ge=0)
    assignment_ids: List[str] = Field(default_factory=list)
