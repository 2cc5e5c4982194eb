"""Dimension score and feedback models."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from .enums import AssignedFeedbackType, FeedbackType


class DimensionScore(BaseModel):
    """Average item score for one (assignment, dimension) pair.

    No range is imposed on ``score``; libraries define their own bounds.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    assignment_id: Optional[str] = None
    dimension_id: Optional[str] = None
    score: float


class FeedbackLibraryEntry(BaseModel):
    """Reusable feedback text with an inclusive score-eligibility window.

    A null ``min_score``/``max_score`` leaves that side unbounded.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    assessment_id: str
    dimension_id: str
    type: FeedbackType
    feedback: str
    min_score: Optional[float] = None
    max_score: Optional[float] = None


class ReportFeedbackAssignment(BaseModel):
    """Feedback chosen for one dimension of one report."""
    model_config = ConfigDict(frozen=True)

    dimension_id: Optional[str] = None
    feedback_id: Optional[str] = Field(
        default=None,
        description="Library entry id; absent for 360 rater text"
    )
    feedback_content: str
    type: AssignedFeedbackType


class QualitativeFeedback(BaseModel):
    """All raters' free text for one dimension (None = general comments)."""
    model_config = ConfigDict(frozen=True)

    dimension_id: Optional[str] = None
    feedback: str
