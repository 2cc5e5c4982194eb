"""Pydantic models for the talent assessment report core."""

# Common Models
from talent_reports.models.common import (
    HealthResponse,
    ErrorResponse,
)

# Enums
from talent_reports.models.enums import (
    FeedbackType,
    AssignedFeedbackType,
    FieldType,
    CompletionStatus,
    HIGH_COMPLETION_THRESHOLD,
    RATER_TEXT_SEPARATOR,
)

# Inputs
from talent_reports.models.assignment import (
    Assignment,
    TextAnswer,
)
from talent_reports.models.feedback import (
    DimensionScore,
    FeedbackLibraryEntry,
    ReportFeedbackAssignment,
    QualitativeFeedback,
)

# Computed views
from talent_reports.models.survey import (
    SurveySummary,
    SurveySubject,
    completion_bucket,
    completion_percent,
)

# Report records
from talent_reports.models.report import (
    GroupNorm,
    DimensionResult,
    ReportRecord,
    ReportGenerationResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "FeedbackType",
    "AssignedFeedbackType",
    "FieldType",
    "CompletionStatus",
    "HIGH_COMPLETION_THRESHOLD",
    "RATER_TEXT_SEPARATOR",
    "Assignment",
    "TextAnswer",
    "DimensionScore",
    "FeedbackLibraryEntry",
    "ReportFeedbackAssignment",
    "QualitativeFeedback",
    "SurveySummary",
    "SurveySubject",
    "completion_bucket",
    "completion_percent",
    "GroupNorm",
    "DimensionResult",
    "ReportRecord",
    "ReportGenerationResponse",
]
