"""Enumeration types for assessment report computation."""
from enum import Enum


class FeedbackType(str, Enum):
    """Kinds of feedback-library entries."""
    OVERALL = "overall"  # at most one per (assessment, dimension)
    SPECIFIC = "specific"  # any number per (assessment, dimension)


class AssignedFeedbackType(str, Enum):
    """Kinds of feedback attached to a report."""
    OVERALL = "overall"
    SPECIFIC = "specific"
    TEXT_360 = "360_text"  # rater free text, no library entry


class FieldType(str, Enum):
    """Assessment field types. Only text input takes part in 360 aggregation."""
    TEXT_INPUT = "text_input"
    RICH_TEXT = "rich_text"
    MULTIPLE_CHOICE = "multiple_choice"
    SLIDER = "slider"


class CompletionStatus(str, Enum):
    """Display bucket for a survey's completion ratio."""
    COMPLETE = "complete"
    HIGH = "high"
    LOW = "low"


# Completion ratio (percent) at or above which an incomplete survey is "high"
HIGH_COMPLETION_THRESHOLD: int = 50

# Separator between raters' free-text answers in one dimension group
RATER_TEXT_SEPARATOR: str = "\n\n"
