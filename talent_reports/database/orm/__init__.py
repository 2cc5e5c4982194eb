"""SQLAlchemy ORM models for the talent assessment report core."""
from talent_reports.database.base import Base
from talent_reports.database.orm.assignment import Assessment, Profile, Assignment
from talent_reports.database.orm.scoring import (
    Dimension,
    Field,
    Answer,
    AssignmentDimensionScore,
)
from talent_reports.database.orm.group import Group, GroupMember, Benchmark
from talent_reports.database.orm.report import FeedbackLibrary, ReportData

__all__ = [
    "Base",
    "Assessment",
    "Profile",
    "Assignment",
    "Dimension",
    "Field",
    "Answer",
    "AssignmentDimensionScore",
    "Group",
    "GroupMember",
    "Benchmark",
    "FeedbackLibrary",
    "ReportData",
]
