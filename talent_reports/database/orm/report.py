"""Feedback library and report ORM models."""
from sqlalchemy import String, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from snowflake.sqlalchemy import VARIANT
from typing import Optional
from datetime import datetime
import uuid

from talent_reports.database.base import Base


class FeedbackLibrary(Base):
    """Reusable feedback text with a score-eligibility window."""
    __tablename__ = "feedback_library"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    assessment_id: Mapped[str] = mapped_column(ForeignKey("assessments.id"))
    dimension_id: Mapped[str] = mapped_column(ForeignKey("dimensions.id"))
    type: Mapped[str] = mapped_column(String(20))  # overall | specific
    feedback: Mapped[str] = mapped_column(Text)
    min_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )

    def __repr__(self):
        return f"<FeedbackLibrary(id={self.id}, type={self.type}, range=[{self.min_score}, {self.max_score}])>"


class ReportData(Base):
    """Computed report (scores, norms, feedback), one row per assignment."""
    __tablename__ = "report_data"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    assignment_id: Mapped[str] = mapped_column(
        ForeignKey("assignments.id"),
        unique=True
    )
    overall_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dimension_scores = mapped_column(VARIANT, nullable=True)
    feedback_assigned = mapped_column(VARIANT, nullable=True)
    calculated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self):
        return f"<ReportData(assignment_id={self.assignment_id})>"
