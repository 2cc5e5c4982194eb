"""Dimension, field, answer and dimension-score ORM models."""
from sqlalchemy import String, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import datetime
import uuid

from talent_reports.database.base import Base


class Dimension(Base):
    """Named scoring category within an assessment."""
    __tablename__ = "dimensions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    assessment_id: Mapped[str] = mapped_column(ForeignKey("assessments.id"))
    name: Mapped[str] = mapped_column(String(255))

    def __repr__(self):
        return f"<Dimension(id={self.id}, name={self.name})>"


class Field(Base):
    """Assessment question; ``type`` is one of FieldType."""
    __tablename__ = "fields"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    assessment_id: Mapped[str] = mapped_column(ForeignKey("assessments.id"))
    dimension_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("dimensions.id"),
        nullable=True
    )
    type: Mapped[str] = mapped_column(String(30))

    def __repr__(self):
        return f"<Field(id={self.id}, type={self.type})>"


class Answer(Base):
    """A respondent's answer to one field."""
    __tablename__ = "answers"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    assignment_id: Mapped[str] = mapped_column(ForeignKey("assignments.id"), index=True)
    field_id: Mapped[str] = mapped_column(ForeignKey("fields.id"))
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )

    def __repr__(self):
        return f"<Answer(id={self.id}, assignment_id={self.assignment_id})>"


class AssignmentDimensionScore(Base):
    """Average item score per (assignment, dimension), written upstream."""
    __tablename__ = "assignment_dimension_scores"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    assignment_id: Mapped[str] = mapped_column(ForeignKey("assignments.id"), index=True)
    dimension_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("dimensions.id"),
        nullable=True
    )
    avg_score: Mapped[float] = mapped_column(Float)

    # Note: Snowflake doesn't enforce UNIQUE(assignment_id, dimension_id)
    # The upstream scorer writes exactly one row per pair

    def __repr__(self):
        return f"<AssignmentDimensionScore(assignment_id={self.assignment_id}, score={self.avg_score})>"
