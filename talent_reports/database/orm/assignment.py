"""Assessment, Profile and Assignment ORM models."""
from sqlalchemy import String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional
from datetime import datetime
import uuid

from talent_reports.database.base import Base


class Assessment(Base):
    """Assessment definition table."""
    __tablename__ = "assessments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    title: Mapped[str] = mapped_column(String(255))
    is_360: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )

    assignments: Mapped[List["Assignment"]] = relationship(
        "Assignment",
        back_populates="assessment"
    )

    def __repr__(self):
        return f"<Assessment(id={self.id}, title={self.title}, is_360={self.is_360})>"


class Profile(Base):
    """User profile table; ``client_id`` scopes users to a client."""
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255))

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email})>"


class Assignment(Base):
    """One respondent's instance of taking one assessment."""
    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"))
    assessment_id: Mapped[str] = mapped_column(ForeignKey("assessments.id"))
    survey_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    target_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("profiles.id"),
        nullable=True
    )
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )

    assessment: Mapped["Assessment"] = relationship(
        "Assessment",
        back_populates="assignments"
    )

    def __repr__(self):
        return f"<Assignment(id={self.id}, survey_id={self.survey_id}, completed={self.completed})>"
