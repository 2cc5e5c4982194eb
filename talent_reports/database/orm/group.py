"""Norm group and industry benchmark ORM models."""
from sqlalchemy import String, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import datetime
import uuid

from talent_reports.database.base import Base


class Group(Base):
    """A population whose scores form a norm; 360 groups name their subject."""
    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    client_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    target_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("profiles.id"),
        nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )


class GroupMember(Base):
    """Membership of a profile in a group, with its rater role."""
    __tablename__ = "group_members"

    group_id: Mapped[str] = mapped_column(ForeignKey("groups.id"), primary_key=True)
    profile_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), primary_key=True)
    role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )


class Benchmark(Base):
    """Industry benchmark value for a dimension."""
    __tablename__ = "benchmarks"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    dimension_id: Mapped[str] = mapped_column(ForeignKey("dimensions.id"), index=True)
    industry_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    value: Mapped[float] = mapped_column(Float)

    def __repr__(self):
        return f"<Benchmark(dimension_id={self.dimension_id}, value={self.value})>"
