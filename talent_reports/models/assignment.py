"""Assignment and answer models (read-only inputs to report computation)."""
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .enums import FieldType


class Assignment(BaseModel):
    """One respondent's instance of taking one assessment."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    user_id: str
    assessment_id: str
    survey_id: Optional[str] = Field(
        default=None,
        description="Shared by all assignments created in one administration"
    )
    target_id: Optional[str] = Field(
        default=None,
        description="Subject being rated (360-style assessments only)"
    )
    completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: datetime

    # Joined from the assessment row when the store has it
    assessment_title: Optional[str] = None
    is_360: bool = False

    @field_validator("created_at", "completed_at")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps (Snowflake TIMESTAMP_NTZ) are taken as UTC."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class TextAnswer(BaseModel):
    """A respondent's answer to one field, with the field's dimension and type."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    assignment_id: str
    value: str
    field_type: FieldType
    dimension_id: Optional[str] = None
