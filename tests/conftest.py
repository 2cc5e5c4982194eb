"""Pytest fixtures and configuration."""
import pytest
from datetime import datetime, timezone
from typing import Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, AsyncMock, patch

from talent_reports.models import (
    Assignment,
    DimensionScore,
    FeedbackLibraryEntry,
    FeedbackType,
    FieldType,
    ReportRecord,
    TextAnswer,
)
from talent_reports.reporting.feedback_engine import InMemoryFeedbackLibrary


def ts(day: int, hour: int = 0) -> datetime:
    """A UTC timestamp in January 2024."""
    return datetime(2024, 1, day, hour, tzinfo=timezone.utc)


class InMemoryReportStore(InMemoryFeedbackLibrary):
    """Report store over plain lists, for service-level tests."""

    def __init__(self, assignments=(), scores=(), entries=(), answers=(), reports=None,
                 report_table=True, benchmarks=None, groups=None):
        super().__init__(entries)
        self.assignments = {a.id: a for a in assignments}
        self.scores = list(scores)
        self.answers = list(answers)
        self.reports: dict[str, ReportRecord] = dict(reports or {})
        self.report_table = report_table
        self.benchmarks: dict[str, float] = dict(benchmarks or {})
        # assignment id -> ids of the completed assignments in its norm group
        self.groups: dict[str, list[str]] = dict(groups or {})
        self.saved: list[str] = []

    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        return self.assignments.get(assignment_id)

    def get_dimension_scores(self, assignment_id: str):
        return [s for s in self.scores if s.assignment_id == assignment_id]

    def get_scores_for_assignments(self, assignment_ids):
        by_assignment = {}
        for assignment_id in assignment_ids:
            scores = self.get_dimension_scores(assignment_id)
            if scores:
                by_assignment[assignment_id] = scores
        return by_assignment

    def get_group_scores(self, assignment):
        return self.get_scores_for_assignments(self.groups.get(assignment.id, []))

    def get_benchmarks(self, dimension_ids):
        return {d: self.benchmarks[d] for d in dimension_ids if d in self.benchmarks}

    def get_completed_assignments_for_target(self, target_id: str):
        return [a for a in self.assignments.values() if a.target_id == target_id and a.completed]

    def get_text_answers(self, assignment_ids):
        wanted = set(assignment_ids)
        return [
            a for a in self.answers
            if a.assignment_id in wanted and a.field_type == FieldType.TEXT_INPUT
        ]

    def ensure_report_table(self) -> None:
        if not self.report_table:
            from talent_reports.errors import MissingSchemaError
            raise MissingSchemaError(relation="report_data", migration="003_report_data")

    def get_report(self, assignment_id: str):
        return self.reports.get(assignment_id)

    def save_report(self, record):
        saved = record.model_copy(update={"calculated_at": ts(10), "updated_at": ts(10)})
        self.reports[record.assignment_id] = saved
        self.saved.append(record.assignment_id)
        return saved


@pytest.fixture
def make_assignment():
    """Factory for Assignment rows with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Assignment:
        counter["n"] += 1
        data = {
            "id": f"asg-{counter['n']}",
            "user_id": f"user-{counter['n']}",
            "assessment_id": "A",
            "survey_id": "S1",
            "completed": False,
            "created_at": ts(1),
        }
        data.update(overrides)
        return Assignment(**data)

    return _make


@pytest.fixture
def entry():
    """Factory for feedback-library entries."""
    def _entry(id, type=FeedbackType.SPECIFIC, min_score=None, max_score=None,
               dimension_id="D1", assessment_id="A", feedback=None) -> FeedbackLibraryEntry:
        return FeedbackLibraryEntry(
            id=id,
            assessment_id=assessment_id,
            dimension_id=dimension_id,
            type=type,
            feedback=feedback or f"Feedback {id}",
            min_score=min_score,
            max_score=max_score,
        )
    return _entry


@pytest.fixture
def text_answer():
    def _answer(assignment_id, value, dimension_id="D1", field_type=FieldType.TEXT_INPUT):
        return TextAnswer(
            assignment_id=assignment_id,
            value=value,
            field_type=field_type,
            dimension_id=dimension_id,
        )
    return _answer


@pytest.fixture
def sample_scores():
    """Dimension scores for one assignment, including an unmapped dimension."""
    return [
        DimensionScore(assignment_id="asg-1", dimension_id="D1", score=72.0),
        DimensionScore(assignment_id="asg-1", dimension_id="D2", score=35.5),
        DimensionScore(assignment_id="asg-1", dimension_id=None, score=90.0),
    ]


@pytest.fixture
def mock_snowflake():
    """Mock Snowflake service."""
    mock = MagicMock()
    mock.health_check = AsyncMock(return_value=(True, None))
    mock.execute_query = MagicMock(return_value=[])
    mock.execute_one = MagicMock(return_value=None)
    mock.execute_write = MagicMock(return_value=1)
    return mock


@pytest.fixture
def mock_redis():
    """Mock Redis cache."""
    mock = MagicMock()
    mock.health_check = AsyncMock(return_value=(True, None))
    mock.get = MagicMock(return_value=None)
    mock.set = MagicMock(return_value=True)
    mock.delete = MagicMock(return_value=True)
    return mock


@pytest.fixture
def client(mock_snowflake, mock_redis):
    """Create test client with mocked services."""
    with patch("talent_reports.routers.health.get_snowflake_service", return_value=mock_snowflake):
        with patch("talent_reports.routers.health.get_redis_cache", return_value=mock_redis):
            from talent_reports.main import app
            yield TestClient(app, raise_server_exceptions=False)
