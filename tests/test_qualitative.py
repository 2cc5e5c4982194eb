"""Tests for 360 qualitative feedback aggregation."""
import pytest
from unittest.mock import MagicMock

from talent_reports.models import FieldType, QualitativeFeedback
from talent_reports.reporting.qualitative import aggregate_360_feedback, group_text_answers

from conftest import InMemoryReportStore


class TestGroupTextAnswers:
    """Tests for group_text_answers."""

    def test_joins_per_dimension_with_blank_line(self, text_answer):
        answers = [
            text_answer("r1", "Clear communicator", "D"),
            text_answer("r2", "Listens well", "D"),
        ]
        assert group_text_answers(answers) == [
            QualitativeFeedback(dimension_id="D", feedback="Clear communicator\n\nListens well"),
        ]

    def test_null_dimension_is_own_group(self, text_answer):
        answers = [
            text_answer("r1", "General note", None),
            text_answer("r1", "On D", "D"),
            text_answer("r2", "Another note", None),
        ]
        groups = group_text_answers(answers)
        assert [g.dimension_id for g in groups] == [None, "D"]
        assert groups[0].feedback == "General note\n\nAnother note"

    def test_non_text_answers_ignored(self, text_answer):
        answers = [
            text_answer("r1", "4", "D", field_type=FieldType.SLIDER),
            text_answer("r1", "<p>rich</p>", "D", field_type=FieldType.RICH_TEXT),
            text_answer("r1", "Plain", "D"),
        ]
        assert [g.feedback for g in group_text_answers(answers)] == ["Plain"]

    def test_empty(self):
        assert group_text_answers([]) == []


class TestAggregate360Feedback:
    """Tests for aggregate_360_feedback."""

    def test_only_completed_raters_of_target(self, make_assignment, text_answer):
        store = InMemoryReportStore(
            assignments=[
                make_assignment(id="r1", target_id="T", completed=True),
                make_assignment(id="r2", target_id="T", completed=True),
                make_assignment(id="r3", target_id="T", completed=False),
                make_assignment(id="r4", target_id="other", completed=True),
            ],
            answers=[
                text_answer("r1", "Good", "D"),
                text_answer("r2", "Great", "D"),
                text_answer("r3", "Unfinished", "D"),
                text_answer("r4", "Wrong target", "D"),
            ],
        )
        result = aggregate_360_feedback("T", store)
        assert result == [QualitativeFeedback(dimension_id="D", feedback="Good\n\nGreat")]

    def test_no_completed_raters(self, make_assignment):
        store = MagicMock()
        store.get_completed_assignments_for_target.return_value = []

        assert aggregate_360_feedback("T", store) == []
        store.get_text_answers.assert_not_called()

    def test_raters_without_text(self, make_assignment):
        store = InMemoryReportStore(
            assignments=[make_assignment(id="r1", target_id="T", completed=True)],
        )
        assert aggregate_360_feedback("T", store) == []

    def test_store_error_propagates(self):
        store = MagicMock()
        store.get_completed_assignments_for_target.side_effect = RuntimeError("connection lost")
        with pytest.raises(RuntimeError, match="connection lost"):
            aggregate_360_feedback("T", store)

    def test_rater_identity_not_in_output(self, make_assignment, text_answer):
        store = InMemoryReportStore(
            assignments=[make_assignment(id="r1", target_id="T", completed=True)],
            answers=[text_answer("r1", "Kind", "D")],
        )
        dumped = aggregate_360_feedback("T", store)[0].model_dump()
        assert set(dumped) == {"dimension_id", "feedback"}
