"""Tests for ReportService generation and retrieval."""
import pytest
from unittest.mock import MagicMock

from talent_reports.errors import (
    AssignmentNotCompletedError,
    AssignmentNotFoundError,
    Invalid360AssignmentError,
    MissingSchemaError,
    ReportNotFoundError,
)
from talent_reports.models import (
    AssignedFeedbackType,
    DimensionScore,
    FeedbackType,
    ReportFeedbackAssignment,
    ReportRecord,
)
from talent_reports.reporting.report_service import ReportService, qualitative_to_assignments

from conftest import InMemoryReportStore


def first(entries):
    return entries[0]


def last(entries):
    return entries[-1]


@pytest.fixture
def library_store(make_assignment, entry):
    """A completed library-based assignment with two eligible specific entries."""
    return InMemoryReportStore(
        assignments=[
            make_assignment(id="done", completed=True),
            make_assignment(id="open", completed=False),
        ],
        scores=[DimensionScore(assignment_id="done", dimension_id="D1", score=72)],
        entries=[
            entry("o", type=FeedbackType.OVERALL),
            entry("s1", min_score=50),
            entry("s2", min_score=60),
        ],
    )


@pytest.fixture
def store_360(make_assignment, text_answer):
    """A 360 assignment about target T with one other completed rater."""
    return InMemoryReportStore(
        assignments=[
            make_assignment(id="self", target_id="T", completed=True, is_360=True),
            make_assignment(id="peer", target_id="T", completed=True, is_360=True),
        ],
        answers=[
            text_answer("self", "I plan ahead", "D"),
            text_answer("peer", "Plans ahead", "D"),
        ],
    )


class TestGenerate:
    """Tests for ReportService.generate."""

    def test_unknown_assignment(self, library_store):
        with pytest.raises(AssignmentNotFoundError) as exc_info:
            ReportService(library_store).generate("missing")
        assert exc_info.value.status_code == 404

    def test_incomplete_assignment(self, library_store):
        with pytest.raises(AssignmentNotCompletedError) as exc_info:
            ReportService(library_store).generate("open")
        assert exc_info.value.status_code == 400
        assert library_store.saved == []

    def test_library_feedback_generated_and_saved(self, library_store):
        outcome = ReportService(library_store, selector=first).generate("done")

        assert outcome.regenerated is True
        assert outcome.count == 2
        assert [a.feedback_id for a in outcome.report.feedback_assigned] == ["o", "s1"]
        assert library_store.saved == ["done"]

    def test_existing_feedback_reused(self, library_store):
        service = ReportService(library_store, selector=first)
        service.generate("done")

        service.selector = last
        outcome = service.generate("done")

        assert outcome.regenerated is False
        assert [a.feedback_id for a in outcome.report.feedback_assigned] == ["o", "s1"]
        # scores are refreshed even when feedback is kept
        assert library_store.saved == ["done", "done"]
        assert outcome.report.overall_score == 72

    def test_force_redraws(self, library_store):
        service = ReportService(library_store, selector=first)
        service.generate("done")

        service.selector = last
        outcome = service.generate("done", force=True)

        assert outcome.regenerated is True
        assert [a.feedback_id for a in outcome.report.feedback_assigned] == ["o", "s2"]
        assert library_store.saved == ["done", "done"]

    def test_empty_existing_report_is_recomputed(self, library_store):
        library_store.reports["done"] = ReportRecord(assignment_id="done", feedback_assigned=[])
        outcome = ReportService(library_store, selector=first).generate("done")
        assert outcome.regenerated is True
        assert outcome.count == 2

    def test_no_scores_saves_empty_report(self, make_assignment):
        store = InMemoryReportStore(assignments=[make_assignment(id="a", completed=True)])
        outcome = ReportService(store).generate("a")
        assert outcome.count == 0
        assert store.reports["a"].feedback_assigned == []

    def test_360_uses_rater_text(self, store_360):
        outcome = ReportService(store_360).generate("self")

        assert outcome.count == 1
        feedback = outcome.report.feedback_assigned[0]
        assert feedback.type == AssignedFeedbackType.TEXT_360
        assert feedback.feedback_id is None
        assert feedback.dimension_id == "D"
        assert feedback.feedback_content == "I plan ahead\n\nPlans ahead"

    def test_360_always_recomputed(self, store_360, make_assignment, text_answer):
        service = ReportService(store_360)
        service.generate("self")

        store_360.assignments["late"] = make_assignment(
            id="late", target_id="T", completed=True, is_360=True
        )
        store_360.answers.append(text_answer("late", "Reliable", "D"))
        outcome = service.generate("self")

        assert outcome.regenerated is True
        assert outcome.report.feedback_assigned[0].feedback_content.endswith("Reliable")

    def test_missing_table_raises_before_compute(self, library_store):
        library_store.report_table = False
        with pytest.raises(MissingSchemaError) as exc_info:
            ReportService(library_store).generate("done")
        assert exc_info.value.error_code == "missing_schema"
        assert "003_report_data" in exc_info.value.message
        assert library_store.saved == []

    def test_store_error_propagates(self, library_store):
        library_store.save_report = MagicMock(side_effect=RuntimeError("write failed"))
        with pytest.raises(RuntimeError, match="write failed"):
            ReportService(library_store).generate("done")

    def test_360_without_target_rejected(self, make_assignment, entry):
        store = InMemoryReportStore(
            assignments=[make_assignment(id="orphan", completed=True, is_360=True)],
            scores=[DimensionScore(assignment_id="orphan", dimension_id="D1", score=80)],
            entries=[entry("o", type=FeedbackType.OVERALL)],
        )
        with pytest.raises(Invalid360AssignmentError) as exc_info:
            ReportService(store).generate("orphan")
        assert exc_info.value.status_code == 400
        assert store.saved == []


class TestReportScores:
    """Score block persisted alongside the feedback."""

    @pytest.fixture
    def scored_store(self, make_assignment):
        return InMemoryReportStore(
            assignments=[
                make_assignment(id="me", completed=True),
                make_assignment(id="peer1", completed=True),
                make_assignment(id="peer2", completed=True),
            ],
            scores=[
                DimensionScore(assignment_id="me", dimension_id="D1", score=60),
                DimensionScore(assignment_id="me", dimension_id="D2", score=90),
                DimensionScore(assignment_id="peer1", dimension_id="D1", score=70),
                DimensionScore(assignment_id="peer1", dimension_id="D2", score=80),
                DimensionScore(assignment_id="peer2", dimension_id="D1", score=80),
            ],
            benchmarks={"D2": 95.0},
            groups={"me": ["me", "peer1", "peer2"]},
        )

    def test_overall_and_dimension_results(self, scored_store):
        report = ReportService(scored_store).generate("me").report

        assert report.overall_score == 75
        d1, d2 = report.dimension_scores
        assert (d1.dimension_id, d1.target_score) == ("D1", 60)
        assert d1.group_norm == 70
        assert d1.group_norm_participant_count == 3
        assert d1.industry_benchmark is None
        assert d1.improvement_needed is True

        assert d2.group_norm == 85
        assert d2.group_norm_participant_count == 2
        assert d2.industry_benchmark == 95.0
        assert d2.improvement_needed is True

    def test_no_group_means_no_norms(self, scored_store):
        scored_store.groups = {}
        report = ReportService(scored_store).generate("me").report

        assert all(d.group_norm is None for d in report.dimension_scores)
        assert all(d.group_norm_participant_count == 0 for d in report.dimension_scores)
        assert [d.improvement_needed for d in report.dimension_scores] == [False, True]

    def test_no_scores_no_overall(self, make_assignment):
        store = InMemoryReportStore(assignments=[make_assignment(id="a", completed=True)])
        report = ReportService(store).generate("a").report
        assert report.overall_score is None
        assert report.dimension_scores == []

    def test_360_target_score_is_rater_mean(self, store_360):
        store_360.scores = [
            DimensionScore(assignment_id="self", dimension_id="D", score=90),
            DimensionScore(assignment_id="peer", dimension_id="D", score=70),
        ]
        report = ReportService(store_360).generate("self").report

        assert report.overall_score == 80
        assert report.dimension_scores[0].target_score == 80


class TestCacheInvalidation:
    """The cached report is dropped whenever a report is saved."""

    def test_generate_deletes_cached_report(self, library_store):
        cache = MagicMock()
        ReportService(library_store, selector=first, cache=cache).generate("done")
        cache.delete.assert_called_once_with("report:done")

    def test_reuse_also_deletes(self, library_store):
        cache = MagicMock()
        service = ReportService(library_store, selector=first, cache=cache)
        service.generate("done")
        service.generate("done")
        assert cache.delete.call_count == 2

    def test_failed_generation_keeps_cache(self, library_store):
        cache = MagicMock()
        with pytest.raises(AssignmentNotCompletedError):
            ReportService(library_store, cache=cache).generate("open")
        cache.delete.assert_not_called()


class TestGetReport:
    """Tests for ReportService.get_report."""

    def test_returns_saved_report(self, library_store):
        service = ReportService(library_store, selector=first)
        service.generate("done")
        assert service.get_report("done").assignment_id == "done"

    def test_not_generated(self, library_store):
        with pytest.raises(ReportNotFoundError):
            ReportService(library_store).get_report("done")

    def test_missing_table(self, library_store):
        library_store.report_table = False
        with pytest.raises(MissingSchemaError):
            ReportService(library_store).get_report("done")


def test_qualitative_to_assignments():
    from talent_reports.models import QualitativeFeedback

    result = qualitative_to_assignments([QualitativeFeedback(dimension_id=None, feedback="x")])
    assert result == [
        ReportFeedbackAssignment(
            dimension_id=None, feedback_content="x", type=AssignedFeedbackType.TEXT_360
        )
    ]
