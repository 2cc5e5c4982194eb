"""Property-based tests for survey aggregation and feedback assignment.

Uses Hypothesis to verify:
  Survey aggregation:
    1. test_aggregation_deterministic    – same rows ⇒ identical summaries
    2. test_first_created_is_minimum     – earliest created_at per group
    3. test_counts_consistent            – completed ≤ total, totals add up
    4. test_orphans_never_counted        – rows without survey id ignored
    5. test_completion_monotonic         – more completed ⇒ percent ≥

  Feedback assignment:
    6. test_specific_always_eligible     – chosen entry's window holds the score
    7. test_at_most_one_specific         – ≤ 1 specific per dimension
    8. test_selector_index_respected     – deterministic selector is honoured
    9. test_unmapped_dimensions_skipped  – no output for null dimension ids
"""
from datetime import datetime, timedelta, timezone

from hypothesis import HealthCheck, given, settings as h_settings
from hypothesis import strategies as st

from talent_reports.models import (
    AssignedFeedbackType,
    Assignment,
    DimensionScore,
    FeedbackLibraryEntry,
    FeedbackType,
    completion_percent,
)
from talent_reports.reporting.feedback_engine import (
    InMemoryFeedbackLibrary,
    assign_feedback,
    eligible_entries,
)
from talent_reports.reporting.survey_aggregator import aggregate_surveys
from talent_reports.reporting.utils import score_in_range

# ── Hypothesis configuration ──────────────────────────────────────────────────
h_settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
h_settings.load_profile("ci")


# ── Strategy helpers ──────────────────────────────────────────────────────────

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


@st.composite
def assignment_rows(draw):
    n = draw(st.integers(min_value=0, max_value=30))
    rows = []
    for i in range(n):
        rows.append(Assignment(
            id=f"a{i}",
            user_id=f"u{i}",
            assessment_id=draw(st.sampled_from(["A", "B"])),
            survey_id=draw(st.sampled_from(["S1", "S2", "S3", None])),
            completed=draw(st.booleans()),
            created_at=BASE + timedelta(hours=draw(st.integers(0, 24 * 60))),
        ))
    return rows


_score = st.floats(min_value=0.0, max_value=100.0, allow_nan=False)
_bound = st.one_of(st.none(), st.integers(min_value=0, max_value=100).map(float))


@st.composite
def library_entries(draw):
    n = draw(st.integers(min_value=0, max_value=8))
    entries = []
    for i in range(n):
        lo, hi = draw(_bound), draw(_bound)
        if lo is not None and hi is not None and lo > hi:
            lo, hi = hi, lo
        entries.append(FeedbackLibraryEntry(
            id=f"f{i}",
            assessment_id="A",
            dimension_id=draw(st.sampled_from(["D1", "D2"])),
            type=draw(st.sampled_from([FeedbackType.OVERALL, FeedbackType.SPECIFIC])),
            feedback=f"text {i}",
            min_score=lo,
            max_score=hi,
        ))
    return entries


_scores = st.lists(
    st.builds(
        DimensionScore,
        dimension_id=st.sampled_from(["D1", "D2", None]),
        score=_score,
    ),
    max_size=6,
)


# ── Survey aggregation ────────────────────────────────────────────────────────

@given(assignment_rows())
def test_aggregation_deterministic(rows):
    assert aggregate_surveys(rows) == aggregate_surveys(list(rows))


@given(assignment_rows())
def test_first_created_is_minimum(rows):
    for summary in aggregate_surveys(rows):
        group = [
            r.created_at for r in rows
            if r.survey_id == summary.survey_id and r.assessment_id == summary.assessment_id
        ]
        assert summary.first_created_at == min(group)


@given(assignment_rows())
def test_counts_consistent(rows):
    summaries = aggregate_surveys(rows)
    assert sum(s.total_assignments for s in summaries) == sum(1 for r in rows if r.survey_id)
    assert sum(s.completed_assignments for s in summaries) == sum(
        1 for r in rows if r.survey_id and r.completed
    )
    for s in summaries:
        assert 0 <= s.completed_assignments <= s.total_assignments
        assert 0 <= s.completion_percent <= 100


@given(assignment_rows())
def test_orphans_never_counted(rows):
    with_survey = [r for r in rows if r.survey_id]
    assert aggregate_surveys(rows) == aggregate_surveys(with_survey)


@given(assignment_rows())
def test_ordering_most_recent_first(rows):
    dates = [s.first_created_at for s in aggregate_surveys(rows)]
    assert dates == sorted(dates, reverse=True)


@given(st.integers(min_value=1, max_value=500), st.data())
def test_completion_monotonic(total, data):
    a = data.draw(st.integers(min_value=0, max_value=total))
    b = data.draw(st.integers(min_value=a, max_value=total))
    assert completion_percent(a, total) <= completion_percent(b, total)


# ── Feedback assignment ───────────────────────────────────────────────────────

@given(library_entries(), _scores)
def test_specific_always_eligible(entries, scores):
    result = assign_feedback(scores, InMemoryFeedbackLibrary(entries), "A")
    by_id = {e.id: e for e in entries}
    score_of = {}
    for s in scores:
        if s.dimension_id:
            score_of.setdefault(s.dimension_id, []).append(s.score)

    for assigned in result:
        chosen = by_id[assigned.feedback_id]
        assert chosen.dimension_id == assigned.dimension_id
        assert any(
            score_in_range(score, chosen.min_score, chosen.max_score)
            for score in score_of[assigned.dimension_id]
        )


@given(library_entries(), _score)
def test_at_most_one_specific(entries, score):
    scores = [DimensionScore(dimension_id="D1", score=score)]
    result = assign_feedback(scores, InMemoryFeedbackLibrary(entries), "A")
    specific = [a for a in result if a.type == AssignedFeedbackType.SPECIFIC]
    overall = [a for a in result if a.type == AssignedFeedbackType.OVERALL]
    assert len(specific) <= 1
    assert len(overall) <= 1

    library = InMemoryFeedbackLibrary(entries)
    has_eligible = bool(eligible_entries(score, library.get_specific_feedback("A", "D1")))
    assert bool(specific) == has_eligible


@given(library_entries(), _score, st.integers(min_value=0, max_value=20))
def test_selector_index_respected(entries, score, index):
    library = InMemoryFeedbackLibrary(entries)
    eligible = eligible_entries(score, library.get_specific_feedback("A", "D1"))

    def pick(candidates):
        return candidates[index % len(candidates)]

    result = assign_feedback(
        [DimensionScore(dimension_id="D1", score=score)], library, "A", selector=pick
    )
    specific = [a.feedback_id for a in result if a.type == AssignedFeedbackType.SPECIFIC]
    if eligible:
        assert specific == [eligible[index % len(eligible)].id]
    else:
        assert specific == []


@given(library_entries(), st.lists(_score, max_size=5))
def test_unmapped_dimensions_skipped(entries, raw_scores):
    scores = [DimensionScore(dimension_id=None, score=s) for s in raw_scores]
    assert assign_feedback(scores, InMemoryFeedbackLibrary(entries), "A") == []


@given(st.integers(min_value=0, max_value=100))
def test_bounds_inclusive(edge):
    assert score_in_range(float(edge), float(edge), float(edge))
    assert score_in_range(float(edge), None, float(edge))
    assert score_in_range(float(edge), float(edge), None)
