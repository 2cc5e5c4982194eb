"""Report generation for one completed assignment.

Dispatches to the Qualitative Aggregator (360 assessments with a target) or
the Feedback Assignment Engine (library-based assessments), scores every
dimension against its industry benchmark and group norm, then persists the
whole record on the assignment's report row.

Library feedback is drawn at random, so once a report holds library
feedback it is reused unless regeneration is forced. 360 text is
deterministic and is rebuilt on every run so newly completed raters show up.
Scores and norms are recomputed on every run.
"""
from typing import Dict, List, Optional, Protocol

import structlog

from talent_reports.errors import (
    AssignmentNotCompletedError,
    AssignmentNotFoundError,
    Invalid360AssignmentError,
    ReportNotFoundError,
)
from talent_reports.models import (
    AssignedFeedbackType,
    Assignment,
    DimensionResult,
    DimensionScore,
    QualitativeFeedback,
    ReportFeedbackAssignment,
    ReportGenerationResponse,
    ReportRecord,
)
from talent_reports.reporting.feedback_engine import (
    FeedbackAssignmentEngine,
    FeedbackLibrary,
    Selector,
)
from talent_reports.reporting.group_norms import (
    overall_score,
    own_target_scores,
    rater_target_scores,
    score_report,
)
from talent_reports.reporting.qualitative import RaterAnswerStore, aggregate_360_feedback
from talent_reports.services.redis_cache import CacheKeys

logger = structlog.get_logger(__name__)


class ReportStore(FeedbackLibrary, RaterAnswerStore, Protocol):
    """Everything report generation reads and writes."""

    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        ...

    def get_dimension_scores(self, assignment_id: str) -> List[DimensionScore]:
        ...

    def get_scores_for_assignments(
        self, assignment_ids: List[str]
    ) -> Dict[str, List[DimensionScore]]:
        ...

    def get_group_scores(self, assignment: Assignment) -> Dict[str, List[DimensionScore]]:
        ...

    def get_benchmarks(self, dimension_ids: List[str]) -> Dict[str, float]:
        ...

    def ensure_report_table(self) -> None:
        ...

    def get_report(self, assignment_id: str) -> Optional[ReportRecord]:
        ...

    def save_report(self, record: ReportRecord) -> ReportRecord:
        ...


class ReportCache(Protocol):
    def delete(self, key: str) -> bool:
        ...


def qualitative_to_assignments(
    feedback: List[QualitativeFeedback],
) -> List[ReportFeedbackAssignment]:
    """Wrap 360 text groups as report feedback entries."""
    return [
        ReportFeedbackAssignment(
            dimension_id=f.dimension_id,
            feedback_content=f.feedback,
            type=AssignedFeedbackType.TEXT_360,
        )
        for f in feedback
    ]


class ReportService:
    """Compute and persist reports for completed assignments.

    Parameters
    ----------
    store:
        Snowflake store (or an in-memory stand-in in tests).
    selector:
        Specific-feedback selector passed to the engine.
    cache:
        Report cache; its entry is dropped whenever a report is saved.
    """

    def __init__(
        self,
        store: ReportStore,
        selector: Optional[Selector] = None,
        cache: Optional[ReportCache] = None,
    ) -> None:
        self.store = store
        self.selector = selector
        self.cache = cache

    def _load_completed(self, assignment_id: str) -> Assignment:
        assignment = self.store.get_assignment(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        if not assignment.completed:
            raise AssignmentNotCompletedError(assignment_id)
        if assignment.is_360 and not assignment.target_id:
            raise Invalid360AssignmentError(assignment_id)
        return assignment

    def _rater_ids(self, assignment: Assignment) -> List[str]:
        raters = self.store.get_completed_assignments_for_target(assignment.target_id)
        return [
            a.id for a in raters
            if a.completed and a.assessment_id == assignment.assessment_id
        ]

    def compute_feedback(self, assignment: Assignment) -> List[ReportFeedbackAssignment]:
        """Feedback for one assignment, without touching the report table."""
        if assignment.is_360:
            feedback = aggregate_360_feedback(assignment.target_id, self.store)
            return qualitative_to_assignments(feedback)

        scores = self.store.get_dimension_scores(assignment.id)
        engine = FeedbackAssignmentEngine(self.store, selector=self.selector)
        return engine.assign(assignment.assessment_id, scores).assignments

    def compute_scores(self, assignment: Assignment) -> List[DimensionResult]:
        """Per-dimension score block: target, benchmark, group norm."""
        if assignment.is_360:
            rater_ids = self._rater_ids(assignment)
            rater_scores = self.store.get_scores_for_assignments(rater_ids) if rater_ids else {}
            targets = rater_target_scores(rater_scores)
        else:
            targets = own_target_scores(self.store.get_dimension_scores(assignment.id))

        if not targets:
            return []
        benchmarks = self.store.get_benchmarks(list(targets))
        group_scores = self.store.get_group_scores(assignment)
        return score_report(targets, benchmarks, group_scores)

    def generate(self, assignment_id: str, force: bool = False) -> ReportGenerationResponse:
        """Generate (or refresh) the report for a completed assignment.

        Args:
            assignment_id: The completed assignment.
            force: Redraw library feedback even when some is already stored.

        Raises:
            AssignmentNotFoundError: unknown assignment.
            AssignmentNotCompletedError: assignment still in progress.
            Invalid360AssignmentError: 360 assignment without a target.
            MissingSchemaError: report table not provisioned.
        """
        assignment = self._load_completed(assignment_id)
        self.store.ensure_report_table()

        existing = None
        if not force and not assignment.is_360:
            existing = self.store.get_report(assignment_id)
        reused = existing is not None and bool(existing.feedback_assigned)

        if reused:
            feedback = list(existing.feedback_assigned)
            logger.info("report_feedback_reused", assignment_id=assignment_id, count=len(feedback))
        else:
            feedback = self.compute_feedback(assignment)

        dimension_results = self.compute_scores(assignment)
        record = self.store.save_report(ReportRecord(
            assignment_id=assignment_id,
            overall_score=overall_score(dimension_results),
            dimension_scores=dimension_results,
            feedback_assigned=feedback,
        ))
        if self.cache is not None:
            self.cache.delete(CacheKeys.report(assignment_id))

        logger.info(
            "report_generated",
            assignment_id=assignment_id,
            assessment_id=assignment.assessment_id,
            is_360=assignment.is_360,
            count=len(feedback),
            dimensions=len(dimension_results),
            overall_score=record.overall_score,
            feedback_redrawn=not reused,
            forced=force,
        )
        return ReportGenerationResponse(
            assignment_id=assignment_id,
            regenerated=not reused,
            count=len(feedback),
            report=record,
        )

    def get_report(self, assignment_id: str) -> ReportRecord:
        """Persisted report for an assignment."""
        self.store.ensure_report_table()
        record = self.store.get_report(assignment_id)
        if record is None:
            raise ReportNotFoundError(assignment_id)
        return record
