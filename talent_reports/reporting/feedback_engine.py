"""Feedback Assignment Engine.

Chooses library feedback for each scored dimension of a completed
assignment.

Per dimension score s (dimensions with no id are skipped)
---------------------------------------------------------
  overall   : the (assessment, dimension) overall entry, emitted when
              min_score <= s <= max_score  (null bound = unbounded)
  specific  : exactly one entry drawn by the selector from the eligible
              specific entries; nothing when none is eligible

The random draw is the one intentional source of non-determinism. It goes
through an injected ``selector`` so tests can pin it; callers that need a
stable report persist the result once (see ``ReportService``).
"""
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import structlog

from talent_reports.models import (
    AssignedFeedbackType,
    DimensionScore,
    FeedbackLibraryEntry,
    FeedbackType,
    ReportFeedbackAssignment,
)
from talent_reports.reporting.utils import score_in_range

logger = structlog.get_logger(__name__)

Selector = Callable[[Sequence[FeedbackLibraryEntry]], FeedbackLibraryEntry]


class FeedbackLibrary(Protocol):
    """Lookup of feedback-library entries by (assessment, dimension, type)."""

    def get_overall_feedback(
        self, assessment_id: str, dimension_id: str
    ) -> Optional[FeedbackLibraryEntry]:
        ...

    def get_specific_feedback(
        self, assessment_id: str, dimension_id: str
    ) -> List[FeedbackLibraryEntry]:
        ...


class InMemoryFeedbackLibrary:
    """FeedbackLibrary over already-fetched entries.

    When several overall entries exist for one (assessment, dimension) the
    first one supplied wins; uniqueness is the library store's concern.
    """

    def __init__(self, entries: Iterable[FeedbackLibraryEntry]):
        self._overall: Dict[Tuple[str, str], FeedbackLibraryEntry] = {}
        self._specific: Dict[Tuple[str, str], List[FeedbackLibraryEntry]] = {}
        for entry in entries:
            key = (entry.assessment_id, entry.dimension_id)
            if entry.type == FeedbackType.OVERALL:
                self._overall.setdefault(key, entry)
            else:
                self._specific.setdefault(key, []).append(entry)

    def get_overall_feedback(
        self, assessment_id: str, dimension_id: str
    ) -> Optional[FeedbackLibraryEntry]:
        return self._overall.get((assessment_id, dimension_id))

    def get_specific_feedback(
        self, assessment_id: str, dimension_id: str
    ) -> List[FeedbackLibraryEntry]:
        return list(self._specific.get((assessment_id, dimension_id), []))


def random_selector(entries: Sequence[FeedbackLibraryEntry]) -> FeedbackLibraryEntry:
    """Uniform random choice; the production selector."""
    return random.choice(entries)


def eligible_entries(
    score: float, entries: Iterable[FeedbackLibraryEntry]
) -> List[FeedbackLibraryEntry]:
    """Entries whose score window contains ``score``, in library order."""
    return [e for e in entries if score_in_range(score, e.min_score, e.max_score)]


@dataclass
class FeedbackAssignmentResult:
    """Feedback chosen for one assignment, with counters for the audit log."""

    assessment_id: str
    assignments: List[ReportFeedbackAssignment] = field(default_factory=list)
    skipped_dimensions: int = 0
    dimensions_without_specific: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "assessment_id": self.assessment_id,
            "assigned": len(self.assignments),
            "overall": sum(
                1 for a in self.assignments if a.type == AssignedFeedbackType.OVERALL
            ),
            "specific": sum(
                1 for a in self.assignments if a.type == AssignedFeedbackType.SPECIFIC
            ),
            "skipped_dimensions": self.skipped_dimensions,
            "dimensions_without_specific": list(self.dimensions_without_specific),
        }


class FeedbackAssignmentEngine:
    """Assign overall and specific library feedback to dimension scores.

    Parameters
    ----------
    library:
        Feedback-library lookup (``InMemoryFeedbackLibrary`` or a store).
    selector:
        Picks one entry from a non-empty list. Defaults to a uniform random
        choice; tests pass a deterministic one.
    """

    def __init__(self, library: FeedbackLibrary, selector: Optional[Selector] = None) -> None:
        self.library = library
        self.selector: Selector = selector or random_selector

    def assign(
        self, assessment_id: str, scores: Iterable[DimensionScore]
    ) -> FeedbackAssignmentResult:
        """Assign feedback for every scored dimension.

        Args:
            assessment_id: Assessment whose library is consulted.
            scores: One score per dimension of the assignment.

        Returns:
            FeedbackAssignmentResult; its ``assignments`` list is empty when
            there are no scores or nothing is eligible.
        """
        result = FeedbackAssignmentResult(assessment_id=assessment_id)

        for dim_score in scores:
            if not dim_score.dimension_id:
                result.skipped_dimensions += 1
                continue
            dimension_id = dim_score.dimension_id

            overall = self.library.get_overall_feedback(assessment_id, dimension_id)
            if overall is not None and score_in_range(
                dim_score.score, overall.min_score, overall.max_score
            ):
                result.assignments.append(
                    _to_assignment(dimension_id, overall, AssignedFeedbackType.OVERALL)
                )

            candidates = self.library.get_specific_feedback(assessment_id, dimension_id)
            eligible = eligible_entries(dim_score.score, candidates)
            if not eligible:
                result.dimensions_without_specific.append(dimension_id)
                continue

            selected = self.selector(eligible)
            if selected not in eligible:
                raise ValueError(
                    f"Selector returned feedback {getattr(selected, 'id', selected)!r} "
                    f"outside the eligible set for dimension {dimension_id}"
                )
            result.assignments.append(
                _to_assignment(dimension_id, selected, AssignedFeedbackType.SPECIFIC)
            )

        logger.info("feedback_assigned", **result.to_dict())
        return result


def _to_assignment(
    dimension_id: str,
    entry: FeedbackLibraryEntry,
    kind: AssignedFeedbackType,
) -> ReportFeedbackAssignment:
    return ReportFeedbackAssignment(
        dimension_id=dimension_id,
        feedback_id=entry.id,
        feedback_content=entry.feedback,
        type=kind,
    )


def assign_feedback(
    scores: Iterable[DimensionScore],
    library: FeedbackLibrary,
    assessment_id: str,
    selector: Optional[Selector] = None,
) -> List[ReportFeedbackAssignment]:
    """Functional entry point: the feedback assignments for one assignment's scores."""
    engine = FeedbackAssignmentEngine(library, selector=selector)
    return engine.assign(assessment_id, scores).assignments
