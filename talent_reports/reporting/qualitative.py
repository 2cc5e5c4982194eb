"""Qualitative Feedback Aggregator for 360-style assessments.

Collects every completed rater's free-text answers about one subject and
joins them per dimension. A null dimension is a group of its own (general
comments). Rater identity is not carried into the output.
"""
from typing import Dict, Iterable, List, Optional, Protocol

import structlog

from talent_reports.models import (
    Assignment,
    FieldType,
    QualitativeFeedback,
    RATER_TEXT_SEPARATOR,
    TextAnswer,
)

logger = structlog.get_logger(__name__)


class RaterAnswerStore(Protocol):
    """Reads needed to aggregate 360 feedback for one subject."""

    def get_completed_assignments_for_target(self, target_id: str) -> List[Assignment]:
        ...

    def get_text_answers(self, assignment_ids: List[str]) -> List[TextAnswer]:
        ...


def group_text_answers(answers: Iterable[TextAnswer]) -> List[QualitativeFeedback]:
    """Join text-input answers per dimension, in retrieval order.

    Groups appear in the order their dimension is first seen. Answers of
    any other field type are ignored.
    """
    by_dimension: Dict[Optional[str], List[str]] = {}
    for answer in answers:
        if answer.field_type != FieldType.TEXT_INPUT:
            continue
        by_dimension.setdefault(answer.dimension_id, []).append(answer.value)

    return [
        QualitativeFeedback(
            dimension_id=dimension_id,
            feedback=RATER_TEXT_SEPARATOR.join(texts),
        )
        for dimension_id, texts in by_dimension.items()
    ]


def aggregate_360_feedback(target_id: str, store: RaterAnswerStore) -> List[QualitativeFeedback]:
    """Aggregate all completed raters' free text about ``target_id``.

    Returns an empty list when the subject has no completed raters or no
    text answers. Store errors propagate.
    """
    rater_assignments = store.get_completed_assignments_for_target(target_id)
    # Only completed raters count
    rater_ids = [a.id for a in rater_assignments if a.completed]
    if not rater_ids:
        logger.info("qualitative_feedback_aggregated", target_id=target_id, raters=0, groups=0)
        return []

    answers = store.get_text_answers(rater_ids)
    feedback = group_text_answers(answers)

    logger.info(
        "qualitative_feedback_aggregated",
        target_id=target_id,
        raters=len(rater_ids),
        answers=len(answers),
        groups=len(feedback),
    )
    return feedback
