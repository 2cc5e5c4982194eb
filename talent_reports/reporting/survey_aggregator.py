"""Survey Aggregator.

Groups raw assignment rows into surveys (one assessment administered to one
population on one occasion) and computes completion statistics.

Rules
-----
  group key          = (survey_id, assessment_id)
  first_created_at   = min(created_at) over the group  (earliest wins)
  total_assignments  = |group|
  completed          = |{a in group : a.completed}|
  ordering           = first_created_at descending

Rows without a survey id are orphans and never counted. Summaries are
recomputed on every call; nothing here is cached.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from talent_reports.models import Assignment, SurveySubject, SurveySummary

logger = structlog.get_logger(__name__)


@dataclass
class _SurveyGroup:
    """Running totals for one (survey_id, assessment_id) group."""

    survey_id: str
    assessment_id: str
    first_created_at: datetime
    assessment_title: Optional[str] = None
    total: int = 0
    completed: int = 0

    def add(self, assignment: Assignment) -> None:
        self.total += 1
        if assignment.completed:
            self.completed += 1
        if assignment.created_at < self.first_created_at:
            self.first_created_at = assignment.created_at
        if self.assessment_title is None:
            self.assessment_title = assignment.assessment_title

    def to_summary(self) -> SurveySummary:
        return SurveySummary(
            survey_id=self.survey_id,
            assessment_id=self.assessment_id,
            assessment_title=self.assessment_title,
            first_created_at=self.first_created_at,
            total_assignments=self.total,
            completed_assignments=self.completed,
        )


def aggregate_surveys(
    assignments: Iterable[Assignment],
    assessment_id: Optional[str] = None,
) -> List[SurveySummary]:
    """Build survey summaries from a population's assignments.

    Args:
        assignments: Assignment rows for one population (e.g. a client's users).
        assessment_id: If given, only surveys of this assessment are returned.

    Returns:
        One SurveySummary per (survey_id, assessment_id), most recent first.
    """
    groups: Dict[Tuple[str, str], _SurveyGroup] = {}
    orphans = 0

    for assignment in assignments:
        if not assignment.survey_id:
            orphans += 1
            continue
        if assessment_id is not None and assignment.assessment_id != assessment_id:
            continue

        key = (assignment.survey_id, assignment.assessment_id)
        group = groups.get(key)
        if group is None:
            group = _SurveyGroup(
                survey_id=assignment.survey_id,
                assessment_id=assignment.assessment_id,
                first_created_at=assignment.created_at,
            )
            groups[key] = group
        group.add(assignment)

    summaries = [g.to_summary() for g in groups.values()]
    summaries.sort(key=lambda s: s.first_created_at, reverse=True)

    logger.info(
        "surveys_aggregated",
        surveys=len(summaries),
        orphaned_assignments=orphans,
        assessment_filter=assessment_id,
    )
    return summaries


@dataclass
class _SubjectGroup:
    target_id: str
    assignment_ids: List[str] = field(default_factory=list)
    completed: int = 0


def summarize_subjects(assignments: Iterable[Assignment]) -> List[SurveySubject]:
    """Group one survey's assignments by the subject they rate.

    Assignments without a target are skipped. Subjects keep the order in
    which they first appear.
    """
    subjects: Dict[str, _SubjectGroup] = {}
    for assignment in assignments:
        if not assignment.target_id:
            continue
        group = subjects.setdefault(
            assignment.target_id, _SubjectGroup(target_id=assignment.target_id)
        )
        group.assignment_ids.append(assignment.id)
        if assignment.completed:
            group.completed += 1

    return [
        SurveySubject(
            target_id=g.target_id,
            assignment_count=len(g.assignment_ids),
            completed_count=g.completed,
            assignment_ids=list(g.assignment_ids),
        )
        for g in subjects.values()
    ]
