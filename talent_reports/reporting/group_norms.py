"""Report scores: dimension results, group norms and the overall score.

  group norm(d)        = mean of every group member's score on d
                         (no entry when nobody in the group scored d)
  improvement_needed   = target < benchmark  or  target < group norm
                         (a missing comparison never triggers it)
  overall_score        = mean of the dimension target scores

Norms are a snapshot taken when the report is generated.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from talent_reports.models import DimensionResult, DimensionScore, GroupNorm

logger = structlog.get_logger(__name__)


def dimension_ids_of(scores: Iterable[DimensionScore]) -> List[str]:
    """Distinct dimension ids in first-seen order; null dimensions dropped."""
    seen: Dict[str, None] = {}
    for s in scores:
        if s.dimension_id:
            seen.setdefault(s.dimension_id, None)
    return list(seen)


def calculate_group_norms(
    scores_by_assignment: Mapping[str, Iterable[DimensionScore]],
    dimension_ids: Sequence[str],
) -> Dict[str, GroupNorm]:
    """Average score per dimension over a group's completed assignments.

    Args:
        scores_by_assignment: Dimension scores keyed by assignment id.
        dimension_ids: Dimensions to compute norms for.

    Returns:
        dimension_id -> GroupNorm, in ``dimension_ids`` order. Dimensions
        nobody scored are absent; an empty group gives an empty dict.
    """
    if not dimension_ids or not scores_by_assignment:
        return {}

    wanted = set(dimension_ids)
    collected: Dict[str, List[float]] = {}
    for scores in scores_by_assignment.values():
        for s in scores:
            if s.dimension_id in wanted:
                collected.setdefault(s.dimension_id, []).append(s.score)

    norms: Dict[str, GroupNorm] = {}
    for dimension_id in dimension_ids:
        values = collected.get(dimension_id)
        if not values:
            continue
        norms[dimension_id] = GroupNorm(
            dimension_id=dimension_id,
            avg_score=sum(values) / len(values),
            participant_count=len(values),
        )
    return norms


def build_dimension_results(
    target_scores: Mapping[str, float],
    benchmarks: Mapping[str, float],
    norms: Mapping[str, GroupNorm],
) -> List[DimensionResult]:
    """Combine target scores with benchmarks and norms, in target order."""
    results = []
    for dimension_id, target in target_scores.items():
        benchmark = benchmarks.get(dimension_id)
        norm = norms.get(dimension_id)
        improvement_needed = (benchmark is not None and target < benchmark) or (
            norm is not None and target < norm.avg_score
        )
        results.append(DimensionResult(
            dimension_id=dimension_id,
            target_score=target,
            industry_benchmark=benchmark,
            group_norm=norm.avg_score if norm else None,
            group_norm_participant_count=norm.participant_count if norm else 0,
            improvement_needed=improvement_needed,
        ))
    return results


def overall_score(results: Sequence[DimensionResult]) -> Optional[float]:
    """Mean of the dimension target scores; None when nothing was scored."""
    if not results:
        return None
    return sum(r.target_score for r in results) / len(results)


def own_target_scores(scores: Iterable[DimensionScore]) -> Dict[str, float]:
    """One respondent's scores keyed by dimension (first score per dimension wins)."""
    targets: Dict[str, float] = {}
    for s in scores:
        if s.dimension_id:
            targets.setdefault(s.dimension_id, s.score)
    return targets


def rater_target_scores(
    rater_scores: Mapping[str, Iterable[DimensionScore]],
) -> Dict[str, float]:
    """A 360 subject's score per dimension: the mean over all completed raters."""
    all_scores = [s for scores in rater_scores.values() for s in scores]
    norms = calculate_group_norms(rater_scores, dimension_ids_of(all_scores))
    return {d: n.avg_score for d, n in norms.items()}


def score_report(
    target_scores: Mapping[str, float],
    benchmarks: Mapping[str, float],
    group_scores: Mapping[str, Iterable[DimensionScore]],
) -> List[DimensionResult]:
    """Dimension results for a report, logging the norm snapshot."""
    dimension_ids = list(target_scores)
    norms = calculate_group_norms(group_scores, dimension_ids)
    results = build_dimension_results(target_scores, benchmarks, norms)

    logger.info(
        "report_scored",
        dimensions=len(results),
        benchmarked=sum(1 for r in results if r.industry_benchmark is not None),
        normed=len(norms),
        group_size=len(group_scores),
        improvement_needed=sum(1 for r in results if r.improvement_needed),
    )
    return results
