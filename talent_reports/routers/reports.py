"""Report endpoints: feedback assignment and persisted report records."""
from fastapi import APIRouter, Query, status
from talent_reports.config import get_settings
from talent_reports.models import (
    QualitativeFeedback,
    ReportGenerationResponse,
    ReportRecord,
)
from talent_reports.reporting.qualitative import aggregate_360_feedback
from talent_reports.reporting.report_service import ReportService
from talent_reports.services import get_snowflake_service, get_redis_cache, CacheKeys

router = APIRouter(prefix="/api/v1/reports", tags=["Reports"])


@router.post(
    "/{assignment_id}/feedback",
    response_model=ReportGenerationResponse,
    status_code=status.HTTP_200_OK,
    summary="Assign Report Feedback"
)
async def assign_report_feedback(
    assignment_id: str,
    force: bool = Query(False, description="Redraw library feedback even if already assigned"),
):
    """Generate a completed assignment's report (scores, norms, feedback) and persist it."""
    service = ReportService(get_snowflake_service(), cache=get_redis_cache())
    return service.generate(assignment_id, force=force)


@router.get(
    "/{assignment_id}",
    response_model=ReportRecord,
    summary="Get Report"
)
async def get_report(assignment_id: str):
    """Get the persisted report feedback for an assignment."""
    cache = get_redis_cache()
    settings = get_settings()
    cache_key = CacheKeys.report(assignment_id)

    cached = cache.get(cache_key, ReportRecord)
    if cached:
        return cached

    record = ReportService(get_snowflake_service()).get_report(assignment_id)
    cache.set(cache_key, record, settings.cache_ttl_report)
    return record


@router.get(
    "/360/{target_id}/feedback",
    response_model=list[QualitativeFeedback],
    summary="Get 360 Qualitative Feedback"
)
async def get_360_feedback(target_id: str):
    """Raters' free-text feedback about one subject, grouped by dimension."""
    return aggregate_360_feedback(target_id, get_snowflake_service())
