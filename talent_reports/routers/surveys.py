"""Client survey endpoints."""
from typing import Optional
from fastapi import APIRouter, HTTPException, Query, status
from talent_reports.models import SurveySubject, SurveySummary
from talent_reports.reporting.survey_aggregator import aggregate_surveys, summarize_subjects
from talent_reports.services import get_snowflake_service

router = APIRouter(prefix="/api/v1/clients", tags=["Surveys"])


@router.get(
    "/{client_id}/surveys",
    response_model=list[SurveySummary],
    summary="List Client Surveys"
)
async def list_client_surveys(
    client_id: str,
    assessment_id: Optional[str] = Query(None, description="Only surveys of this assessment"),
):
    """Survey completion summaries for a client's users, most recent first."""
    db = get_snowflake_service()
    assignments = db.get_client_survey_assignments(client_id, assessment_id)
    return aggregate_surveys(assignments, assessment_id)


@router.get(
    "/{client_id}/surveys/{survey_id}/subjects",
    response_model=list[SurveySubject],
    summary="List Survey Subjects"
)
async def list_survey_subjects(client_id: str, survey_id: str):
    """Subjects rated in a survey, with per-subject assignment counts."""
    db = get_snowflake_service()
    assignments = db.get_survey_assignments(client_id, survey_id)
    if not assignments:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Survey {survey_id} not found for client {client_id}"
        )
    return summarize_subjects(assignments)
