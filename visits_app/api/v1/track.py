from fastapi import APIRouter, Depends
from visits_app.schemas.visit import TrackRequest, TrackResponse
from visits_app.services.ingestion_service import IngestionService
from visits_app.dependencies import get_ingestion_service

router = APIRouter(tags=["ingestion"])


@router.post("/track", response_model=TrackResponse, response_model_exclude_none=True)
async def track_visit(
    submission: TrackRequest,
    ingestion: IngestionService = Depends(get_ingestion_service)
):
    """
    Record a page view reported by a docs site.

    Non page views (e.g. Accept: application/json) are acknowledged with
    skipped="not-page-view" and nothing is written.
    """
    return await ingestion.track(submission)
