from fastapi import APIRouter, Request
from visits_app.schemas.visit import DetectHeaders, DetectResponse
from visits_app.services.classifier import classify

router = APIRouter(tags=["detect"])


@router.get("/detect", response_model=DetectResponse, response_model_exclude_none=True)
def detect_visitor(request: Request):
    """Classify the caller from its own request headers (nothing is recorded)"""
    user_agent = request.headers.get("user-agent", "")
    accept = request.headers.get("accept", "")
    host = request.headers.get("host") or "unknown"

    classification = classify(user_agent, accept, host)

    return DetectResponse(
        category=classification.category,
        agent=classification.agent,
        filtered=True if classification.filtered else None,
        headers=DetectHeaders(user_agent=user_agent, accept=accept),
    )
