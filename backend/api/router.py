import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from supabase import Client

from api.dependencies import get_db_client, get_entity_extractor
from config import settings
from models.responses import ErrorResponse, ExtractionResponse
from models.schemas.candidate_comparison import CandidateComparison
from services import candidate_comparison, fallback_extractor
from services.entity_extractor import EntityExtractor
from services.errors import AssessmentNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _bad_request(details: str) -> HTTPException:
    return HTTPException(status_code=400, detail={"error": "Invalid request body", "details": details})


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "database_configured": bool(settings.supabase_url and settings.supabase_key),
    }


@router.post("/search/extract", responses={400: {"model": ErrorResponse}})
@limiter.limit(settings.extract_rate_limit)
async def extract(
    request: Request,
    extractor: EntityExtractor = Depends(get_entity_extractor),
):
    # Parsed by hand so malformed bodies get the same error shape as a bad query
    try:
        body = await request.json()
    except ValueError:
        body = None
    query = body.get("query") if isinstance(body, dict) else None
    if not isinstance(query, str):
        raise _bad_request("query must be a string")

    if len(query) > settings.max_query_length:
        raise _bad_request(f"query too long (max {settings.max_query_length} chars)")

    result = await extractor.extract_entities(query)
    if result.success:
        response = ExtractionResponse(
            intent=result.intent,
            archetype=result.archetype,
            seniority=result.seniority,
            processing_time_ms=result.processing_time_ms,
        )
    else:
        logger.warning("Gemini extraction failed (%s), using fallback parser", result.error)
        fallback = fallback_extractor.extract_fallback_entities(query)
        response = ExtractionResponse(
            intent=fallback.intent,
            archetype=fallback.archetype,
            seniority=fallback.seniority,
            processing_time_ms=result.processing_time_ms,
            fallback=True,
        )
    content = response.model_dump(mode="json", by_alias=True)
    if response.fallback is None:
        content.pop("fallback")
    return content


@router.get(
    "/recruiter/candidates/compare",
    response_model=list[CandidateComparison],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def compare(
    assessment_ids: str | None = Query(default=None, alias="assessmentIds"),
    db: Client | None = Depends(get_db_client),
):
    if not assessment_ids:
        raise HTTPException(status_code=400, detail="assessmentIds query parameter is required")

    ids = [aid.strip() for aid in assessment_ids.split(",") if aid.strip()]
    if not ids:
        raise HTTPException(status_code=400, detail="At least one assessmentId is required")
    if len(ids) > candidate_comparison.MAX_COMPARE:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {candidate_comparison.MAX_COMPARE} assessmentIds allowed for comparison",
        )

    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    try:
        return candidate_comparison.compare_candidates(db, ids)
    except AssessmentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
