from fastapi import APIRouter, HTTPException
from loguru import logger

from vibecore.core.config import settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.profile import UserProfile
from vibecore.models.requests import LibrarySnapshot, RecommendationRequest
from vibecore.models.scoring import ContextualRecommendation, RecommendationResult
from vibecore.services.profile.builder import ProfileBuilder
from vibecore.services.recommendation.engine import RecommendationPipeline

router = APIRouter(tags=["recommendations"])


def get_pipeline() -> RecommendationPipeline:
    return RecommendationPipeline(settings)


@router.post("/profile", response_model=UserProfile, response_model_by_alias=True)
def build_profile(payload: LibrarySnapshot) -> UserProfile:
    return ProfileBuilder(settings=settings).build_profile(payload.history, payload.favorites)


@router.post("/recommendations", response_model=RecommendationResult, response_model_by_alias=True)
def recommend(payload: RecommendationRequest) -> RecommendationResult:
    """
    Rank the candidate pool for the caller's history and situation.

    Sync handler: FastAPI runs it in the threadpool, keeping the CPU-bound
    scoring off the event loop.
    """
    try:
        return get_pipeline().recommend(
            payload.history,
            payload.favorites,
            payload.candidates,
            available_minutes=payload.available_minutes,
            max_results=payload.max_results,
            hour_of_day=payload.hour_of_day,
            situation=payload.situation,
            device=payload.device,
        )
    except InvalidRequestError as e:
        logger.warning(f"Rejected recommendation request: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/recommendations/contextual",
    response_model=list[ContextualRecommendation],
    response_model_by_alias=True,
)
def recommend_contextual(payload: RecommendationRequest) -> list[ContextualRecommendation]:
    try:
        return get_pipeline().contextual(
            payload.history,
            payload.favorites,
            payload.candidates,
            available_minutes=payload.available_minutes,
            max_results=payload.max_results,
            hour_of_day=payload.hour_of_day,
            situation=payload.situation,
            device=payload.device,
        )
    except InvalidRequestError as e:
        logger.warning(f"Rejected contextual request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
