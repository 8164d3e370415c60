from fastapi import APIRouter, HTTPException
from loguru import logger

from vibecore.core.config import settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.cluster import ContentCluster, OrganizationSuggestion, SmartPlaylistSuggestion
from vibecore.models.requests import ClusterRequest, LibrarySnapshot
from vibecore.services.organization.organizer import ContentOrganizer

router = APIRouter(tags=["organization"])


@router.post("/clusters", response_model=list[ContentCluster], response_model_by_alias=True)
def cluster_library(payload: ClusterRequest) -> list[ContentCluster]:
    try:
        return ContentOrganizer(settings).organize(payload.history, payload.favorites, payload.k)
    except InvalidRequestError as e:
        logger.warning(f"Rejected cluster request: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/playlists/suggestions",
    response_model=list[SmartPlaylistSuggestion],
    response_model_by_alias=True,
)
def suggest_playlists(payload: LibrarySnapshot) -> list[SmartPlaylistSuggestion]:
    return ContentOrganizer(settings).smart_playlists(payload.history, payload.favorites)


@router.post(
    "/organization/suggestions",
    response_model=list[OrganizationSuggestion],
    response_model_by_alias=True,
)
def suggest_organization(payload: LibrarySnapshot) -> list[OrganizationSuggestion]:
    return ContentOrganizer(settings).organization_suggestions(payload.favorites)
