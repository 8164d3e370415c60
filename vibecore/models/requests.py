from pydantic import Field

from vibecore.models.base import Record
from vibecore.models.context import DeviceContext, Situation
from vibecore.models.interaction import CandidateItem, FavoriteRecord, InteractionRecord


class LibrarySnapshot(Record):
    """History and favorites handed in by the caller."""

    history: list[InteractionRecord] = Field(default_factory=list)
    favorites: list[FavoriteRecord] = Field(default_factory=list)


class RecommendationRequest(LibrarySnapshot):
    candidates: list[CandidateItem] = Field(default_factory=list)
    available_minutes: int = Field(ge=0)
    max_results: int | None = Field(default=None, ge=0)
    hour_of_day: int | None = Field(default=None, ge=0, le=23)
    situation: Situation | None = None
    device: DeviceContext | None = None


class ClusterRequest(LibrarySnapshot):
    k: int | None = Field(default=None, ge=1)
