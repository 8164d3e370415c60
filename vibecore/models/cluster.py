from pydantic import Field

from vibecore.models.base import Record


class FeatureVector(Record):
    """
    Fixed-length numeric encoding of one video.

    ``category`` rides along for cluster naming and never enters distance
    computation.
    """

    video_id: str
    features: tuple[float, ...]
    category: str = ""

    @property
    def dimension(self) -> int:
        return len(self.features)


class ContentCluster(Record):
    id: str
    name: str
    description: str = ""
    member_video_ids: list[str] = Field(default_factory=list)
    centroid: list[float] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def size(self) -> int:
        return len(self.member_video_ids)


class SmartPlaylistSuggestion(Record):
    name: str
    description: str
    video_ids: list[str]
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)


class OrganizationSuggestion(Record):
    type: str  # "categorize_favorites", "create_category"
    title: str
    description: str
    confidence: float = Field(ge=0.0, le=1.0)
    action_data: dict[str, str | int] = Field(default_factory=dict)
