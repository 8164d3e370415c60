from pydantic import Field

from vibecore.models.base import Record
from vibecore.models.context import RecommendationContext
from vibecore.models.profile import UserProfile


class ScoredCandidate(Record):
    """A candidate with its per-factor breakdown and aggregate scores."""

    video_id: str
    title: str = ""
    category: str
    channel_id: str = ""
    duration_minutes: float = 0.0
    factor_scores: dict[str, float] = Field(default_factory=dict)
    engagement_score: float = Field(ge=0.0, le=1.0)
    confidence_score: float = Field(ge=0.0, le=1.0)
    diversity_score: float = Field(ge=0.0, le=1.0)
    combined_score: float = Field(default=0.0, ge=0.0, le=1.0)
    reasons: list[str] = Field(default_factory=list)


class ContextualRecommendation(Record):
    candidate: ScoredCandidate
    context_score: float = Field(ge=0.0, le=1.0)
    reasons: list[str] = Field(default_factory=list)
    adaptations: list[str] = Field(default_factory=list)


class RecommendationResult(Record):
    context: RecommendationContext
    profile: UserProfile
    recommendations: list[ScoredCandidate] = Field(default_factory=list)
