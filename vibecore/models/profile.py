from pydantic import Field

from vibecore.models.base import Record


class DurationPreference(Record):
    """Mean watch progress per duration bucket (short <5m, medium 5-20m, long >20m)."""

    short: float = Field(default=0.0, ge=0.0, le=1.0)
    medium: float = Field(default=0.0, ge=0.0, le=1.0)
    long: float = Field(default=0.0, ge=0.0, le=1.0)

    def for_bucket(self, bucket: str) -> float:
        return getattr(self, bucket)


class EngagementPattern(Record):
    avg_progress: float = Field(default=0.0, ge=0.0, le=1.0)
    completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    skip_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class UserProfile(Record):
    """
    Preference profile derived from a history snapshot.

    Every value is normalized to [0, 1]. Profiles are rebuilt per request and
    never updated in place.
    """

    category_affinity: dict[str, float] = Field(default_factory=dict)
    channel_affinity: dict[str, float] = Field(default_factory=dict)
    duration_preference: DurationPreference = Field(default_factory=DurationPreference)
    hourly_activity: dict[int, float] = Field(default_factory=dict)
    engagement_pattern: EngagementPattern = Field(default_factory=EngagementPattern)
    diversity_baseline: float = Field(default=1.0, ge=0.0, le=1.0)

    def get_top_categories(self, limit: int = 5) -> list[tuple[str, float]]:
        """Get top N categories by affinity."""
        return sorted(self.category_affinity.items(), key=lambda x: x[1], reverse=True)[:limit]

    def get_top_channels(self, limit: int = 5) -> list[tuple[str, float]]:
        """Get top N channels by affinity."""
        return sorted(self.channel_affinity.items(), key=lambda x: x[1], reverse=True)[:limit]
