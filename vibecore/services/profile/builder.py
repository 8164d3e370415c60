from collections import Counter
from collections.abc import Iterable, Sequence

from loguru import logger

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.constants import (
    FALLBACK_CATEGORY,
    MEDIUM_VIDEO_MAX_MINUTES,
    SHORT_VIDEO_MAX_MINUTES,
    SKIP_PROGRESS_THRESHOLD,
    UNCATEGORIZED_LABELS,
)
from vibecore.models.interaction import FavoriteRecord, InteractionRecord
from vibecore.models.profile import DurationPreference, EngagementPattern, UserProfile
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier
from vibecore.utils import clamp, hour_of_epoch_ms, mean, parse_duration_minutes


def duration_bucket(minutes: float) -> str:
    """Bucket name for a duration: short (<5m), medium (5-20m) or long (>20m)."""
    if minutes < SHORT_VIDEO_MAX_MINUTES:
        return "short"
    if minutes <= MEDIUM_VIDEO_MAX_MINUTES:
        return "medium"
    return "long"


def normalize_by_max(scores: dict[str, float]) -> dict[str, float]:
    """Scale so the strongest entry is 1.0, clamped to [0, 1]."""
    if not scores:
        return {}
    max_score = max(scores.values())
    if max_score <= 0:
        return {k: 0.0 for k in scores}
    return {k: clamp(v / max_score) for k, v in scores.items()}


def default_profile() -> UserProfile:
    """Neutral profile used when there is no history to learn from."""
    return UserProfile(
        category_affinity={FALLBACK_CATEGORY: 0.5},
        channel_affinity={},
        duration_preference=DurationPreference(short=0.5, medium=0.5, long=0.5),
        hourly_activity={hour: 0.5 for hour in range(24)},
        engagement_pattern=EngagementPattern(avg_progress=0.5, completion_rate=0.5, skip_rate=0.5),
        diversity_baseline=1.0,
    )


class ProfileBuilder:
    """
    Builds a preference profile from a history snapshot.

    Design principles:
    - Accumulate, then normalize once by the maximum
    - Every aggregate is a fold over the input; nothing is kept between calls
    - Identical input gives an identical profile
    """

    def __init__(
        self,
        classifier: CategoryClassifier | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize profile builder.

        Args:
            classifier: Title -> category mapping (keyword lookup by default)
            settings: Tunables (favorite boost, timezone, sparse-history size)
        """
        self.classifier = classifier or KeywordCategoryClassifier()
        self.settings = settings or default_settings

    def build_profile(
        self,
        history: Sequence[InteractionRecord],
        favorites: Sequence[FavoriteRecord] = (),
    ) -> UserProfile:
        """
        Build a profile from interaction history and favorites.

        Args:
            history: Watch-history snapshot
            favorites: Favorites snapshot

        Returns:
            UserProfile with every value in [0, 1]
        """
        if not history:
            logger.debug("Empty watch history, using neutral default profile")
            return default_profile()

        profile = UserProfile(
            category_affinity=self._category_affinity(history, favorites),
            channel_affinity=self._channel_affinity(history, favorites),
            duration_preference=self._duration_preference(history),
            hourly_activity=self._hourly_activity(history),
            engagement_pattern=self._engagement_pattern(history),
            diversity_baseline=self._diversity_baseline(history),
        )
        logger.debug(
            f"Built profile from {len(history)} interactions and {len(favorites)} favorites: "
            f"{len(profile.category_affinity)} categories, {len(profile.channel_affinity)} channels"
        )
        return profile

    def favorite_category(self, favorite: FavoriteRecord) -> str:
        """User-assigned category, or the inferred one when the favorite was never filed."""
        if favorite.category.strip().lower() in UNCATEGORIZED_LABELS:
            return self.classifier.classify(favorite.title)
        return favorite.category

    def _category_affinity(
        self, history: Iterable[InteractionRecord], favorites: Iterable[FavoriteRecord]
    ) -> dict[str, float]:
        scores: Counter[str] = Counter()
        for item in history:
            scores[self.classifier.classify(item.title)] += item.watch_progress
        for favorite in favorites:
            scores[self.favorite_category(favorite)] += self.settings.FAVORITE_BOOST
        return normalize_by_max(dict(scores))

    def _channel_affinity(
        self, history: Iterable[InteractionRecord], favorites: Iterable[FavoriteRecord]
    ) -> dict[str, float]:
        scores: Counter[str] = Counter()
        for item in history:
            scores[item.channel_id] += item.watch_progress
        for favorite in favorites:
            if favorite.channel_id:
                scores[favorite.channel_id] += self.settings.FAVORITE_BOOST
        return normalize_by_max(dict(scores))

    def _duration_preference(self, history: Iterable[InteractionRecord]) -> DurationPreference:
        buckets: dict[str, list[float]] = {"short": [], "medium": [], "long": []}
        for item in history:
            minutes = parse_duration_minutes(item.duration_text, self.settings.DEFAULT_DURATION_MINUTES)
            buckets[duration_bucket(minutes)].append(item.watch_progress)

        return DurationPreference(**{name: clamp(mean(values)) for name, values in buckets.items()})

    def _hourly_activity(self, history: Iterable[InteractionRecord]) -> dict[int, float]:
        hours = (hour_of_epoch_ms(item.watched_at_epoch_ms, self.settings.TIMEZONE) for item in history)
        # Timestamps outside the datetime range carry no usable hour
        counts = Counter(hour for hour in hours if hour is not None)
        max_count = max(counts.values(), default=0)
        if max_count == 0:
            return {hour: 0.0 for hour in range(24)}
        return {hour: counts.get(hour, 0) / max_count for hour in range(24)}

    @staticmethod
    def _engagement_pattern(history: Sequence[InteractionRecord]) -> EngagementPattern:
        total = len(history)
        return EngagementPattern(
            avg_progress=clamp(mean(item.watch_progress for item in history)),
            completion_rate=sum(1 for item in history if item.completed) / total,
            skip_rate=sum(1 for item in history if item.watch_progress < SKIP_PROGRESS_THRESHOLD) / total,
        )

    def _diversity_baseline(self, history: Sequence[InteractionRecord]) -> float:
        # Too little data to tell a narrow taste from a short history
        if len(history) < self.settings.SPARSE_HISTORY_SIZE:
            return 1.0

        categories = {self.classifier.classify(item.title) for item in history}
        channels = {item.channel_id for item in history}
        return clamp((len(categories) + len(channels)) / (2.0 * len(history)))
