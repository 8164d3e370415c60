from collections.abc import Iterable
from datetime import datetime, timezone

from loguru import logger

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.constants import (
    DEFAULT_REASON,
    DIVERSITY_HEAVY_REPEAT,
    DIVERSITY_NEW_CATEGORY,
    DIVERSITY_SOME_REPEAT,
    DIVERSITY_SOME_REPEAT_MAX,
    DURATION_FIT_WEIGHT,
    DURATION_OVERRUN_SCORE,
    DURATION_PREFERENCE_WEIGHT,
    ENGAGEMENT_PATTERN_BOOST,
    NEUTRAL_TIME_SCORE,
    REASON_THRESHOLDS,
    RICH_PROFILE_CATEGORY_COUNT,
)
from vibecore.models.context import RecommendationContext
from vibecore.models.interaction import CandidateItem
from vibecore.models.profile import UserProfile
from vibecore.models.scoring import ScoredCandidate
from vibecore.services.profile.builder import duration_bucket
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier
from vibecore.services.recommendation.freshness import freshness_score
from vibecore.utils import Clock, clamp, mean, parse_duration_minutes, utc_now, variance


class PredictiveScorer:
    """
    Scores candidates against a profile and a situational context.

    Six factors, each in [0, 1]: category, channel, duration, time,
    freshness, diversity. Engagement is their mean plus a boost from the
    user's typical watch progress; confidence is high when the factors agree
    and the profile knows enough categories.
    """

    def __init__(
        self,
        classifier: CategoryClassifier | None = None,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ):
        self.classifier = classifier or KeywordCategoryClassifier()
        self.settings = settings or default_settings
        self.clock = clock

    def score(
        self,
        candidate: CandidateItem,
        profile: UserProfile,
        context: RecommendationContext,
        now: datetime | None = None,
    ) -> ScoredCandidate:
        """
        Score a single candidate.

        Args:
            candidate: Catalog item
            profile: User profile
            context: Situational context
            now: Reference time for freshness, defaults to the clock

        Returns:
            ScoredCandidate with factor breakdown, aggregates and reasons
        """
        now = now or self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        category = self.classifier.classify(candidate.title)
        minutes = parse_duration_minutes(candidate.duration_text, self.settings.DEFAULT_DURATION_MINUTES)

        factors = {
            "category": clamp(profile.category_affinity.get(category, 0.0)),
            "channel": clamp(profile.channel_affinity.get(candidate.channel_id, 0.0)),
            "duration": self.duration_score(minutes, profile, context.available_minutes),
            "time": clamp(profile.hourly_activity.get(context.hour_of_day, NEUTRAL_TIME_SCORE)),
            "freshness": clamp(
                freshness_score(
                    candidate.published_at,
                    now,
                    self.settings.FRESHNESS_DECAY_DAYS,
                    self.settings.FRESHNESS_NEUTRAL_SCORE,
                )
            ),
            "diversity": self.diversity_score(category, context.recent_categories),
        }

        engagement = self.engagement_score(factors, profile)
        confidence = self.confidence_score(factors, profile)

        return ScoredCandidate(
            video_id=candidate.video_id,
            title=candidate.title,
            category=category,
            channel_id=candidate.channel_id,
            duration_minutes=minutes,
            factor_scores=factors,
            engagement_score=engagement,
            confidence_score=confidence,
            diversity_score=factors["diversity"],
            combined_score=self.combined_score(engagement, factors["diversity"], confidence),
            reasons=self._reasons(factors, category, candidate.channel_title),
        )

    def score_candidates(
        self,
        candidates: Iterable[CandidateItem],
        profile: UserProfile,
        context: RecommendationContext,
    ) -> list[ScoredCandidate]:
        """Score all candidates and drop those below MIN_CONFIDENCE_THRESHOLD."""
        now = self.clock()
        scored = [self.score(candidate, profile, context, now) for candidate in candidates]
        kept = [s for s in scored if s.confidence_score >= self.settings.MIN_CONFIDENCE_THRESHOLD]
        logger.debug(f"Scored {len(scored)} candidates, {len(scored) - len(kept)} dropped for low confidence")
        return kept

    @staticmethod
    def duration_score(minutes: float, profile: UserProfile, available_minutes: int) -> float:
        fit = 1.0 if minutes <= available_minutes else DURATION_OVERRUN_SCORE
        preference = profile.duration_preference.for_bucket(duration_bucket(minutes))
        return clamp(fit * DURATION_FIT_WEIGHT + preference * DURATION_PREFERENCE_WEIGHT)

    @staticmethod
    def diversity_score(category: str, recent_categories: list[str]) -> float:
        repeats = recent_categories.count(category)
        if repeats == 0:
            return DIVERSITY_NEW_CATEGORY
        if repeats <= DIVERSITY_SOME_REPEAT_MAX:
            return DIVERSITY_SOME_REPEAT
        return DIVERSITY_HEAVY_REPEAT

    @staticmethod
    def engagement_score(factors: dict[str, float], profile: UserProfile) -> float:
        boost = profile.engagement_pattern.avg_progress * ENGAGEMENT_PATTERN_BOOST
        return clamp(mean(factors.values()) + boost)

    @staticmethod
    def confidence_score(factors: dict[str, float], profile: UserProfile) -> float:
        richness = min(1.0, len(profile.category_affinity) / RICH_PROFILE_CATEGORY_COUNT)
        return clamp((1.0 - variance(factors.values())) * richness)

    def combined_score(self, engagement: float, diversity: float, confidence: float) -> float:
        return clamp(
            engagement * self.settings.ENGAGEMENT_WEIGHT
            + diversity * self.settings.DIVERSITY_WEIGHT
            + confidence * self.settings.CONFIDENCE_WEIGHT
        )

    @staticmethod
    def _reasons(factors: dict[str, float], category: str, channel_title: str) -> list[str]:
        messages = {
            "category": f"Matches your interest in {category} content",
            "channel": f"From {channel_title or 'a channel'}, a channel you enjoy",
            "duration": "Perfect length for your viewing preferences",
            "time": "You often watch at this time of day",
            "freshness": "Recently published content",
            "diversity": "Offers variety from your recent viewing",
        }
        reasons = [messages[name] for name, value in factors.items() if value > REASON_THRESHOLDS[name]]
        return reasons or [DEFAULT_REASON]
