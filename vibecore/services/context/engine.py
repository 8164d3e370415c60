from collections.abc import Sequence
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from loguru import logger

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.constants import RECENT_CATEGORY_LIMIT, RECENT_CATEGORY_WINDOW_HOURS
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.context import (
    DeviceContext,
    Mood,
    NetworkType,
    RecommendationContext,
    Situation,
    TimeOfDay,
)
from vibecore.models.interaction import InteractionRecord
from vibecore.models.scoring import ContextualRecommendation, ScoredCandidate
from vibecore.services.context.presets import (
    AFTERNOON_START,
    DEVICE_FIT_WEIGHT,
    DURATION_FIT_WEIGHT,
    EVENING_START,
    MORNING_START,
    NIGHT_START,
    SITUATION_FIT_WEIGHT,
    SITUATION_PRESETS,
    TIME_APPROPRIATENESS,
    TIME_FIT_WEIGHT,
)
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier
from vibecore.utils import Clock, clamp, epoch_ms, utc_now


def time_of_day(hour: int) -> TimeOfDay:
    if MORNING_START <= hour < AFTERNOON_START:
        return TimeOfDay.MORNING
    if AFTERNOON_START <= hour < EVENING_START:
        return TimeOfDay.AFTERNOON
    if EVENING_START <= hour < NIGHT_START:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT


def infer_situation(period: TimeOfDay, available_minutes: int) -> Situation:
    if period == TimeOfDay.MORNING and available_minutes <= 15:
        return Situation.COMMUTE
    if period in (TimeOfDay.AFTERNOON, TimeOfDay.EVENING) and available_minutes <= 10:
        return Situation.WORK_BREAK
    if period == TimeOfDay.NIGHT and available_minutes <= 30:
        return Situation.BEDTIME
    if available_minutes >= 60:
        return Situation.LEISURE
    return Situation.UNKNOWN


def infer_mood(situation: Situation, period: TimeOfDay) -> Mood:
    if situation == Situation.LEARNING_TIME:
        return Mood.FOCUSED
    if situation == Situation.BEDTIME:
        return Mood.RELAXED
    if situation == Situation.EXERCISE:
        return Mood.ENERGETIC
    if period == TimeOfDay.MORNING:
        return Mood.ENERGETIC
    if period == TimeOfDay.EVENING:
        return Mood.RELAXED
    return Mood.NEUTRAL


class ContextEngine:
    """
    Infers the viewing situation and adapts recommendations to it.

    Stateless: the clock and the history snapshot are the only inputs.
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

    def build_context(
        self,
        available_minutes: int,
        history: Sequence[InteractionRecord] = (),
        hour_of_day: int | None = None,
        situation: Situation | None = None,
        device: DeviceContext | None = None,
    ) -> RecommendationContext:
        """
        Build the situational context for one request.

        Args:
            available_minutes: Time the user has (>= 0)
            history: Watch history used for recent categories
            hour_of_day: Override for the current local hour
            situation: Explicit situation; inferred when omitted
            device: Device state reported by the caller

        Returns:
            RecommendationContext with derived time of day, situation and mood
        """
        if available_minutes < 0:
            raise InvalidRequestError(f"available_minutes must be non-negative, got {available_minutes}")
        if hour_of_day is not None and not 0 <= hour_of_day <= 23:
            raise InvalidRequestError(f"hour_of_day must be within 0-23, got {hour_of_day}")

        now = self.clock()
        hour = hour_of_day if hour_of_day is not None else now.astimezone(ZoneInfo(self.settings.TIMEZONE)).hour
        period = time_of_day(hour)
        situation = situation or infer_situation(period, available_minutes)

        context = RecommendationContext(
            hour_of_day=hour,
            available_minutes=available_minutes,
            recent_categories=self.recent_categories(history, now),
            time_of_day=period,
            mood=infer_mood(situation, period),
            situation=situation,
            device=device or DeviceContext(),
        )
        logger.debug(f"Context: {period.value} {hour}h, {available_minutes}m -> {situation.value}/{context.mood.value}")
        return context

    def recent_categories(self, history: Sequence[InteractionRecord], now: datetime) -> list[str]:
        """Categories of the most recent interactions in the last 24 hours, oldest first."""
        cutoff = epoch_ms(now - timedelta(hours=RECENT_CATEGORY_WINDOW_HOURS))
        recent = sorted(
            (item for item in history if item.watched_at_epoch_ms >= cutoff),
            key=lambda item: item.watched_at_epoch_ms,
        )
        return [self.classifier.classify(item.title) for item in recent[-RECENT_CATEGORY_LIMIT:]]

    @staticmethod
    def apply_situation_filter(
        candidates: Sequence[ScoredCandidate], situation: Situation
    ) -> list[ScoredCandidate]:
        """Keep candidates allowed by the situation preset; situations without a preset keep everything."""
        preset = SITUATION_PRESETS.get(situation)
        if preset is None:
            return list(candidates)
        return [c for c in candidates if preset.allows(c.category, c.duration_minutes)]

    def score_contextual_fit(
        self, candidate: ScoredCandidate, context: RecommendationContext
    ) -> ContextualRecommendation:
        """
        Weighted fit of a candidate to the current context.

        0.3 time-of-day appropriateness + 0.4 duration fit + 0.2 situation fit
        + 0.1 device fit, with reasons and viewing adaptations.
        """
        reasons = list(candidate.reasons)
        adaptations: list[str] = []

        time_fit = self.time_appropriateness(candidate.category, context.time_of_day)
        if time_fit > 0.7:
            reasons.append(f"Perfect for {context.time_of_day.value.lower()} viewing")

        duration_fit = self.duration_fit(candidate.duration_minutes, context.available_minutes)
        if duration_fit > 0.8:
            reasons.append("Fits perfectly in your available time")
        elif duration_fit < 0.5:
            adaptations.append("Consider watching in segments")

        situation_fit = self.situation_fit(candidate.category, candidate.duration_minutes, context.situation)
        if situation_fit > 0.7:
            reasons.append(f"Great for {context.situation.value.lower().replace('_', ' ')}")

        device_fit = self.device_fit(context.device)
        if device_fit < 0.5:
            if context.device.network_type == NetworkType.MOBILE_LOW_SPEED:
                adaptations.append("Download for offline viewing")
            elif context.device.network_type == NetworkType.OFFLINE:
                adaptations.append("Available offline")

        score = (
            time_fit * TIME_FIT_WEIGHT
            + duration_fit * DURATION_FIT_WEIGHT
            + situation_fit * SITUATION_FIT_WEIGHT
            + device_fit * DEVICE_FIT_WEIGHT
        )
        return ContextualRecommendation(
            candidate=candidate,
            context_score=clamp(score),
            reasons=reasons,
            adaptations=adaptations,
        )

    def rank_by_context(
        self, candidates: Sequence[ScoredCandidate], context: RecommendationContext
    ) -> list[ContextualRecommendation]:
        scored = [self.score_contextual_fit(c, context) for c in candidates]
        return sorted(scored, key=lambda r: r.context_score, reverse=True)

    @staticmethod
    def time_appropriateness(category: str, period: TimeOfDay) -> float:
        table = TIME_APPROPRIATENESS[period]
        return table.get(category, table["*"])

    @staticmethod
    def duration_fit(minutes: float, available_minutes: int) -> float:
        if minutes <= available_minutes * 0.8:
            return 1.0
        if minutes <= available_minutes:
            return 0.8
        if minutes <= available_minutes * 1.2:
            return 0.6
        if minutes <= available_minutes * 1.5:
            return 0.4
        return 0.2

    @staticmethod
    def situation_fit(category: str, minutes: float, situation: Situation) -> float:
        if situation == Situation.COMMUTE:
            if minutes <= 15 and category in ("News", "Comedy", "Music"):
                return 0.9
            return 0.7 if minutes <= 10 else 0.3
        if situation == Situation.WORK_BREAK:
            if minutes <= 10 and category in ("Comedy", "Music", "Entertainment"):
                return 0.9
            return 0.8 if minutes <= 5 else 0.4
        if situation == Situation.BEDTIME:
            if category in ("Music", "Education") and minutes <= 30:
                return 0.8
            if category == "Comedy" and minutes <= 20:
                return 0.6
            return 0.4
        if situation == Situation.LEARNING_TIME:
            return 0.9 if category in ("Education", "Technology", "DIY & Crafts") else 0.3
        if situation == Situation.EXERCISE:
            return 0.9 if category in ("Health & Fitness", "Music") else 0.2
        if situation == Situation.COOKING:
            if category == "Food":
                return 0.9
            return 0.7 if category == "Music" and minutes >= 20 else 0.3
        return 0.7

    @staticmethod
    def device_fit(device: DeviceContext) -> float:
        score = 1.0
        if device.battery_level < 20 and not device.is_charging:
            score *= 0.7
        if device.network_type == NetworkType.MOBILE_LOW_SPEED:
            score *= 0.6
        elif device.network_type == NetworkType.OFFLINE:
            score *= 0.3
        return score
