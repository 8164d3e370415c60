from collections.abc import Sequence

from loguru import logger

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.context import DeviceContext, Situation
from vibecore.models.interaction import CandidateItem, FavoriteRecord, InteractionRecord
from vibecore.models.scoring import ContextualRecommendation, RecommendationResult
from vibecore.services.context.engine import ContextEngine
from vibecore.services.profile.builder import ProfileBuilder
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier
from vibecore.services.recommendation.ranker import DiversityRanker
from vibecore.services.recommendation.scorer import PredictiveScorer
from vibecore.utils import Clock, utc_now


class RecommendationPipeline:
    """
    Main orchestration: context, profile -> score -> situation filter -> rank.

    Holds only collaborators and settings, so one instance can serve
    concurrent requests over the same read-only snapshot.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        classifier: CategoryClassifier | None = None,
        clock: Clock = utc_now,
    ):
        self.settings = settings or default_settings
        self.classifier = classifier or KeywordCategoryClassifier()
        self.clock = clock

        self.profile_builder = ProfileBuilder(self.classifier, self.settings)
        self.context_engine = ContextEngine(self.classifier, self.settings, clock)
        self.scorer = PredictiveScorer(self.classifier, self.settings, clock)
        self.ranker = DiversityRanker(self.settings)

    def recommend(
        self,
        history: Sequence[InteractionRecord],
        favorites: Sequence[FavoriteRecord],
        candidates: Sequence[CandidateItem],
        available_minutes: int,
        max_results: int | None = None,
        hour_of_day: int | None = None,
        situation: Situation | None = None,
        device: DeviceContext | None = None,
    ) -> RecommendationResult:
        """
        Rank candidates for the current user and situation.

        Args:
            history: Watch-history snapshot
            favorites: Favorites snapshot
            candidates: Candidate pool
            available_minutes: Time the user has (>= 0)
            max_results: Result size, defaults to DEFAULT_MAX_RESULTS
            hour_of_day: Override for the local hour
            situation: Explicit situation instead of the inferred one
            device: Device state

        Returns:
            RecommendationResult with context, profile and ranked candidates
        """
        max_results = self.settings.DEFAULT_MAX_RESULTS if max_results is None else max_results
        if max_results < 0:
            raise InvalidRequestError(f"max_results must be non-negative, got {max_results}")

        context = self.context_engine.build_context(available_minutes, history, hour_of_day, situation, device)
        profile = self.profile_builder.build_profile(history, favorites)

        scored = self.scorer.score_candidates(candidates, profile, context)
        allowed = self.context_engine.apply_situation_filter(scored, context.situation)
        ranked = self.ranker.rank(allowed, max_results)

        logger.info(
            f"Ranked {len(ranked)} of {len(candidates)} candidates "
            f"({len(scored)} confident, {len(allowed)} fit {context.situation.value})"
        )
        return RecommendationResult(context=context, profile=profile, recommendations=ranked)

    def contextual(
        self,
        history: Sequence[InteractionRecord],
        favorites: Sequence[FavoriteRecord],
        candidates: Sequence[CandidateItem],
        available_minutes: int,
        max_results: int | None = None,
        hour_of_day: int | None = None,
        situation: Situation | None = None,
        device: DeviceContext | None = None,
    ) -> list[ContextualRecommendation]:
        """Ranked recommendations re-ordered by how well they fit the context."""
        result = self.recommend(
            history, favorites, candidates, available_minutes, max_results, hour_of_day, situation, device
        )
        return self.context_engine.rank_by_context(result.recommendations, result.context)
