from collections import Counter
from collections.abc import Sequence

from loguru import logger

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.scoring import ScoredCandidate


class DiversityRanker:
    """
    Greedy, cap-constrained selection of scored candidates.

    Candidates are visited by engagement score (highest first) and admitted
    while their category and channel are still under the caps.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

    def rank(self, candidates: Sequence[ScoredCandidate], max_results: int) -> list[ScoredCandidate]:
        """
        Select up to max_results candidates under the diversity caps.

        Args:
            candidates: Scored candidates
            max_results: Result size limit (>= 0)

        Returns:
            Admitted candidates in admission order
        """
        if max_results < 0:
            raise InvalidRequestError(f"max_results must be non-negative, got {max_results}")

        category_counts: Counter[str] = Counter()
        channel_counts: Counter[str] = Counter()
        ranked: list[ScoredCandidate] = []

        # sorted() is stable: equal engagement keeps input order
        for candidate in sorted(candidates, key=lambda c: c.engagement_score, reverse=True):
            if len(ranked) >= max_results:
                break
            if category_counts[candidate.category] >= self.settings.CATEGORY_CAP:
                continue
            if channel_counts[candidate.channel_id] >= self.settings.CHANNEL_CAP:
                continue
            ranked.append(candidate)
            category_counts[candidate.category] += 1
            channel_counts[candidate.channel_id] += 1

        logger.debug(f"Diversity ranking admitted {len(ranked)} of {len(candidates)} candidates")
        return ranked
