import math
from datetime import datetime

from vibecore.utils import parse_published_at


def freshness_score(published_at: str | None, now: datetime, decay_days: float, neutral: float) -> float:
    """
    Exponential recency decay: exp(-age_days / decay_days).

    Args:
        published_at: ISO-8601 publish time
        now: Reference time (aware)
        decay_days: Age at which the score has dropped to 1/e
        neutral: Score for missing or unparseable dates

    Returns:
        Score in [0, 1], 1.0 for content published now or in the future
    """
    published = parse_published_at(published_at)
    if published is None:
        return neutral

    age_days = (now - published).total_seconds() / 86400.0
    if age_days <= 0:
        return 1.0
    return math.exp(-age_days / decay_days)
