"""
Fixed tables shared by the pipeline stages. Tunable numbers live in config.
"""

from typing import Final

FALLBACK_CATEGORY: Final[str] = "Entertainment"
UNCATEGORIZED_LABELS: Final[frozenset[str]] = frozenset({"", "default"})

# Ordered: the first matching row wins
CATEGORY_KEYWORDS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("Music", ("music", "song")),
    ("Education", ("tutorial", "how to")),
    ("Gaming", ("game", "gaming")),
    ("News", ("news", "breaking")),
    ("Comedy", ("comedy", "funny")),
    ("Technology", ("tech", "review")),
    ("Food", ("cooking", "recipe")),
    ("Travel", ("travel", "vlog")),
    ("Health & Fitness", ("fitness", "workout")),
    ("DIY & Crafts", ("diy", "craft")),
)

# Duration buckets (minutes)
SHORT_VIDEO_MAX_MINUTES: Final[float] = 5.0
MEDIUM_VIDEO_MAX_MINUTES: Final[float] = 20.0
LONG_FEATURE_MIN_MINUTES: Final[float] = 30.0

# Profile
SKIP_PROGRESS_THRESHOLD: Final[float] = 0.1
RICH_PROFILE_CATEGORY_COUNT: Final[int] = 5
ENGAGEMENT_PATTERN_BOOST: Final[float] = 0.3

# Scoring: duration factor = fit * 0.6 + bucket preference * 0.4
DURATION_FIT_WEIGHT: Final[float] = 0.6
DURATION_PREFERENCE_WEIGHT: Final[float] = 0.4
DURATION_OVERRUN_SCORE: Final[float] = 0.5
NEUTRAL_TIME_SCORE: Final[float] = 0.5

# Diversity factor
DIVERSITY_NEW_CATEGORY: Final[float] = 1.0
DIVERSITY_SOME_REPEAT: Final[float] = 0.7
DIVERSITY_HEAVY_REPEAT: Final[float] = 0.3
DIVERSITY_SOME_REPEAT_MAX: Final[int] = 2

# A reason is attached when a factor is strictly above its threshold
REASON_THRESHOLDS: Final[dict[str, float]] = {
    "category": 0.7,
    "channel": 0.6,
    "duration": 0.8,
    "time": 0.8,
    "freshness": 0.8,
    "diversity": 0.7,
}
DEFAULT_REASON: Final[str] = "Recommended based on your viewing patterns"

# Organization
SMART_PLAYLIST_MIN_CONFIDENCE: Final[float] = 0.6
SMART_PLAYLIST_LIMIT: Final[int] = 5
RECENTLY_WATCHED_DAYS: Final[int] = 7
RECENTLY_WATCHED_MIN_VIDEOS: Final[int] = 3
RECENTLY_WATCHED_CONFIDENCE: Final[float] = 0.8
UNCATEGORIZED_FAVORITES_THRESHOLD: Final[int] = 5
NEW_CATEGORY_MIN_FAVORITES: Final[int] = 3
ORGANIZATION_SUGGESTION_LIMIT: Final[int] = 8

# Context
RECENT_CATEGORY_WINDOW_HOURS: Final[int] = 24
RECENT_CATEGORY_LIMIT: Final[int] = 10
