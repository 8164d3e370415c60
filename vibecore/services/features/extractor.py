from typing import Final

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.constants import LONG_FEATURE_MIN_MINUTES, SHORT_VIDEO_MAX_MINUTES
from vibecore.models.cluster import FeatureVector
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier
from vibecore.utils import parse_duration_minutes

# Vector layout. Distances are only meaningful between vectors built with this
# exact order, so append new features at the end.
FEATURE_NAMES: Final[tuple[str, ...]] = (
    "title_token_count",
    "has_tutorial",
    "has_review",
    "has_music",
    "has_gaming",
    "has_news",
    "has_comedy",
    "duration_minutes",
    "is_short",
    "is_long",
    "channel_name_length",
    "has_official",
)
FEATURE_DIMENSION: Final[int] = len(FEATURE_NAMES)

TITLE_KEYWORD_FLAGS: Final[tuple[tuple[str, ...], ...]] = (
    ("tutorial",),
    ("review",),
    ("music",),
    ("game", "gaming"),
    ("news",),
    ("comedy", "funny"),
)


def _flag(text: str, words: tuple[str, ...]) -> float:
    return 1.0 if any(word in text for word in words) else 0.0


class FeatureExtractor:
    """
    Maps video metadata to a fixed-length vector.

    Pure extraction: no scaling, no state, same input gives the same vector.
    """

    def __init__(
        self,
        classifier: CategoryClassifier | None = None,
        settings: Settings | None = None,
    ):
        self.classifier = classifier or KeywordCategoryClassifier()
        self.settings = settings or default_settings

    def extract_features(self, title: str, channel_title: str, duration_text: str) -> tuple[float, ...]:
        """
        Extract the numeric features of one video.

        Args:
            title: Video title
            channel_title: Channel display name
            duration_text: "MM:SS" or "H:MM:SS"

        Returns:
            Tuple of FEATURE_DIMENSION floats ordered as FEATURE_NAMES
        """
        title_lower = (title or "").lower()
        channel_lower = (channel_title or "").lower()
        minutes = parse_duration_minutes(duration_text, self.settings.DEFAULT_DURATION_MINUTES)

        features = [float(len(title_lower.split()))]
        features.extend(_flag(title_lower, words) for words in TITLE_KEYWORD_FLAGS)
        features.append(minutes)
        features.append(1.0 if minutes < SHORT_VIDEO_MAX_MINUTES else 0.0)
        features.append(1.0 if minutes > LONG_FEATURE_MIN_MINUTES else 0.0)
        features.append(float(len(channel_title or "")))
        features.append(_flag(channel_lower, ("official",)))
        return tuple(features)

    def vectorize(
        self,
        video_id: str,
        title: str,
        channel_title: str,
        duration_text: str,
        category: str | None = None,
    ) -> FeatureVector:
        """Build a FeatureVector, inferring the category from the title unless given."""
        return FeatureVector(
            video_id=video_id,
            features=self.extract_features(title, channel_title, duration_text),
            category=category or self.classifier.classify(title),
        )
