from typing import Protocol

from vibecore.core.constants import CATEGORY_KEYWORDS, FALLBACK_CATEGORY


class CategoryClassifier(Protocol):
    """Maps a video title to a content category."""

    def classify(self, title: str) -> str: ...


class KeywordCategoryClassifier:
    """
    Case-insensitive keyword lookup over the title.

    Rows are checked in order and the first hit wins, so "funny game review"
    is Gaming, not Comedy.
    """

    def __init__(
        self,
        keywords: tuple[tuple[str, tuple[str, ...]], ...] = CATEGORY_KEYWORDS,
        fallback: str = FALLBACK_CATEGORY,
    ):
        self.keywords = keywords
        self.fallback = fallback

    def classify(self, title: str) -> str:
        title_lower = (title or "").lower()
        for category, words in self.keywords:
            if any(word in title_lower for word in words):
                return category
        return self.fallback

    @property
    def categories(self) -> list[str]:
        return [category for category, _ in self.keywords] + [self.fallback]
