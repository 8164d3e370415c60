from typing import Final

from vibecore.models.base import Record
from vibecore.models.context import Situation, TimeOfDay

MORNING_START: Final[int] = 6
AFTERNOON_START: Final[int] = 12
EVENING_START: Final[int] = 18
NIGHT_START: Final[int] = 22


class SituationPreset(Record):
    """Category allow-list and length limit applied for a situation."""

    categories: frozenset[str]
    max_minutes: float | None = None

    def allows(self, category: str, minutes: float) -> bool:
        if self.max_minutes is not None and minutes > self.max_minutes:
            return False
        return category in self.categories


SITUATION_PRESETS: Final[dict[Situation, SituationPreset]] = {
    Situation.COMMUTE: SituationPreset(categories=frozenset({"News", "Comedy", "Music"}), max_minutes=15),
    Situation.WORK_BREAK: SituationPreset(categories=frozenset({"Comedy", "Music", "Entertainment"}), max_minutes=10),
    Situation.BEDTIME: SituationPreset(categories=frozenset({"Music", "Education"}), max_minutes=30),
    Situation.LEARNING_TIME: SituationPreset(categories=frozenset({"Education", "Technology", "DIY & Crafts"})),
    Situation.EXERCISE: SituationPreset(categories=frozenset({"Health & Fitness", "Music"})),
    Situation.COOKING: SituationPreset(categories=frozenset({"Food", "Music"})),
}

# How well a category suits a time of day; "*" is the fallback
TIME_APPROPRIATENESS: Final[dict[TimeOfDay, dict[str, float]]] = {
    TimeOfDay.MORNING: {
        "News": 0.9,
        "Education": 0.9,
        "Health & Fitness": 0.9,
        "Music": 0.7,
        "Technology": 0.7,
        "Comedy": 0.5,
        "Entertainment": 0.5,
        "*": 0.6,
    },
    TimeOfDay.AFTERNOON: {
        "Education": 0.8,
        "Technology": 0.8,
        "DIY & Crafts": 0.8,
        "News": 0.7,
        "Food": 0.7,
        "Entertainment": 0.6,
        "Gaming": 0.6,
        "*": 0.7,
    },
    TimeOfDay.EVENING: {
        "Entertainment": 0.9,
        "Comedy": 0.9,
        "Music": 0.9,
        "Gaming": 0.8,
        "Travel": 0.8,
        "Education": 0.6,
        "News": 0.6,
        "*": 0.7,
    },
    TimeOfDay.NIGHT: {
        "Music": 0.8,
        "Comedy": 0.8,
        "Education": 0.7,
        "News": 0.4,
        "Gaming": 0.4,
        "*": 0.6,
    },
}

# Contextual fit weights
TIME_FIT_WEIGHT: Final[float] = 0.3
DURATION_FIT_WEIGHT: Final[float] = 0.4
SITUATION_FIT_WEIGHT: Final[float] = 0.2
DEVICE_FIT_WEIGHT: Final[float] = 0.1
