from enum import Enum

from pydantic import Field

from vibecore.models.base import Record


class TimeOfDay(str, Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


class Situation(str, Enum):
    COMMUTE = "COMMUTE"
    WORK_BREAK = "WORK_BREAK"
    LEISURE = "LEISURE"
    BEDTIME = "BEDTIME"
    LEARNING_TIME = "LEARNING_TIME"
    EXERCISE = "EXERCISE"
    COOKING = "COOKING"
    UNKNOWN = "UNKNOWN"


class Mood(str, Enum):
    FOCUSED = "FOCUSED"
    RELAXED = "RELAXED"
    ENERGETIC = "ENERGETIC"
    CURIOUS = "CURIOUS"
    NEUTRAL = "NEUTRAL"


class NetworkType(str, Enum):
    WIFI = "WIFI"
    MOBILE_HIGH_SPEED = "MOBILE_HIGH_SPEED"
    MOBILE_LOW_SPEED = "MOBILE_LOW_SPEED"
    OFFLINE = "OFFLINE"


class DeviceContext(Record):
    """Device state reported by the caller."""

    battery_level: int = Field(default=100, ge=0, le=100)
    is_charging: bool = False
    network_type: NetworkType = NetworkType.WIFI


class RecommendationContext(Record):
    hour_of_day: int = Field(ge=0, le=23)
    available_minutes: int = Field(ge=0)
    recent_categories: list[str] = Field(default_factory=list)
    time_of_day: TimeOfDay = TimeOfDay.MORNING
    mood: Mood = Mood.NEUTRAL
    situation: Situation = Situation.UNKNOWN
    device: DeviceContext = Field(default_factory=DeviceContext)
