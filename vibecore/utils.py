import math
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp to [low, high]; NaN collapses to low."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def mean(values: Iterable[float], default: float = 0.0) -> float:
    values = list(values)
    if not values:
        return default
    return sum(values) / len(values)


def variance(values: Iterable[float]) -> float:
    """
    Population variance.

    Fewer than two values carry no spread information, so they report the
    maximal-uncertainty value 1.0 instead of 0.0.
    """
    values = list(values)
    if len(values) < 2:
        return 1.0
    avg = sum(values) / len(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def parse_duration_minutes(duration: str | None, default: float = 5.0) -> float:
    """
    Parse "MM:SS" or "H:MM:SS" into fractional minutes.

    Anything else falls back to ``default``; malformed input never raises.
    """
    if not duration:
        return default
    parts = duration.strip().split(":")
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return default
    if any(n < 0 or math.isnan(n) or math.isinf(n) for n in numbers):
        return default

    if len(numbers) == 2:
        return numbers[0] + numbers[1] / 60.0
    if len(numbers) == 3:
        return numbers[0] * 60 + numbers[1] + numbers[2] / 60.0
    return default


def hour_of_epoch_ms(epoch_ms: int, tz_name: str = "UTC") -> int | None:
    """Hour of day (0-23) of a millisecond timestamp in the given zone, None if it is out of range."""
    try:
        moment = datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc)
        return moment.astimezone(ZoneInfo(tz_name)).hour
    except (ValueError, OverflowError, OSError):
        return None


def epoch_ms(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def parse_published_at(value: str | None) -> datetime | None:
    """Parse an ISO-8601 publish timestamp ("Z" suffix allowed)."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
