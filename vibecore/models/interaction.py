from pydantic import Field

from vibecore.models.base import Record


class InteractionRecord(Record):
    """One watch-history entry."""

    video_id: str
    title: str = ""
    channel_id: str = ""
    channel_title: str = ""
    duration_text: str = ""
    watch_progress: float = Field(default=0.0, ge=0.0, le=1.0)
    watch_duration_ms: int = Field(default=0, ge=0)
    watched_at_epoch_ms: int = 0
    completed: bool = False


class FavoriteRecord(Record):
    """
    One favorite entry.

    ``category`` is the user-assigned folder; "" and "default" mean the user
    never filed it.
    """

    video_id: str
    category: str = ""
    added_at_epoch_ms: int = 0
    title: str = ""
    channel_id: str = ""
    channel_title: str = ""
    duration_text: str = ""


class CandidateItem(Record):
    """Catalog item offered for ranking."""

    video_id: str
    title: str = ""
    channel_id: str = ""
    channel_title: str = ""
    duration_text: str = ""
    published_at: str = ""
