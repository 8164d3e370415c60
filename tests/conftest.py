"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from vibecore.core.config import Settings
from vibecore.models.interaction import CandidateItem, FavoriteRecord, InteractionRecord

NOW = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def make_interaction(
    video_id: str,
    title: str,
    channel_id: str = "ch-1",
    duration: str = "10:00",
    progress: float = 0.8,
    hours_ago: float = 48,
    completed: bool | None = None,
) -> InteractionRecord:
    return InteractionRecord(
        video_id=video_id,
        title=title,
        channel_id=channel_id,
        channel_title=f"Channel {channel_id}",
        duration_text=duration,
        watch_progress=progress,
        watch_duration_ms=0,
        watched_at_epoch_ms=ms(NOW - timedelta(hours=hours_ago)),
        completed=progress >= 0.9 if completed is None else completed,
    )


def make_candidate(
    video_id: str,
    title: str,
    channel_id: str = "ch-new",
    duration: str = "8:00",
    published_days_ago: float | None = 3,
) -> CandidateItem:
    published = "" if published_days_ago is None else (NOW - timedelta(days=published_days_ago)).isoformat()
    return CandidateItem(
        video_id=video_id,
        title=title,
        channel_id=channel_id,
        channel_title=f"Channel {channel_id}",
        duration_text=duration,
        published_at=published,
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, CLUSTER_SEED=7)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def varied_history() -> list[InteractionRecord]:
    """Twelve interactions over six categories and five channels."""
    return [
        make_interaction("v1", "Chill music for studying", "ch-a", "3:30", 1.0, 1),
        make_interaction("v2", "Top song of the week", "ch-a", "4:10", 0.9, 30),
        make_interaction("v3", "Python tutorial for beginners", "ch-b", "25:00", 0.6, 50),
        make_interaction("v4", "How to fix a bike", "ch-b", "12:00", 0.4, 70),
        make_interaction("v5", "Gaming highlights", "ch-c", "18:00", 0.7, 3),
        make_interaction("v6", "Retro game speedrun", "ch-c", "45:00", 0.05, 100),
        make_interaction("v7", "Evening news roundup", "ch-d", "9:00", 0.95, 5),
        make_interaction("v8", "Breaking: markets today", "ch-d", "6:00", 0.5, 26),
        make_interaction("v9", "Stand-up comedy special", "ch-e", "40:00", 1.0, 8),
        make_interaction("v10", "Funny pet moments", "ch-e", "7:00", 0.8, 12),
        make_interaction("v11", "Phone review 2024", "ch-b", "15:00", 0.3, 200),
        make_interaction("v12", "Tech podcast episode", "ch-a", "1:05:00", 0.2, 300),
    ]


@pytest.fixture
def favorites() -> list[FavoriteRecord]:
    return [
        FavoriteRecord(video_id="v1", category="Music", added_at_epoch_ms=ms(NOW), channel_id="ch-a"),
        FavoriteRecord(video_id="f2", category="", added_at_epoch_ms=ms(NOW), title="Easy pasta recipe"),
    ]
