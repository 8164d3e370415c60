"""Tests for library organization and smart playlists."""

import pytest

from vibecore.models.interaction import FavoriteRecord
from vibecore.services.organization import ContentOrganizer

from .conftest import make_interaction


@pytest.fixture
def organizer(test_settings, clock):
    return ContentOrganizer(settings=test_settings, clock=clock)


def test_library_vectors_dedupe_history_first(organizer, varied_history, favorites):
    vectors = organizer.library_vectors(varied_history, favorites)

    ids = [v.video_id for v in vectors]
    assert ids == [f"v{i}" for i in range(1, 13)] + ["f2"]
    by_id = {v.video_id: v for v in vectors}
    assert by_id["v1"].category == "Music"
    assert by_id["f2"].category == "Food"


def test_filed_favorite_keeps_user_category(organizer):
    favorites = [FavoriteRecord(video_id="x", category="Study", title="Piano music")]
    assert organizer.library_vectors([], favorites)[0].category == "Study"


def test_organize_partitions_library(organizer, varied_history, favorites):
    clusters = organizer.organize(varied_history, favorites)

    members = [video_id for c in clusters for video_id in c.member_video_ids]
    assert sorted(members) == sorted([f"v{i}" for i in range(1, 13)] + ["f2"])
    assert len(members) == len(set(members))
    assert len(clusters) == 4
    for cluster in clusters:
        assert 0.0 <= cluster.confidence <= 1.0
        if cluster.member_video_ids:
            assert cluster.description.startswith(f"Contains {cluster.size} videos")
            assert "channels across" in cluster.description


def test_organize_empty_library(organizer):
    assert organizer.organize([], []) == []


def test_organize_honors_requested_k(organizer, varied_history, favorites):
    assert len(organizer.organize(varied_history, favorites, k=2)) == 2


def test_smart_playlists_include_recent_viewing(organizer, varied_history, favorites):
    playlists = organizer.smart_playlists(varied_history, favorites)

    assert 1 <= len(playlists) <= 5
    confidences = [p.confidence for p in playlists]
    assert confidences == sorted(confidences, reverse=True)

    recent = next(p for p in playlists if p.name == "Recently Watched")
    # v11 and v12 are older than a week
    assert recent.video_ids == [f"v{i}" for i in range(1, 11)]
    assert recent.confidence == 0.8

    for playlist in playlists:
        if playlist.name != "Recently Watched":
            assert playlist.name.startswith("Smart Playlist: ")
            assert playlist.confidence > 0.6
            assert len(playlist.video_ids) >= 3


def test_small_library_has_no_playlists(organizer):
    history = [make_interaction("a", "Piano music", hours_ago=1), make_interaction("b", "Violin music", hours_ago=2)]
    assert organizer.smart_playlists(history, []) == []


def test_organization_suggestions(organizer):
    favorites = [FavoriteRecord(video_id=f"r{i}", category="", title=f"Soup recipe {i}") for i in range(3)]
    favorites += [FavoriteRecord(video_id=f"w{i}", category="default", title=f"Leg workout {i}") for i in range(3)]

    suggestions = organizer.organization_suggestions(favorites)

    assert [s.type for s in suggestions] == ["categorize_favorites", "create_category", "create_category"]
    assert suggestions[0].action_data == {"count": 6}
    assert suggestions[0].confidence == 0.9
    assert {s.action_data["category"] for s in suggestions[1:]} == {"Food", "Health & Fitness"}


def test_no_suggestions_for_tidy_favorites(organizer):
    favorites = [FavoriteRecord(video_id=f"m{i}", category="Music", title=f"Piano music {i}") for i in range(4)]
    assert organizer.organization_suggestions(favorites) == []


def test_description_counts_filed_categories(organizer):
    favorites = [
        FavoriteRecord(video_id="a", category="Study", title="Piano music", duration_text="4:00"),
        FavoriteRecord(video_id="b", category="Study", title="Morning news", duration_text="8:00"),
    ]

    [cluster] = organizer.organize([], favorites)

    assert cluster.description == (
        "Contains 2 videos with average duration of 6 minutes from 1 channels across 1 categories"
    )
