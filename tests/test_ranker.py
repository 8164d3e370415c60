"""Tests for diversity-constrained ranking."""

import pytest

from vibecore.core.config import Settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.scoring import ScoredCandidate
from vibecore.services.recommendation import DiversityRanker


def scored(video_id: str, category: str, channel_id: str, engagement: float) -> ScoredCandidate:
    return ScoredCandidate(
        video_id=video_id,
        category=category,
        channel_id=channel_id,
        engagement_score=engagement,
        confidence_score=0.8,
        diversity_score=1.0,
    )


@pytest.fixture
def ranker(test_settings):
    return DiversityRanker(settings=test_settings)


def test_category_cap(ranker):
    candidates = [scored(f"m{i}", "Music", f"ch-{i}", 0.9 - i * 0.01) for i in range(5)]
    candidates.append(scored("n1", "News", "ch-x", 0.1))

    ranked = ranker.rank(candidates, 10)

    assert [c.video_id for c in ranked] == ["m0", "m1", "m2", "n1"]


def test_channel_cap(ranker):
    candidates = [
        scored("a", "Music", "ch-1", 0.9),
        scored("b", "News", "ch-1", 0.8),
        scored("c", "Comedy", "ch-1", 0.7),
        scored("d", "Gaming", "ch-2", 0.6),
    ]

    ranked = ranker.rank(candidates, 10)

    assert [c.video_id for c in ranked] == ["a", "b", "d"]


def test_missing_channel_ids_share_one_cap(ranker):
    candidates = [scored(str(i), f"Cat{i}", "", 0.5) for i in range(5)]

    ranked = ranker.rank(candidates, 10)

    assert [c.video_id for c in ranked] == ["0", "1"]


def test_orders_by_engagement_and_keeps_ties_stable(ranker):
    candidates = [
        scored("low", "Music", "ch-1", 0.2),
        scored("tie-1", "News", "ch-2", 0.6),
        scored("high", "Comedy", "ch-3", 0.9),
        scored("tie-2", "Gaming", "ch-4", 0.6),
    ]

    ranked = ranker.rank(candidates, 10)

    assert [c.video_id for c in ranked] == ["high", "tie-1", "tie-2", "low"]


def test_result_size_limit(ranker):
    candidates = [scored(str(i), f"Cat{i}", f"ch-{i}", 0.5) for i in range(10)]
    assert len(ranker.rank(candidates, 4)) == 4
    assert ranker.rank(candidates, 0) == []
    assert ranker.rank([], 5) == []


def test_negative_limit_rejected(ranker):
    with pytest.raises(InvalidRequestError):
        ranker.rank([], -1)


def test_caps_are_configurable():
    ranker = DiversityRanker(settings=Settings(_env_file=None, CATEGORY_CAP=1, CHANNEL_CAP=5))
    candidates = [scored(f"m{i}", "Music", "ch-1", 0.5) for i in range(3)]
    assert [c.video_id for c in ranker.rank(candidates, 10)] == ["m0"]
