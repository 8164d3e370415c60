"""Tests for k-means content clustering."""

import numpy as np
import pytest

from vibecore.core.config import Settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.cluster import FeatureVector
from vibecore.services.clustering import ContentClusterer, initialize_centroids
from vibecore.services.clustering import kmeans as kmeans_module

GROUPS = {
    "Music": [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0)],
    "News": [(50.0, 50.0), (50.0, 51.0), (51.0, 50.0)],
    "Gaming": [(100.0, 0.0), (100.0, 1.0), (101.0, 0.0)],
}


@pytest.fixture
def grouped_vectors() -> list[FeatureVector]:
    vectors = []
    for category, points in GROUPS.items():
        for i, point in enumerate(points):
            vectors.append(FeatureVector(video_id=f"{category}-{i}", features=point, category=category))
    return vectors


def test_empty_input_returns_no_clusters(test_settings):
    assert ContentClusterer(settings=test_settings).cluster([]) == []


def test_too_few_items_form_single_cluster(test_settings):
    vectors = [
        FeatureVector(video_id="a", features=(1.0, 2.0)),
        FeatureVector(video_id="b", features=(3.0, 4.0)),
    ]

    clusters = ContentClusterer(settings=test_settings).cluster(vectors, k=5)

    assert len(clusters) == 1
    assert clusters[0].member_video_ids == ["a", "b"]
    assert clusters[0].confidence == 1.0
    assert clusters[0].centroid == [2.0, 3.0]


def test_every_item_lands_in_exactly_one_cluster(test_settings, grouped_vectors):
    clusters = ContentClusterer(settings=test_settings).cluster(grouped_vectors, k=3)

    members = [video_id for cluster in clusters for video_id in cluster.member_video_ids]
    assert sorted(members) == sorted(v.video_id for v in grouped_vectors)
    assert len(members) == len(set(members))


def test_separated_groups_are_recovered_and_named(test_settings, grouped_vectors):
    clusters = ContentClusterer(settings=test_settings).cluster(grouped_vectors, k=3)

    assert sorted(c.name for c in clusters) == ["Gaming", "Music", "News"]
    for cluster in clusters:
        assert cluster.size == 3
        assert all(video_id.startswith(cluster.name) for video_id in cluster.member_video_ids)
        assert 0.9 < cluster.confidence <= 1.0


def test_requested_k_is_clamped(test_settings):
    clusterer = ContentClusterer(settings=test_settings)
    assert clusterer.cluster_count(100) == 8
    assert clusterer.cluster_count(9) == 3
    assert clusterer.cluster_count(9, 20) == 3
    assert clusterer.cluster_count(6, 5) == 2
    assert clusterer.cluster_count(40, 1) == 2
    assert clusterer.cluster_count(3) == 2


def test_fit_converges_on_separated_data(test_settings, grouped_vectors):
    points = np.array([v.features for v in grouped_vectors])
    result = ContentClusterer(settings=test_settings).fit(points, 3)

    assert result.converged
    assert 1 <= result.iterations <= test_settings.MAX_ITERATIONS
    assert result.centroids.shape == (3, 2)
    assert len(set(result.labels.tolist())) == 3


def test_fit_stops_at_iteration_cap():
    settings = Settings(_env_file=None, MAX_ITERATIONS=1)
    points = np.array([p for group in GROUPS.values() for p in group])

    result = ContentClusterer(settings=settings).fit(points, 3)

    assert result.iterations == 1
    assert not result.converged


def test_empty_cluster_keeps_zero_centroid(test_settings, monkeypatch):
    def far_centroids(points, k, strategy="farthest", rng=None):
        return np.array([[100.0, 100.0], [1000.0, 1000.0]])

    monkeypatch.setattr(kmeans_module, "initialize_centroids", far_centroids)
    vectors = [
        FeatureVector(video_id=f"v{i}", features=point, category="Music")
        for i, point in enumerate([(100.0, 100.0), (100.0, 101.0), (101.0, 100.0), (101.0, 101.0)])
    ]

    clusters = ContentClusterer(settings=test_settings).cluster(vectors, k=2)

    assert len(clusters) == 2
    full, empty = clusters
    assert full.size == 4
    assert empty.name == "Empty Cluster"
    assert empty.member_video_ids == []
    assert empty.centroid == [0.0, 0.0]
    assert empty.confidence == 0.0


def test_default_initialization_is_deterministic(grouped_vectors):
    settings = Settings(_env_file=None)
    first = ContentClusterer(settings=settings).cluster(grouped_vectors, k=3)
    second = ContentClusterer(settings=settings).cluster(grouped_vectors, k=3)
    assert first == second


@pytest.mark.parametrize("strategy", ["kmeans++", "random"])
def test_seeded_randomized_initialization_is_reproducible(test_settings, grouped_vectors, strategy):
    first = ContentClusterer(settings=test_settings, init=strategy).cluster(grouped_vectors, k=3)
    second = ContentClusterer(settings=test_settings, init=strategy).cluster(grouped_vectors, k=3)

    assert first == second
    members = sorted(video_id for cluster in first for video_id in cluster.member_video_ids)
    assert members == sorted(v.video_id for v in grouped_vectors)


def test_injected_random_source(grouped_vectors):
    clusterer = ContentClusterer(settings=Settings(_env_file=None), rng=np.random.default_rng(11), init="kmeans++")
    clusters = clusterer.cluster(grouped_vectors, k=3)
    assert sum(c.size for c in clusters) == len(grouped_vectors)


def test_unknown_initialization_strategy():
    with pytest.raises(InvalidRequestError):
        initialize_centroids(np.zeros((4, 2)), 2, "nearest")


def test_mismatched_dimensions_rejected(test_settings):
    vectors = [
        FeatureVector(video_id="a", features=(1.0, 2.0)),
        FeatureVector(video_id="b", features=(1.0, 2.0, 3.0)),
        FeatureVector(video_id="c", features=(1.0, 2.0)),
    ]
    with pytest.raises(InvalidRequestError):
        ContentClusterer(settings=test_settings).cluster(vectors)


def test_mixed_content_name_without_categories(test_settings):
    vectors = [FeatureVector(video_id=f"v{i}", features=(float(i), 0.0)) for i in range(6)]
    clusters = ContentClusterer(settings=test_settings).cluster(vectors, k=2)
    assert {c.name for c in clusters} == {"Mixed Content"}


def test_repeated_video_ids_rejected(test_settings):
    vectors = [FeatureVector(video_id="same", features=(float(i), 0.0)) for i in range(6)]
    with pytest.raises(InvalidRequestError):
        ContentClusterer(settings=test_settings).cluster(vectors, k=2)
