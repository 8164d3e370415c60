from collections import Counter
from collections.abc import Sequence

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.exceptions import InvalidRequestError
from vibecore.models.cluster import ContentCluster, FeatureVector
from vibecore.services.features.extractor import FEATURE_DIMENSION, FEATURE_NAMES

DURATION_INDEX = FEATURE_NAMES.index("duration_minutes")


class KMeansResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    labels: np.ndarray  # (n,) cluster index per input row
    centroids: np.ndarray  # (k, d)
    iterations: int
    converged: bool


def _pairwise_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Euclidean distance matrix of shape (n_points, n_centroids)."""
    return np.linalg.norm(points[:, None, :] - centroids[None, :, :], axis=2)


def _random_centroids(points: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    # Uniform within each dimension's observed range
    return rng.uniform(points.min(axis=0), points.max(axis=0), size=(k, points.shape[1]))


def _kmeans_plus_plus(points: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    chosen = [int(rng.integers(len(points)))]
    for _ in range(1, k):
        nearest = _pairwise_distances(points, points[chosen]).min(axis=1) ** 2
        total = nearest.sum()
        if total <= 0:
            chosen.append(int(rng.integers(len(points))))
            continue
        chosen.append(int(rng.choice(len(points), p=nearest / total)))
    return points[chosen].copy()


def _farthest_point(points: np.ndarray, k: int) -> np.ndarray:
    """Start at the point nearest the mean, then keep taking the point farthest from all picks."""
    first = int(np.argmin(np.linalg.norm(points - points.mean(axis=0), axis=1)))
    chosen = [first]
    for _ in range(1, k):
        nearest = _pairwise_distances(points, points[chosen]).min(axis=1)
        chosen.append(int(np.argmax(nearest)))
    return points[chosen].copy()


def initialize_centroids(
    points: np.ndarray, k: int, strategy: str = "farthest", rng: np.random.Generator | None = None
) -> np.ndarray:
    """
    Pick k starting centroids.

    Args:
        points: (n, d) input matrix
        k: Number of centroids
        strategy: "farthest" (deterministic), "kmeans++" or "random"
        rng: Random source for the randomized strategies

    Returns:
        (k, d) array of centroids
    """
    if strategy == "farthest":
        return _farthest_point(points, k)
    rng = rng if rng is not None else np.random.default_rng()
    if strategy == "kmeans++":
        return _kmeans_plus_plus(points, k, rng)
    if strategy == "random":
        return _random_centroids(points, k, rng)
    raise InvalidRequestError(f"Unknown centroid initialization strategy: {strategy}")


class ContentClusterer:
    """
    Partitions feature vectors into similarity clusters with k-means.

    Every input vector ends up in exactly one cluster. Clusters that lose all
    members keep a zero centroid instead of being dropped.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rng: np.random.Generator | None = None,
        init: str | None = None,
    ):
        """
        Initialize clusterer.

        Args:
            settings: Tunables (cluster bounds, iteration cap, threshold, seed)
            rng: Random source for randomized initialization; seeded from
                CLUSTER_SEED when omitted
            init: Initialization strategy, defaults to CLUSTER_INIT
        """
        self.settings = settings or default_settings
        self.rng = rng if rng is not None else np.random.default_rng(self.settings.CLUSTER_SEED)
        self.init = init or self.settings.CLUSTER_INIT

    def cluster_count(self, n_items: int, requested: int | None = None) -> int:
        """Clamp the requested cluster count to [2, min(MAX_CLUSTERS, n // MIN_CLUSTER_SIZE)]."""
        upper = max(2, min(self.settings.MAX_CLUSTERS, n_items // self.settings.MIN_CLUSTER_SIZE))
        k = upper if requested is None else max(2, min(requested, upper))
        return min(k, n_items)

    def fit(self, points: np.ndarray, k: int) -> KMeansResult:
        """
        Run Lloyd iterations until every centroid moves less than the
        convergence threshold or the iteration cap is reached.
        """
        centroids = initialize_centroids(points, k, self.init, self.rng)
        converged = False
        iterations = 0

        for iterations in range(1, self.settings.MAX_ITERATIONS + 1):
            labels = np.argmin(_pairwise_distances(points, centroids), axis=1)
            updated = np.zeros_like(centroids)
            for j in range(k):
                members = points[labels == j]
                if len(members):
                    updated[j] = members.mean(axis=0)

            shift = np.linalg.norm(updated - centroids, axis=1)
            centroids = updated
            if np.all(shift < self.settings.CONVERGENCE_THRESHOLD):
                converged = True
                break

        if not converged:
            logger.warning(f"k-means stopped at the iteration cap ({iterations}) without converging")

        labels = np.argmin(_pairwise_distances(points, centroids), axis=1)
        return KMeansResult(labels=labels, centroids=centroids, iterations=iterations, converged=converged)

    def cluster(self, vectors: Sequence[FeatureVector], k: int | None = None) -> list[ContentCluster]:
        """
        Cluster feature vectors.

        Args:
            vectors: Items to group; all must share one dimensionality and have
                distinct video ids
            k: Requested number of clusters, clamped to the allowed range

        Returns:
            List of ContentCluster, one per centroid
        """
        if not vectors:
            return []

        points = self._as_matrix(vectors)
        if len(vectors) < self.settings.MIN_CLUSTER_SIZE:
            logger.debug(f"Only {len(vectors)} items, skipping k-means")
            return [self._single_cluster(vectors, points)]

        k = self.cluster_count(len(vectors), k)
        if k < 2:
            return [self._single_cluster(vectors, points)]

        result = self.fit(points, k)
        logger.debug(f"k-means: {len(vectors)} items, k={k}, {result.iterations} iterations")

        clusters = []
        for j in range(k):
            member_idx = np.flatnonzero(result.labels == j)
            clusters.append(self._build_cluster(j, vectors, points, member_idx))
        return clusters

    @staticmethod
    def _as_matrix(vectors: Sequence[FeatureVector]) -> np.ndarray:
        dimensions = {v.dimension for v in vectors}
        if len(dimensions) != 1:
            raise InvalidRequestError(f"Feature vectors must share one dimensionality, got {sorted(dimensions)}")
        duplicates = [video_id for video_id, count in Counter(v.video_id for v in vectors).items() if count > 1]
        if duplicates:
            raise InvalidRequestError(f"Feature vectors must have unique video ids, repeated: {sorted(duplicates)}")
        return np.array([v.features for v in vectors], dtype=float)

    def _single_cluster(self, vectors: Sequence[FeatureVector], points: np.ndarray) -> ContentCluster:
        return ContentCluster(
            id="cluster_0",
            name="All Content",
            description="All your videos in one collection",
            member_video_ids=[v.video_id for v in vectors],
            centroid=points.mean(axis=0).tolist(),
            confidence=1.0,
        )

    def _build_cluster(
        self,
        index: int,
        vectors: Sequence[FeatureVector],
        points: np.ndarray,
        member_idx: np.ndarray,
    ) -> ContentCluster:
        if len(member_idx) == 0:
            return ContentCluster(
                id=f"cluster_{index}",
                name="Empty Cluster",
                description="No videos in this cluster",
                member_video_ids=[],
                centroid=[0.0] * points.shape[1],
                confidence=0.0,
            )

        members = [vectors[i] for i in member_idx]
        centroid = points[member_idx].mean(axis=0)
        return ContentCluster(
            id=f"cluster_{index}",
            name=self._cluster_name(members),
            description=self._cluster_description(points[member_idx]),
            member_video_ids=[v.video_id for v in members],
            centroid=centroid.tolist(),
            confidence=self._cluster_confidence(points[member_idx], points, centroid),
        )

    @staticmethod
    def _cluster_name(members: Sequence[FeatureVector]) -> str:
        counts = Counter(m.category for m in members if m.category)
        if not counts:
            return "Mixed Content"
        return counts.most_common(1)[0][0]

    @staticmethod
    def _cluster_description(member_points: np.ndarray) -> str:
        if member_points.shape[1] != FEATURE_DIMENSION:
            return f"Contains {len(member_points)} videos"
        avg_minutes = int(member_points[:, DURATION_INDEX].mean())
        return f"Contains {len(member_points)} videos with average duration of {avg_minutes} minutes"

    @staticmethod
    def _cluster_confidence(member_points: np.ndarray, all_points: np.ndarray, centroid: np.ndarray) -> float:
        """1 - (mean member distance to centroid / mean distance of all points to centroid)."""
        intra = float(np.linalg.norm(member_points - centroid, axis=1).mean())
        overall = float(np.linalg.norm(all_points - centroid, axis=1).mean())
        if overall <= 0:
            return 1.0
        return max(0.0, min(1.0, 1.0 - intra / overall))
