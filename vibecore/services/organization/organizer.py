from collections import Counter
from collections.abc import Sequence
from datetime import timedelta

from loguru import logger

from vibecore.core.config import Settings, settings as default_settings
from vibecore.core.constants import (
    NEW_CATEGORY_MIN_FAVORITES,
    ORGANIZATION_SUGGESTION_LIMIT,
    RECENTLY_WATCHED_CONFIDENCE,
    RECENTLY_WATCHED_DAYS,
    RECENTLY_WATCHED_MIN_VIDEOS,
    SMART_PLAYLIST_LIMIT,
    SMART_PLAYLIST_MIN_CONFIDENCE,
    UNCATEGORIZED_FAVORITES_THRESHOLD,
    UNCATEGORIZED_LABELS,
)
from vibecore.models.cluster import ContentCluster, FeatureVector, OrganizationSuggestion, SmartPlaylistSuggestion
from vibecore.models.interaction import FavoriteRecord, InteractionRecord
from vibecore.services.clustering.kmeans import ContentClusterer
from vibecore.services.features.extractor import FeatureExtractor
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier
from vibecore.utils import Clock, epoch_ms, mean, parse_duration_minutes, utc_now


class ContentOrganizer:
    """
    Groups a user's library into clusters and suggests playlists and
    organization fixes.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        classifier: CategoryClassifier | None = None,
        clusterer: ContentClusterer | None = None,
        clock: Clock = utc_now,
    ):
        self.settings = settings or default_settings
        self.classifier = classifier or KeywordCategoryClassifier()
        self.extractor = FeatureExtractor(self.classifier, self.settings)
        self.clusterer = clusterer or ContentClusterer(self.settings)
        self.clock = clock

    def library_vectors(
        self, history: Sequence[InteractionRecord], favorites: Sequence[FavoriteRecord]
    ) -> list[FeatureVector]:
        """One vector per distinct video; history wins over favorites for duplicates."""
        vectors: dict[str, FeatureVector] = {}
        for item in history:
            if item.video_id not in vectors:
                vectors[item.video_id] = self.extractor.vectorize(
                    item.video_id, item.title, item.channel_title, item.duration_text
                )
        for fav in favorites:
            if fav.video_id not in vectors:
                category = None if fav.category.strip().lower() in UNCATEGORIZED_LABELS else fav.category
                vectors[fav.video_id] = self.extractor.vectorize(
                    fav.video_id, fav.title, fav.channel_title, fav.duration_text, category
                )
        return list(vectors.values())

    def organize(
        self,
        history: Sequence[InteractionRecord],
        favorites: Sequence[FavoriteRecord],
        k: int | None = None,
    ) -> list[ContentCluster]:
        """
        Cluster the library.

        Args:
            history: Watch-history snapshot
            favorites: Favorites snapshot
            k: Requested cluster count (clamped)

        Returns:
            Named and described clusters, empty when the library is empty
        """
        vectors = self.library_vectors(history, favorites)
        if not vectors:
            return []

        clusters = self.clusterer.cluster(vectors, k)
        records = self._records_by_id(history, favorites)
        categories = {v.video_id: v.category for v in vectors}
        described = [
            c.model_copy(update={"description": self._describe(c, records, categories)}) for c in clusters
        ]
        logger.info(f"Organized {len(vectors)} videos into {len(described)} clusters")
        return described

    def smart_playlists(
        self,
        history: Sequence[InteractionRecord],
        favorites: Sequence[FavoriteRecord],
    ) -> list[SmartPlaylistSuggestion]:
        """Playlist suggestions from confident clusters plus recent viewing, best first."""
        suggestions = [
            SmartPlaylistSuggestion(
                name=f"Smart Playlist: {cluster.name}",
                description=cluster.description,
                video_ids=cluster.member_video_ids,
                reason="Based on content similarity and viewing patterns",
                confidence=cluster.confidence,
            )
            for cluster in self.organize(history, favorites)
            if cluster.size >= self.settings.MIN_CLUSTER_SIZE and cluster.confidence > SMART_PLAYLIST_MIN_CONFIDENCE
        ]

        recent = self._recently_watched(history)
        if recent:
            suggestions.append(recent)

        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions[:SMART_PLAYLIST_LIMIT]

    def organization_suggestions(self, favorites: Sequence[FavoriteRecord]) -> list[OrganizationSuggestion]:
        suggestions: list[OrganizationSuggestion] = []

        uncategorized = [f for f in favorites if f.category.strip().lower() in UNCATEGORIZED_LABELS]
        if len(uncategorized) > UNCATEGORIZED_FAVORITES_THRESHOLD:
            suggestions.append(
                OrganizationSuggestion(
                    type="categorize_favorites",
                    title="Organize Uncategorized Favorites",
                    description=f"You have {len(uncategorized)} uncategorized favorites that could be organized",
                    confidence=0.9,
                    action_data={"count": len(uncategorized)},
                )
            )

        filed = {f.category for f in favorites}
        inferred = Counter(self.classifier.classify(f.title) for f in favorites)
        for category, count in inferred.items():
            if count >= NEW_CATEGORY_MIN_FAVORITES and category not in filed:
                suggestions.append(
                    OrganizationSuggestion(
                        type="create_category",
                        title=f"Create '{category}' Category",
                        description=f"You have {count} videos that could be organized under '{category}'",
                        confidence=0.8,
                        action_data={"category": category, "count": count},
                    )
                )

        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions[:ORGANIZATION_SUGGESTION_LIMIT]

    def _recently_watched(self, history: Sequence[InteractionRecord]) -> SmartPlaylistSuggestion | None:
        cutoff = epoch_ms(self.clock() - timedelta(days=RECENTLY_WATCHED_DAYS))
        recent = list(dict.fromkeys(item.video_id for item in history if item.watched_at_epoch_ms >= cutoff))
        if len(recent) < RECENTLY_WATCHED_MIN_VIDEOS:
            return None
        return SmartPlaylistSuggestion(
            name="Recently Watched",
            description="Videos you've watched in the past week",
            video_ids=recent,
            reason="Based on recent viewing activity",
            confidence=RECENTLY_WATCHED_CONFIDENCE,
        )

    @staticmethod
    def _records_by_id(
        history: Sequence[InteractionRecord], favorites: Sequence[FavoriteRecord]
    ) -> dict[str, InteractionRecord | FavoriteRecord]:
        records: dict[str, InteractionRecord | FavoriteRecord] = {}
        for record in [*history, *favorites]:
            records.setdefault(record.video_id, record)
        return records

    def _describe(
        self,
        cluster: ContentCluster,
        records: dict[str, InteractionRecord | FavoriteRecord],
        categories: dict[str, str],
    ) -> str:
        if not cluster.member_video_ids:
            return cluster.description

        members = [records[video_id] for video_id in cluster.member_video_ids if video_id in records]
        avg_minutes = mean(
            parse_duration_minutes(m.duration_text, self.settings.DEFAULT_DURATION_MINUTES) for m in members
        )
        channels = {m.channel_title for m in members}
        member_categories = {categories[m.video_id] for m in members}
        return (
            f"Contains {len(members)} videos with average duration of {int(avg_minutes)} minutes "
            f"from {len(channels)} channels across {len(member_categories)} categories"
        )
