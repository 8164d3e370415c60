from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vibecore.core.version import __version__


class Settings(BaseSettings):
    """Pipeline tunables loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production"] = "production"
    # Hour-of-day for history and context is read in this zone
    TIMEZONE: str = "UTC"

    # Scoring
    MIN_CONFIDENCE_THRESHOLD: float = Field(default=0.3, ge=0.0, le=1.0)
    ENGAGEMENT_WEIGHT: float = Field(default=0.5, ge=0.0, le=1.0)
    DIVERSITY_WEIGHT: float = Field(default=0.3, ge=0.0, le=1.0)
    CONFIDENCE_WEIGHT: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("CONFIDENCE_WEIGHT", "FRESHNESS_WEIGHT"),
    )
    FRESHNESS_DECAY_DAYS: float = Field(default=30.0, gt=0.0)
    FRESHNESS_NEUTRAL_SCORE: float = Field(default=0.7, ge=0.0, le=1.0)

    # Profile
    FAVORITE_BOOST: float = 1.5
    DEFAULT_DURATION_MINUTES: float = 5.0
    SPARSE_HISTORY_SIZE: int = 5

    # Clustering
    MAX_CLUSTERS: int = Field(default=8, ge=2)
    MIN_CLUSTER_SIZE: int = Field(default=3, ge=1)
    MAX_ITERATIONS: int = Field(default=50, ge=1)
    CONVERGENCE_THRESHOLD: float = Field(default=0.01, gt=0.0)
    CLUSTER_INIT: Literal["farthest", "kmeans++", "random"] = "farthest"
    CLUSTER_SEED: int | None = None

    # Ranking
    CATEGORY_CAP: int = Field(default=3, ge=1)
    CHANNEL_CAP: int = Field(default=2, ge=1)
    DEFAULT_MAX_RESULTS: int = Field(default=20, ge=0)


settings = Settings()

APP_VERSION = __version__
