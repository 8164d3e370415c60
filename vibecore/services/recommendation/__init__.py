from vibecore.services.recommendation.engine import RecommendationPipeline
from vibecore.services.recommendation.freshness import freshness_score
from vibecore.services.recommendation.ranker import DiversityRanker
from vibecore.services.recommendation.scorer import PredictiveScorer

__all__ = ["RecommendationPipeline", "PredictiveScorer", "DiversityRanker", "freshness_score"]
