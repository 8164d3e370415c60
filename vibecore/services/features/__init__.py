from vibecore.services.features.extractor import FEATURE_DIMENSION, FEATURE_NAMES, FeatureExtractor

__all__ = ["FeatureExtractor", "FEATURE_NAMES", "FEATURE_DIMENSION"]
