"""
Profile System.

Turns a watch-history snapshot into a normalized preference profile.
"""

from vibecore.services.profile.builder import ProfileBuilder, default_profile, duration_bucket
from vibecore.services.profile.classifier import CategoryClassifier, KeywordCategoryClassifier

__all__ = [
    "ProfileBuilder",
    "CategoryClassifier",
    "KeywordCategoryClassifier",
    "default_profile",
    "duration_bucket",
]
