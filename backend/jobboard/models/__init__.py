"""Database models"""
from jobboard.models.job_ad import JobAd, AdTier, PINNED_TIERS

__all__ = [
    "JobAd",
    "AdTier",
    "PINNED_TIERS",
]
