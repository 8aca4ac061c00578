"""
Pinned and sponsored ads.

These are served outside the paginated listing, on every page, newest
approval first. The set stays small because paid tiers decay to BASIC.
"""
import logging
from typing import Iterable, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from jobboard.errors import QueryFailure
from jobboard.models.job_ad import JobAd, AdTier, PINNED_TIERS
from jobboard.services.ad_lifecycle import is_visible, visible_clause

logger = logging.getLogger(__name__)


def is_pinned(ad: JobAd) -> bool:
    return AdTier(ad.ad_tier) in PINNED_TIERS


def split_pinned(ads: Iterable[JobAd]) -> Tuple[List[JobAd], List[JobAd]]:
    """
    Partition visible ads into (pinned, organic) buckets.

    Pinned ads are ordered by approval time, newest first; organic ads keep
    their incoming order. Invisible ads are dropped.
    """
    pinned: List[JobAd] = []
    organic: List[JobAd] = []
    for ad in ads:
        if not is_visible(ad):
            continue
        (pinned if is_pinned(ad) else organic).append(ad)

    pinned.sort(key=lambda ad: ad.approved_at, reverse=True)
    return pinned, organic


async def pinned_ads(db: AsyncSession) -> List[JobAd]:
    """Every visible ad on a pinned tier, newest approval first."""
    try:
        result = await db.execute(
            select(JobAd)
            .where(
                visible_clause(),
                JobAd.ad_tier.in_([tier.value for tier in PINNED_TIERS]),
            )
            .order_by(JobAd.approved_at.desc(), JobAd.id.desc())
        )
    except SQLAlchemyError as e:
        logger.exception("Pinned job ads query failed")
        raise QueryFailure("Unable to retrieve pinned job ads") from e

    return list(result.scalars().all())
