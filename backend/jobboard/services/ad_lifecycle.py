"""
Lifecycle of a job ad: approval, expiry and sponsorship tier decay.
ALL visibility and tier changes must go through this module.
"""
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_

from jobboard.errors import JobBoardError, NotFound, storage_errors
from jobboard.models.job_ad import JobAd, AdTier, MAX_AD_ID

# Configure logger
logger = logging.getLogger(__name__)


class AdStatus(str, Enum):
    """Status derived from approved_at and expired"""
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    EXPIRED = "EXPIRED"


# Time a paid tier stays in place after approval before decaying to BASIC.
# WITH_COMPANY_LOGO and PINNED_FOR_60_DAYS have no automatic rule.
DEMOTION_TTLS: Dict[AdTier, timedelta] = {
    AdTier.PINNED_FOR_30_DAYS: timedelta(days=30),
    AdTier.PINNED_FOR_7_DAYS: timedelta(days=7),
    AdTier.SPONSORED_BACKGROUND: timedelta(days=30),
}


class InvalidTransitionError(JobBoardError):
    """Raised when an invalid tier transition is attempted"""
    pass


def is_visible(ad: JobAd) -> bool:
    """An ad is public iff it is approved and not expired."""
    return ad.approved_at is not None and not ad.expired


def visible_clause():
    """SQL form of is_visible()."""
    return and_(JobAd.approved_at.is_not(None), JobAd.expired.is_(False))


def ad_status(ad: JobAd) -> AdStatus:
    if ad.expired:
        return AdStatus.EXPIRED
    if ad.approved_at is not None:
        return AdStatus.APPROVED
    return AdStatus.PENDING_APPROVAL


async def get_ad(db: AsyncSession, ad_id: int) -> JobAd:
    """
    Load an ad by internal id.

    Raises:
        NotFound: If no ad has that id, including ids the id column can't hold
        QueryFailure: If the store fails
    """
    if not 0 < ad_id <= MAX_AD_ID:
        raise NotFound(f"Job ad {ad_id} not found")

    with storage_errors(f"load job ad {ad_id}"):
        result = await db.execute(
            select(JobAd).where(JobAd.id == ad_id)
        )
    ad = result.scalar_one_or_none()

    if not ad:
        raise NotFound(f"Job ad {ad_id} not found")

    return ad


async def approve(db: AsyncSession, ad_id: int) -> JobAd:
    """
    Make an ad publicly visible.

    Approving an already approved ad is a no-op and keeps the original
    approval time, so the tier TTLs keep counting from the first approval.

    Raises:
        NotFound: If the ad doesn't exist
    """
    ad = await get_ad(db, ad_id)

    if ad.approved_at is not None:
        logger.info(f"Job ad {ad_id} already approved at {ad.approved_at}")
        return ad

    ad.approved_at = datetime.utcnow()
    with storage_errors(f"approve job ad {ad_id}"):
        await db.commit()
        await db.refresh(ad)

    logger.info(
        f"Job ad transition: {AdStatus.PENDING_APPROVAL.value} → {AdStatus.APPROVED.value}",
        extra={"ad_id": ad_id, "ad_tier": ad.ad_tier, "approved_at": ad.approved_at.isoformat()},
    )

    return ad


async def disapprove(db: AsyncSession, ad_id: int) -> JobAd:
    """
    Withdraw an ad from public view (moderation or voluntary retraction).

    Raises:
        NotFound: If the ad doesn't exist or isn't approved
    """
    ad = await get_ad(db, ad_id)

    if ad.approved_at is None:
        raise NotFound(f"Job ad {ad_id} is not approved")

    ad.approved_at = None
    with storage_errors(f"disapprove job ad {ad_id}"):
        await db.commit()
        await db.refresh(ad)

    logger.info(
        f"Job ad transition: {AdStatus.APPROVED.value} → {AdStatus.PENDING_APPROVAL.value}",
        extra={"ad_id": ad_id, "ad_tier": ad.ad_tier},
    )

    return ad


async def mark_expired(db: AsyncSession, ad_id: int) -> JobAd:
    """
    Flag an ad as expired. Terminal: nothing in the core clears the flag.

    Raises:
        NotFound: If the ad doesn't exist
    """
    ad = await get_ad(db, ad_id)

    if ad.expired:
        return ad

    from_status = ad_status(ad)
    ad.expired = True
    with storage_errors(f"expire job ad {ad_id}"):
        await db.commit()
        await db.refresh(ad)

    logger.info(
        f"Job ad transition: {from_status.value} → {AdStatus.EXPIRED.value}",
        extra={"ad_id": ad_id},
    )

    return ad


async def demote(db: AsyncSession, cutoff: datetime, tier: AdTier) -> int:
    """
    Move every ad still on `tier` and approved at or before `cutoff` to BASIC.

    The tier is part of the WHERE clause, so concurrent or repeated calls only
    touch rows that still match: a second call with the same arguments
    returns 0.

    Args:
        db: Database session
        cutoff: Latest approval time that gets demoted
        tier: Tier to demote from

    Returns:
        Number of ads demoted

    Raises:
        InvalidTransitionError: If tier is BASIC
        QueryFailure: If the store fails
    """
    tier = AdTier(tier)
    if cutoff.tzinfo is not None:
        # approved_at is stored as naive UTC
        cutoff = cutoff.astimezone(timezone.utc).replace(tzinfo=None)
    if tier == AdTier.BASIC:
        raise InvalidTransitionError(f"Cannot demote {AdTier.BASIC.value} ads")

    with storage_errors(f"demote {tier.value} job ads"):
        result = await db.execute(
            update(JobAd)
            .where(
                and_(
                    JobAd.ad_tier == tier.value,
                    JobAd.approved_at <= cutoff,
                )
            )
            .values(ad_tier=AdTier.BASIC.value)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

    affected = result.rowcount
    logger.info(
        f"Demoted {affected} job ads from {tier.value} to {AdTier.BASIC.value}",
        extra={"tier": tier.value, "cutoff": cutoff.isoformat(), "affected": affected},
    )

    return affected


async def demote_expired_ads(
    db: AsyncSession,
    now: Optional[datetime] = None
) -> Dict[AdTier, int]:
    """
    Apply every rule of DEMOTION_TTLS once. Meant to be triggered periodically.

    Returns:
        Number of demoted ads per tier
    """
    now = now or datetime.utcnow()
    counts: Dict[AdTier, int] = {}

    for tier, ttl in DEMOTION_TTLS.items():
        logger.info(f"Attempting to demote {tier.value} job ads approved before {now - ttl}")
        counts[tier] = await demote(db, now - ttl, tier)

    return counts
