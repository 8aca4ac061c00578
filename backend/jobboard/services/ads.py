"""
Job ad drafts and lookups.
Submission, moderation queue and per-company listings.
"""
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from jobboard.errors import NotFound, storage_errors
from jobboard.models.job_ad import JobAd
from jobboard.schemas.job_ad import JobAdCreate
from jobboard.services.ad_lifecycle import get_ad, visible_clause

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def make_slug(title: str, company: str, created_at: datetime) -> str:
    """
    Build the URL segment of an ad: "Senior Go Dev", "Acme" -> "senior-go-dev-acme-1700000000".
    """
    unix_time = int(created_at.replace(tzinfo=timezone.utc).timestamp())
    text = f"{title} {company} {unix_time}".lower()
    return _NON_SLUG_CHARS.sub("-", text).strip("-")


async def create_draft(db: AsyncSession, submission: JobAdCreate) -> JobAd:
    """
    Save a submitted ad as a draft awaiting approval.

    The external id is generated here once and never changes; payment
    confirmations use it to find the ad again.
    """
    created_at = datetime.utcnow()
    ad = JobAd(
        external_id=uuid.uuid4().hex,
        slug=make_slug(submission.title, submission.company, created_at),
        created_at=created_at,
        **submission.model_dump(exclude={"ad_tier"}),
        ad_tier=submission.ad_tier.value,
    )

    db.add(ad)
    with storage_errors("save draft job ad"):
        await db.commit()
        await db.refresh(ad)

    logger.info(f"Created draft job ad {ad.id}: {ad.title} at {ad.company} ({ad.ad_tier})")

    return ad


async def get_by_external_id(db: AsyncSession, external_id: str) -> JobAd:
    with storage_errors(f"look up job ad by external id {external_id}"):
        result = await db.execute(
            select(JobAd).where(JobAd.external_id == external_id)
        )
    ad = result.scalar_one_or_none()

    if not ad:
        raise NotFound(f"Job ad with external id {external_id} not found")

    return ad


async def get_by_slug(db: AsyncSession, slug: str) -> JobAd:
    """Public lookup: only visible ads resolve."""
    with storage_errors(f"look up job ad {slug}"):
        result = await db.execute(
            select(JobAd).where(JobAd.slug == slug, visible_clause())
        )
    ad = result.scalar_one_or_none()

    if not ad:
        raise NotFound(f"Job ad {slug} not found")

    return ad


async def list_pending(db: AsyncSession) -> List[JobAd]:
    """Ads waiting for moderation, oldest first."""
    with storage_errors("list pending job ads"):
        result = await db.execute(
            select(JobAd)
            .where(JobAd.approved_at.is_(None), JobAd.expired.is_(False))
            .order_by(JobAd.created_at.asc(), JobAd.id.asc())
        )
    return list(result.scalars().all())


async def company_ads(
    db: AsyncSession,
    company: str,
    limit: Optional[int] = 50
) -> List[JobAd]:
    """Visible ads of one company, newest first."""
    query = (
        select(JobAd)
        .where(visible_clause(), JobAd.company == company)
        .order_by(JobAd.created_at.desc(), JobAd.approved_at.desc())
    )
    if limit:
        query = query.limit(limit)

    with storage_errors(f"list job ads of {company}"):
        result = await db.execute(query)
    return list(result.scalars().all())


async def delete_ad(db: AsyncSession, ad_id: int) -> None:
    """
    Remove an ad for good.

    Raises:
        NotFound: If the ad doesn't exist
    """
    ad = await get_ad(db, ad_id)

    with storage_errors(f"delete job ad {ad_id}"):
        await db.delete(ad)
        await db.commit()

    logger.warning(f"Deleted job ad {ad_id} ({ad.slug})")
