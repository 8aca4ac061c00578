"""
Public job ad endpoints.
Listing search, pinned ads, ad pages and draft submission.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.database import get_db
from jobboard.errors import NotFound, QueryFailure
from jobboard.models.job_ad import JobAd
from jobboard.schemas.job_ad import (
    JobAdCreate,
    JobAdResponse,
    JobAdConfirmationResponse,
    SearchResponse,
)
from jobboard.services import ads as ads_service
from jobboard.services.obfuscator import obfuscate
from jobboard.services.pagination import page_links
from jobboard.services.search import search
from jobboard.services.sponsorship import pinned_ads

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_DETAIL = "Oops! An internal error has occurred"


def ad_fields(ad: JobAd) -> dict:
    """Column values of an ad with the internal id swapped for a public token."""
    fields = {column.name: getattr(ad, column.name) for column in JobAd.__table__.columns}
    fields["token"] = obfuscate(fields.pop("id"))
    return fields


def to_response(ad: JobAd) -> JobAdResponse:
    return JobAdResponse(**ad_fields(ad))


def to_confirmation_response(ad: JobAd) -> JobAdConfirmationResponse:
    return JobAdConfirmationResponse(**ad_fields(ad))


def internal_error() -> HTTPException:
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)


# ============================================================
# LISTING
# ============================================================

@router.get("/ads", response_model=SearchResponse)
async def list_ads(
    location: str = Query("", description="Location substring, case-insensitive"),
    tag: str = Query("", description="Keywords, any of which may match"),
    page: int = Query(1, description="1-indexed page number"),
    salary: int = Query(0, ge=0, description="Minimum yearly salary (0 for any)"),
    currency: str = Query("", description="Salary currency symbol, used with salary"),
    db: AsyncSession = Depends(get_db)
):
    """
    Search the public listing.

    Pinned ads are returned on every page next to the paginated organic
    results. When nothing matches, remote roles are returned instead and
    `fallback` is set.
    """
    page = max(page, 1)
    page_size = settings.jobs_per_page

    try:
        result = await search(db, location, tag, page, page_size, salary=salary, currency=currency)
        pinned = await pinned_ads(db)
    except QueryFailure:
        raise internal_error()

    logger.info(
        f"Listed {len(result.ads)} of {result.total_count} job ads "
        f"(location={location!r}, tag={tag!r}, salary={salary} {currency}, "
        f"page={page}, fallback={result.fallback})"
    )

    return SearchResponse(
        ads=[to_response(ad) for ad in result.ads],
        pinned=[to_response(ad) for ad in pinned],
        total_count=result.total_count,
        page=page,
        page_size=page_size,
        pages=page_links(result.total_count, page_size, page),
        fallback=result.fallback,
    )


@router.get("/ads/pinned", response_model=List[JobAdResponse])
async def list_pinned_ads(db: AsyncSession = Depends(get_db)):
    """Sponsored and pinned ads, newest approval first."""
    try:
        pinned = await pinned_ads(db)
    except QueryFailure:
        raise internal_error()

    return [to_response(ad) for ad in pinned]


# ============================================================
# SUBMISSION
# ============================================================

@router.post("/ads", response_model=JobAdConfirmationResponse, status_code=201)
async def submit_ad(
    submission: JobAdCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Submit a new ad. It stays hidden until an administrator approves it.

    The response carries the external id the submitter needs for payment.
    """
    try:
        ad = await ads_service.create_draft(db, submission)
    except QueryFailure:
        raise internal_error()

    return to_confirmation_response(ad)


# ============================================================
# LOOKUPS
# ============================================================

@router.get("/ads/external/{external_id}", response_model=JobAdConfirmationResponse)
async def get_ad_by_external_id(
    external_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Look an ad up by its external id (used by payment confirmations).
    """
    try:
        ad = await ads_service.get_by_external_id(db, external_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Job ad not found")
    except QueryFailure:
        raise internal_error()

    return to_confirmation_response(ad)


@router.get("/ads/{slug}", response_model=JobAdResponse)
async def get_ad(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    """Public ad page data. Pending and expired ads are not found."""
    try:
        ad = await ads_service.get_by_slug(db, slug)
    except NotFound:
        raise HTTPException(status_code=404, detail="Job ad not found")
    except QueryFailure:
        raise internal_error()

    return to_response(ad)


@router.get("/companies/{company}/ads", response_model=List[JobAdResponse])
async def list_company_ads(
    company: str,
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """Visible ads of one company, newest first."""
    try:
        company_ads = await ads_service.company_ads(db, company, limit)
    except QueryFailure:
        raise internal_error()

    return [to_response(ad) for ad in company_ads]
