"""
Administrative job ad endpoints.
Moderation, expiry and tier demotion. Ads are addressed by public token.

Access control is applied in front of this router.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.database import get_db
from jobboard.errors import NotFound, QueryFailure
from jobboard.models.job_ad import JobAd
from jobboard.schemas.job_ad import (
    JobAdAdminResponse,
    DemoteRequest,
    DemoteResponse,
    DemoteSweepResponse,
)
from jobboard.api.ads import ad_fields, internal_error
from jobboard.services import ad_lifecycle
from jobboard.services import ads as ads_service
from jobboard.services.obfuscator import InvalidToken, reveal

logger = logging.getLogger(__name__)
router = APIRouter()


def to_admin_response(ad: JobAd) -> JobAdAdminResponse:
    return JobAdAdminResponse(**ad_fields(ad), status=ad_lifecycle.ad_status(ad))


def ad_id_from_token(token: str) -> int:
    """Reveal a token, treating malformed ones as unknown ads."""
    try:
        return reveal(token)
    except InvalidToken:
        logger.info(f"Rejected malformed job ad token {token[:32]!r}")
        raise HTTPException(status_code=404, detail="Job ad not found")


# ============================================================
# MODERATION
# ============================================================

@router.get("/ads/pending", response_model=List[JobAdAdminResponse])
async def list_pending_ads(db: AsyncSession = Depends(get_db)):
    """Ads waiting for approval, oldest first."""
    try:
        pending = await ads_service.list_pending(db)
    except QueryFailure:
        raise internal_error()

    return [to_admin_response(ad) for ad in pending]


@router.post("/ads/{token}/approve", response_model=JobAdAdminResponse)
async def approve_ad(token: str, db: AsyncSession = Depends(get_db)):
    """
    Publish an ad. Approving an already approved ad changes nothing.
    """
    ad_id = ad_id_from_token(token)
    try:
        ad = await ad_lifecycle.approve(db, ad_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QueryFailure:
        raise internal_error()

    return to_admin_response(ad)


@router.post("/ads/{token}/disapprove", response_model=JobAdAdminResponse)
async def disapprove_ad(token: str, db: AsyncSession = Depends(get_db)):
    """
    Take an approved ad down. Returns 404 if the ad isn't approved.
    """
    ad_id = ad_id_from_token(token)
    try:
        ad = await ad_lifecycle.disapprove(db, ad_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QueryFailure:
        raise internal_error()

    return to_admin_response(ad)


@router.post("/ads/{token}/expire", response_model=JobAdAdminResponse)
async def expire_ad(token: str, db: AsyncSession = Depends(get_db)):
    """Mark an ad as expired (stale ad sweep)."""
    ad_id = ad_id_from_token(token)
    try:
        ad = await ad_lifecycle.mark_expired(db, ad_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QueryFailure:
        raise internal_error()

    return to_admin_response(ad)


@router.delete("/ads/{token}", status_code=204)
async def delete_ad(token: str, db: AsyncSession = Depends(get_db)):
    """
    Delete an ad permanently.

    Prefer disapprove or expire: deleted ads can't be recovered and their
    external id stops resolving for payment confirmations.
    """
    ad_id = ad_id_from_token(token)
    try:
        await ads_service.delete_ad(db, ad_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QueryFailure:
        raise internal_error()

    return None


# ============================================================
# TIER DEMOTION
# ============================================================

@router.post("/demote", response_model=DemoteResponse)
async def demote_ads(request: DemoteRequest, db: AsyncSession = Depends(get_db)):
    """
    Demote every ad on `tier` approved at or before `cutoff` to BASIC.
    Safe to repeat: a second identical call reports 0.
    """
    try:
        affected = await ad_lifecycle.demote(db, request.cutoff, request.tier)
    except ad_lifecycle.InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except QueryFailure:
        raise internal_error()

    return DemoteResponse(tier=request.tier, affected=affected)


@router.post("/demote/sweep", response_model=DemoteSweepResponse)
async def demote_sweep(db: AsyncSession = Depends(get_db)):
    """Apply the tier TTL policy to every paid tier."""
    try:
        counts = await ad_lifecycle.demote_expired_ads(db)
    except QueryFailure:
        raise internal_error()
    return DemoteSweepResponse(demoted=counts)
