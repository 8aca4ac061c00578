"""
Tests for pinned and sponsored ads.
"""
import pytest
from datetime import datetime, timedelta

from jobboard.models.job_ad import AdTier
from jobboard.services.sponsorship import is_pinned, pinned_ads, split_pinned


@pytest.mark.asyncio
async def test_pinned_ads_newest_approval_first(db, make_ad):
    now = datetime.utcnow()
    older = await make_ad(ad_tier=AdTier.PINNED_FOR_30_DAYS, approved_at=now - timedelta(days=5))
    newer = await make_ad(ad_tier=AdTier.SPONSORED_BACKGROUND, approved_at=now - timedelta(hours=2))
    middle = await make_ad(ad_tier=AdTier.PINNED_FOR_7_DAYS, approved_at=now - timedelta(days=1))

    pinned = await pinned_ads(db)

    assert [ad.id for ad in pinned] == [newer.id, middle.id, older.id]


@pytest.mark.asyncio
async def test_pinned_ads_only_pinned_tiers(db, make_ad):
    pinned = await make_ad(ad_tier=AdTier.PINNED_FOR_7_DAYS)
    await make_ad(ad_tier=AdTier.BASIC)
    await make_ad(ad_tier=AdTier.WITH_COMPANY_LOGO)
    await make_ad(ad_tier=AdTier.PINNED_FOR_60_DAYS)

    result = await pinned_ads(db)

    assert [ad.id for ad in result] == [pinned.id]


@pytest.mark.asyncio
async def test_pinned_ads_hide_pending_and_expired(db, make_ad):
    visible = await make_ad(ad_tier=AdTier.SPONSORED_BACKGROUND)
    await make_ad(ad_tier=AdTier.SPONSORED_BACKGROUND, approved_at=None)
    await make_ad(ad_tier=AdTier.SPONSORED_BACKGROUND, expired=True)

    result = await pinned_ads(db)

    assert [ad.id for ad in result] == [visible.id]


@pytest.mark.asyncio
async def test_pinned_ads_empty(db, make_ad):
    await make_ad()

    assert await pinned_ads(db) == []


@pytest.mark.asyncio
async def test_split_pinned(db, make_ad):
    now = datetime.utcnow()
    organic_a = await make_ad()
    pinned_old = await make_ad(ad_tier=AdTier.PINNED_FOR_30_DAYS, approved_at=now - timedelta(days=3))
    organic_b = await make_ad(ad_tier=AdTier.WITH_COMPANY_LOGO)
    pinned_new = await make_ad(ad_tier=AdTier.PINNED_FOR_7_DAYS, approved_at=now - timedelta(hours=1))
    hidden = await make_ad(ad_tier=AdTier.PINNED_FOR_7_DAYS, expired=True)

    pinned, organic = split_pinned([organic_a, pinned_old, organic_b, pinned_new, hidden])

    assert pinned == [pinned_new, pinned_old]
    assert organic == [organic_a, organic_b]


@pytest.mark.asyncio
async def test_is_pinned(db, make_ad):
    assert is_pinned(await make_ad(ad_tier=AdTier.SPONSORED_BACKGROUND))
    assert not is_pinned(await make_ad(ad_tier=AdTier.PINNED_FOR_60_DAYS))
    assert not is_pinned(await make_ad(ad_tier=AdTier.BASIC))
