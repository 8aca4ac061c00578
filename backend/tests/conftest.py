"""
Pytest fixtures for testing.
"""
import itertools
import uuid
import pytest_asyncio
from datetime import datetime, timedelta
from typing import AsyncGenerator, Optional

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import jobboard.database
from jobboard.database import Base
# Import ALL models so Base.metadata knows about all tables
from jobboard.models.job_ad import JobAd, AdTier

# Now import app (after we can override database)
from jobboard.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

_ad_numbers = itertools.count(1)


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps a single connection alive so every session sees
    # the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test DB
    original_engine = jobboard.database.engine
    original_sessionmaker = jobboard.database.AsyncSessionLocal

    jobboard.database.engine = test_engine
    jobboard.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = async_session()

    try:
        yield session
    finally:
        try:
            await session.close()
        except Exception as e:
            print(f"Warning: Failed to close session: {e}")

        try:
            async with test_engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
        except Exception as e:
            print(f"Warning: Failed to drop tables: {e}")

        try:
            await test_engine.dispose()
        except Exception as e:
            print(f"Warning: Failed to dispose engine: {e}")

        jobboard.database.engine = original_engine
        jobboard.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing endpoints.

    The db fixture already replaced the app's engine with the test engine,
    so all endpoints use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True
    ) as client:
        yield client


@pytest_asyncio.fixture
async def make_ad(db: AsyncSession):
    """
    Factory for job ads stored directly in the database.

    By default the ad is approved one day ago, on the BASIC tier, in Berlin.
    Pass approved_at=None for a pending ad.
    """
    now = datetime.utcnow()

    async def _make_ad(
        title: Optional[str] = None,
        company: str = "Acme",
        location: str = "Berlin",
        description: str = "Backend role",
        ad_tier: AdTier = AdTier.BASIC,
        created_at: Optional[datetime] = None,
        approved_at: Optional[datetime] = ...,
        expired: bool = False,
    ) -> JobAd:
        number = next(_ad_numbers)
        ad = JobAd(
            external_id=uuid.uuid4().hex,
            slug=f"test-ad-{number}",
            title=title or f"Engineer {number}",
            company=company,
            location=location,
            description=description,
            ad_tier=AdTier(ad_tier).value,
            created_at=created_at or now - timedelta(days=1),
            approved_at=now - timedelta(days=1) if approved_at is ... else approved_at,
            expired=expired,
        )
        db.add(ad)
        await db.commit()
        await db.refresh(ad)
        return ad

    return _make_ad
