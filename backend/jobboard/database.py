"""
Database engine and session factory.

The engine owns the connection pool for the whole process; sessions are
handed to the services through the get_db dependency.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from jobboard.config import settings


def _engine_options(database_url: str) -> dict:
    options = {"echo": settings.debug}
    # SQLite drivers don't take a sized pool
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["pool_pre_ping"] = True
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session per request."""
    async with AsyncSessionLocal() as session:
        yield session
