"""
Scheduled maintenance entrypoint.
Demotes paid ads whose tier TTL has elapsed. Run periodically from cron:

    python -m jobboard.worker
"""
import asyncio
import logging
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from jobboard.config import settings
from jobboard.services.ad_lifecycle import demote_expired_ads

logger = logging.getLogger(__name__)


async def worker_main() -> dict:
    engine = create_async_engine(settings.database_url, echo=settings.debug)
    async_session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    try:
        async with async_session() as db:
            counts = await demote_expired_ads(db)
    finally:
        await engine.dispose()

    logger.info(f"Demotion sweep finished: {sum(counts.values())} job ads demoted")
    return counts


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(worker_main())
