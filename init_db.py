import asyncio
import logging

from sqlmodel import SQLModel

from config import ApplicationConfig
from src.depends import engine

# Import entities so their tables register on SQLModel.metadata
from src.domain.entities import RecoveryRecord, User  # noqa: F401

logger = logging.getLogger(__name__)


async def init_models(drop: bool = False):
    async with engine.begin() as conn:
        if drop:
            # DEV MODE ONLY
            await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Tables created on %s", ApplicationConfig.DB_URI)


if __name__ == "__main__":
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())
    asyncio.run(init_models())
