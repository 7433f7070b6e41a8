"""
Create the outbox and run audit tables in the publish database
"""

import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from core.config import settings
from core.logging import setup_logging
from models.base import Base
from models.published_record import PublishedRecord
from models.pipeline_run import PipelineRun

logger = logging.getLogger(__name__)

PIPELINE_TABLES = [PublishedRecord.__table__, PipelineRun.__table__]


async def init_database():
    """Create missing tables, then confirm both exist"""
    setup_logging(settings)
    engine = create_async_engine(settings.DATABASE_URL)

    try:
        async with engine.begin() as conn:
            logger.info(f"Creating tables: {', '.join(t.name for t in PIPELINE_TABLES)}")
            await conn.run_sync(Base.metadata.create_all, tables=PIPELINE_TABLES)
            existing = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    finally:
        await engine.dispose()

    missing = [t.name for t in PIPELINE_TABLES if t.name not in existing]
    if missing:
        logger.error(f"Tables not created: {', '.join(missing)}")
        sys.exit(1)
    logger.info("Outbox and run audit tables ready")


if __name__ == "__main__":
    asyncio.run(init_database())
