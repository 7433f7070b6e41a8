"""
Script to run the competency metrics pipeline once
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_session_makers
from core.logging import setup_logging
from ingestion.clients.http_api import UpstreamAPI
from ingestion.clients.store import TableReader
from ingestion.runner import CompetencyMetricsRunner

logger = logging.getLogger(__name__)


async def run_competency_metrics():
    """Run one batch pass; exit non-zero on failure"""
    setup_logging(settings)

    session_maker, store_session_maker = create_session_makers(settings)

    try:
        async with session_maker() as session:
            runner = CompetencyMetricsRunner(
                db_session=session,
                reader=TableReader(store_session_maker),
                api=UpstreamAPI(timeout=settings.HTTP_TIMEOUT),
                settings=settings,
            )
            result = await runner.run()
            logger.info(
                f"Run {result['run_id']} published {result['records_published']} records "
                f"({result['competency_gaps']} competency gaps)"
            )

    except Exception as e:
        logger.error(f"Competency metrics pipeline error: {str(e)}")
        sys.exit(1)
    finally:
        await session_maker.kw["bind"].dispose()
        await store_session_maker.kw["bind"].dispose()


if __name__ == "__main__":
    asyncio.run(run_competency_metrics())
