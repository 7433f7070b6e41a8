"""
Script to run the competency metrics pipeline on its schedule
"""

import asyncio
import sys
import os
import logging

sys.path.append(os.getcwd())

from core.config import settings
from core.logging import setup_logging
from ingestion.scheduler import ETLScheduler

logger = logging.getLogger(__name__)


async def main():
    setup_logging(settings)
    scheduler = ETLScheduler(settings)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler interrupted")
