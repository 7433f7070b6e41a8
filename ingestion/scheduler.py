import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import Settings, settings as default_settings
from core.database import create_session_makers
from ingestion.clients.http_api import UpstreamAPI
from ingestion.clients.store import TableReader
from ingestion.runner import CompetencyMetricsRunner

logger = logging.getLogger(__name__)


class ETLScheduler:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.scheduler = AsyncIOScheduler()
        self.SessionLocal, self.StoreSessionLocal = create_session_makers(self.settings)

    async def run_etl_job(self):
        """Job to run one competency metrics pass"""
        logger.info("Scheduler: Starting competency metrics job")
        async with self.SessionLocal() as session:
            try:
                runner = CompetencyMetricsRunner(
                    db_session=session,
                    reader=TableReader(self.StoreSessionLocal),
                    api=UpstreamAPI(timeout=self.settings.HTTP_TIMEOUT),
                    settings=self.settings,
                )
                await runner.run()
            except Exception as e:
                # the run is already recorded as failed; the next interval runs normally
                logger.error(f"Scheduler: competency metrics job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_etl_job,
            trigger=IntervalTrigger(hours=self.settings.SCHEDULE_INTERVAL_HOURS),
            id="competency_metrics_job",
            replace_existing=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info("Competency metrics scheduler started")

    def stop(self):
        self.scheduler.shutdown()
        logger.info("Competency metrics scheduler stopped")
