# ============================================================================
# File: ingestion/runner.py
# Description: Competency metrics orchestrator
# ============================================================================
"""
Competency metrics runner - one batch pass from extraction to publish.

Pipeline phases:
1. Extract - read all seven sources (optionally concurrently)
2. Gap - expected vs declared competency levels
3. Enrich - best course completion per competency gap
4. Publish - every output table stamped with the same run timestamp

Failures are fatal: no retry, no partial publish. The run audit row is
written in separate commits so failed runs stay visible.
"""

from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
import asyncio
import logging
import time
import uuid

from sqlalchemy import insert, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.exceptions import ETLException
from ingestion.base import DataSource
from ingestion.clients.http_api import UpstreamAPI
from ingestion.clients.store import TableReader
from ingestion.extractors.course_competency_extractor import CourseCompetencyExtractor
from ingestion.extractors.declared_competency_extractor import DeclaredCompetencyExtractor
from ingestion.extractors.expected_competency_extractor import ExpectedCompetencyExtractor
from ingestion.extractors.frac_competency_extractor import FracCompetencyExtractor
from ingestion.extractors.live_course_extractor import LiveCourseExtractor
from ingestion.extractors.rating_summary_extractor import CourseRatingSummaryExtractor
from ingestion.extractors.user_course_completion_extractor import UserCourseCompletionExtractor
from ingestion.loaders.topic_publisher import TopicPublisher
from ingestion.transformers.competency_gap import calculate_competency_gaps
from ingestion.transformers.gap_completion import enrich_gap_completion
from models.base import RunStatus
from models.pipeline_run import PipelineRun
from schemas.records import CourseCompetency, LiveCourse, Record

logger = logging.getLogger(__name__)


def current_timestamp() -> int:
    """Epoch milliseconds"""
    return int(time.time() * 1000)


class CompetencyMetricsRunner:
    """
    Competency metrics orchestrator

    Responsibilities:
    - Capture one run timestamp and apply it to every published table
    - Extract sources, honouring the live course -> course competency dependency
    - Compute competency gaps and their course completion
    - Publish all tables in one transaction
    - Record the run in the audit table
    """

    def __init__(
        self,
        db_session: AsyncSession,
        reader: TableReader,
        api: UpstreamAPI,
        settings: Settings
    ):
        self.db = db_session
        self.reader = reader
        self.api = api
        self.settings = settings

    def build_extractors(self) -> Dict[str, DataSource]:
        """Extractors with no dependency on another source"""
        s = self.settings
        return {
            "course_rating_summary": CourseRatingSummaryExtractor(
                self.reader, s.STORE_USER_KEYSPACE, s.STORE_RATING_SUMMARY_TABLE
            ),
            "user_course_completion": UserCourseCompletionExtractor(
                self.reader, s.STORE_COURSE_KEYSPACE, s.STORE_USER_CONTENT_CONSUMPTION_TABLE
            ),
            "frac_competency": FracCompetencyExtractor(self.api, s.FRAC_BACKEND_HOST),
            "expected_competency": ExpectedCompetencyExtractor(
                self.api, s.DRUID_ROUTER_HOST, limit=s.DRUID_SQL_LIMIT
            ),
            "declared_competency": DeclaredCompetencyExtractor(
                self.reader, s.STORE_USER_KEYSPACE, s.STORE_USER_TABLE
            ),
        }

    async def extract_course_competency(self) -> Tuple[List[LiveCourse], List[CourseCompetency]]:
        """Live course ids first, then the course competency mapping restricted to them"""
        s = self.settings
        live_courses = await LiveCourseExtractor(
            self.api, s.ELASTICSEARCH_HOST, limit=s.SEARCH_COURSE_LIMIT
        ).extract()
        course_competencies = await CourseCompetencyExtractor(
            self.reader, s.STORE_HIERARCHY_KEYSPACE, s.STORE_CONTENT_HIERARCHY_TABLE, live_courses
        ).extract()
        return live_courses, course_competencies

    async def extract_sources(self) -> Dict[str, List[Record]]:
        """
        Extract every source table.

        With EXTRACT_CONCURRENTLY the independent extractors run as
        concurrent tasks; the first failure cancels the rest and propagates.
        """
        extractors = self.build_extractors()
        names = list(extractors)

        if self.settings.EXTRACT_CONCURRENTLY:
            tasks = [asyncio.ensure_future(extractor.extract()) for extractor in extractors.values()]
            tasks.append(asyncio.ensure_future(self.extract_course_competency()))
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                raise
        else:
            results = [await extractor.extract() for extractor in extractors.values()]
            results.append(await self.extract_course_competency())

        tables: Dict[str, List[Record]] = dict(zip(names, results[:-1]))
        tables["live_course"], tables["course_competency"] = results[-1]
        return tables

    def output_tables(self, tables: Dict[str, List[Record]]) -> List[Tuple[str, List[Record]]]:
        """(topic, records) in publish order"""
        s = self.settings
        return [
            (s.TOPIC_COURSE_RATING_SUMMARY, tables["course_rating_summary"]),
            (s.TOPIC_USER_COURSE_PROGRESS, tables["user_course_completion"]),
            (s.TOPIC_FRAC_COMPETENCY, tables["frac_competency"]),
            (s.TOPIC_COURSE_COMPETENCY, tables["course_competency"]),
            (s.TOPIC_EXPECTED_COMPETENCY, tables["expected_competency"]),
            (s.TOPIC_DECLARED_COMPETENCY, tables["declared_competency"]),
            (s.TOPIC_COMPETENCY_GAP, tables["competency_gap_completion"]),
        ]

    async def start_run(self, run_id: uuid.UUID, run_timestamp: int, started_at: datetime):
        """Create the audit row for this run"""
        await self.db.execute(
            insert(PipelineRun).values(
                run_id=run_id,
                run_timestamp=run_timestamp,
                status=RunStatus.RUNNING,
                started_at=started_at,
            )
        )
        await self.db.commit()

    async def complete_run(
        self,
        run_id: uuid.UUID,
        started_at: datetime,
        status: RunStatus,
        table_counts: Optional[Dict[str, int]] = None,
        error: Optional[Exception] = None
    ):
        """Close the audit row and commit (together with any staged outbox rows)"""
        completed_at = datetime.utcnow()
        values: Dict[str, Any] = {
            "status": status,
            "completed_at": completed_at,
            "duration_seconds": (completed_at - started_at).total_seconds(),
            "table_counts": table_counts,
        }
        if error is not None:
            values["error_message"] = str(error)
            values["error_details"] = error.to_dict() if isinstance(error, ETLException) else None

        await self.db.execute(
            update(PipelineRun).where(PipelineRun.run_id == run_id).values(**values)
        )
        await self.db.commit()

    async def run(self, run_timestamp: Optional[int] = None) -> Dict[str, Any]:
        """
        Run the full competency metrics pipeline once.

        Args:
            run_timestamp: Epoch milliseconds to stamp on every output;
                captured now when not given

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - run_id, run_timestamp
            - table_counts: records published per topic
            - records_published: total records published
            - competency_gaps / positive_gaps: gap row counts

        Raises:
            ETLException: any failure; nothing from this run is published
        """
        if run_timestamp is None:
            run_timestamp = current_timestamp()
        run_id = uuid.uuid4()
        started_at = datetime.utcnow()

        logger.info(f"Starting competency metrics run {run_id} (timestamp {run_timestamp})")
        await self.start_run(run_id, run_timestamp, started_at)

        table_counts: Dict[str, int] = {}

        try:
            # --------------------------------------------------
            # PHASE 1: EXTRACTION
            # --------------------------------------------------
            tables = await self.extract_sources()

            # --------------------------------------------------
            # PHASE 2: COMPETENCY GAPS
            # --------------------------------------------------
            gaps = calculate_competency_gaps(
                tables["expected_competency"], tables["declared_competency"]
            )

            # --------------------------------------------------
            # PHASE 3: GAP COURSE COMPLETION
            # --------------------------------------------------
            tables["competency_gap_completion"] = enrich_gap_completion(
                gaps, tables["course_competency"], tables["user_course_completion"]
            )

            # --------------------------------------------------
            # PHASE 4: PUBLISH (single transaction)
            # --------------------------------------------------
            publisher = TopicPublisher(
                self.db, self.settings.BROKER_LIST, batch_size=self.settings.ETL_BATCH_SIZE
            )
            for topic, records in self.output_tables(tables):
                table_counts[topic] = await publisher.publish(topic, records, run_timestamp)

            await self.complete_run(run_id, started_at, RunStatus.SUCCESS, table_counts)

        except ETLException as e:
            logger.error(
                f"Competency metrics run failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            await self.db.rollback()
            await self.complete_run(run_id, started_at, RunStatus.FAILED, error=e)
            raise

        except Exception as e:
            logger.exception("Unexpected error in competency metrics run")
            await self.db.rollback()
            wrapped = ETLException(
                "Unexpected error in competency metrics run",
                context={"run_id": str(run_id), "run_timestamp": run_timestamp},
                original_exception=e
            )
            await self.complete_run(run_id, started_at, RunStatus.FAILED, error=wrapped)
            raise wrapped

        result = {
            "status": "success",
            "run_id": str(run_id),
            "run_timestamp": run_timestamp,
            "table_counts": table_counts,
            "records_published": sum(table_counts.values()),
            "competency_gaps": len(gaps),
            "positive_gaps": sum(1 for gap in gaps if gap.competencyGap > 0),
        }
        logger.info(
            f"Competency metrics run completed: published {result['records_published']} records "
            f"across {len(table_counts)} topics"
        )
        return result
