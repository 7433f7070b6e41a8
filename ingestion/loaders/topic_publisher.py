"""
Publish output tables to their topics through the database outbox
"""

from typing import Any, Dict, List, Sequence
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession
from models.published_record import PublishedRecord
from schemas.records import Record
from core.exceptions import PublishError
import logging

logger = logging.getLogger(__name__)


class TopicPublisher:
    """
    Write output records as outbox rows, one row per record.

    Each payload is the record's fields plus the run timestamp. Nothing is
    committed here: the caller commits once after every topic of the run
    has been written, so a run's tables become visible together or not at all.
    """

    def __init__(self, db_session: AsyncSession, broker: str, batch_size: int = 500):
        self.db = db_session
        self.broker = broker
        self.batch_size = batch_size

    def to_rows(self, topic: str, records: Sequence[Record], run_timestamp: int) -> List[Dict[str, Any]]:
        return [
            {
                "broker": self.broker,
                "topic": topic,
                "run_timestamp": run_timestamp,
                "payload": {**record.model_dump(mode="json"), "timestamp": run_timestamp},
            }
            for record in records
        ]

    async def publish(self, topic: str, records: Sequence[Record], run_timestamp: int) -> int:
        """
        Stage all records for `topic` in batches of `batch_size`.

        Returns:
            Number of records staged

        Raises:
            PublishError: an insert failed
        """
        if not records:
            logger.info(f"No records to publish to {topic}")
            return 0

        rows = self.to_rows(topic, records, run_timestamp)
        published = 0

        for i in range(0, len(rows), self.batch_size):
            batch = rows[i:i + self.batch_size]
            try:
                await self.db.execute(insert(PublishedRecord), batch)
            except Exception as e:
                raise PublishError(
                    f"Failed to publish batch {i // self.batch_size + 1} to {topic}",
                    context={
                        "topic": topic,
                        "records_to_publish": len(batch),
                        "records_published": published,
                    },
                    original_exception=e
                )
            published += len(batch)

        logger.info(f"Staged {published} records for {topic}")
        return published
