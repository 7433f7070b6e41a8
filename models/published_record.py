from sqlalchemy import Column, BigInteger, String, DateTime, Index
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime
from models.base import Base


class PublishedRecord(Base):
    """
    Outbox of records dispatched to the message broker.

    One row per output record. A relay forwards rows to `broker`/`topic`
    in `id` order; payload is the self-describing JSON record including the
    run timestamp.
    """
    __tablename__ = "published_records"

    id = Column(BigInteger, primary_key=True, autoincrement=True)

    broker = Column(String(255), nullable=False)
    topic = Column(String(255), nullable=False, index=True)
    run_timestamp = Column(BigInteger, nullable=False, index=True)

    payload = Column(JSONB, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    dispatched_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_published_topic_run", "topic", "run_timestamp"),
        Index("idx_published_undispatched", "dispatched_at", "id"),
    )
