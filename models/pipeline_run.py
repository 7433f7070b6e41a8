from sqlalchemy import Column, BigInteger, Enum, DateTime, Float, Text, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from datetime import datetime
import uuid
from models.base import Base, RunStatus


class PipelineRun(Base):
    """
    Audit record for one competency metrics batch pass.

    Purpose:
    - Audit trail of all runs and their run timestamps
    - Row counts per published table
    - Failure tracking (a failed run is recorded even though nothing it
      computed is published)
    """
    __tablename__ = "pipeline_runs"

    id = Column(BigInteger, primary_key=True, autoincrement=True)
    run_id = Column(UUID(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False, index=True)

    # Epoch milliseconds stamped on every record published by this run
    run_timestamp = Column(BigInteger, nullable=False, index=True)

    status = Column(Enum(RunStatus), default=RunStatus.PENDING, nullable=False, index=True)

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    table_counts = Column(JSONB, nullable=True)  # {topic: records published}

    # Error tracking
    error_message = Column(Text, nullable=True)
    error_details = Column(JSONB, nullable=True)

    __table_args__ = (
        Index("idx_pipeline_run_status", "status", "started_at"),
    )
