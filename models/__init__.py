"""
SQLAlchemy ORM models for the tables this pipeline writes.

Models:
    base: Base declarative class and the RunStatus enum
    published_record: Outbox rows, one per published output record
    pipeline_run: Run audit records

Usage:
    from models.published_record import PublishedRecord
    from models.pipeline_run import PipelineRun
    from models.base import RunStatus
"""

__all__ = [
    "Base",
    "RunStatus",
    "PublishedRecord",
    "PipelineRun",
]
