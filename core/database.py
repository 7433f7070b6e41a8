"""
Database session management with SQLAlchemy async.

Two engines are used: the publish/audit database the pipeline writes to,
and the column-family store the extractors scan.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from core.config import Settings
import logging

logger = logging.getLogger(__name__)


def create_session_maker(database_url: str, echo: bool = False) -> async_sessionmaker:
    """Build a session factory bound to a fresh async engine"""
    engine = create_async_engine(
        database_url,
        echo=echo,
        poolclass=NullPool,  # For async, connection pooling handled differently
        future=True
    )
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


def create_session_makers(settings: Settings):
    """
    Session factories for one pipeline process.

    Returns:
        (publish_session_maker, store_session_maker)
    """
    echo = settings.ENVIRONMENT == "development"
    logger.debug("Creating publish and store session factories")
    return (
        create_session_maker(settings.DATABASE_URL, echo=echo),
        create_session_maker(settings.STORE_DATABASE_URL, echo=False),
    )
