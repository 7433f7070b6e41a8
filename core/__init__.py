"""
Core utilities and configuration for the competency metrics pipeline.

Modules:
    config: Application configuration and environment variable management
    database: Session factories for the publish database and the column-family store
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import create_session_makers
    from core.exceptions import UpstreamUnavailableError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "create_session_makers",
    "setup_logging",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "UpstreamUnavailableError",
    "UpstreamQueryError",
    "StoreReadError",
    "TransformationError",
    "MalformedRecordError",
    "UnsupportedRequestError",
    "PublishError",
]
