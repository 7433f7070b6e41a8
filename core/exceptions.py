"""
Custom exceptions for the competency metrics pipeline with structured error context.

Each exception carries context information for debugging and run auditing.
Upstream failures are fatal for the run: nothing is retried and nothing is
published. Malformed per-record documents are recoverable and are handled
where the record is parsed.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   └── UpstreamUnavailableError
    │       ├── UpstreamQueryError
    │       └── StoreReadError
    ├── TransformationError
    │   └── MalformedRecordError
    ├── UnsupportedRequestError
    └── PublishError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source, table, topic, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for data extraction failures."""
    pass


class UpstreamUnavailableError(ExtractionError):
    """
    An upstream source could not be reached or queried. Fatal for the run.

    Context should include:
        - source_name: Extractor or client that failed
        - url / keyspace+table: What was being read
    """
    pass


class UpstreamQueryError(UpstreamUnavailableError):
    """
    The upstream answered, but not with a usable result.

    Context should include:
        - url: The endpoint that was queried
        - status_code: HTTP status code (if applicable)
        - response_body: Response body (truncated)
    """
    pass


class StoreReadError(UpstreamUnavailableError):
    """
    A column-family table scan failed.

    Context should include:
        - keyspace: Keyspace (schema) name
        - table_name: Table name
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for data transformation failures."""
    pass


class MalformedRecordError(TransformationError):
    """
    A single record's embedded document could not be parsed.

    Callers skip the record and keep extracting.

    Context should include:
        - field_name: Column holding the document
        - record_key: Identifier of the offending record
    """
    pass


# ============================================================================
# Programming Errors
# ============================================================================

class UnsupportedRequestError(ETLException, ValueError):
    """Request shape the API helper does not support (e.g. unknown HTTP verb)."""
    pass


# ============================================================================
# Publish Errors
# ============================================================================

class PublishError(ETLException):
    """
    Exception raised when writing output records fails.

    Context should include:
        - topic: Destination topic
        - records_to_publish: Number of records in the failed batch
    """
    pass
