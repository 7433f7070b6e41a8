"""
Abstract base class for the pipeline's data sources
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, TypeVar
import logging
import time

from core.exceptions import ETLException, ExtractionError, MalformedRecordError
from schemas.records import Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class DataSource(ABC, Generic[R]):
    """
    Abstract base class for all extractors.

    Each extractor reads exactly one upstream source once per run and
    projects it into one normalized table.

    Responsibilities:
    - fetch(): the single upstream read (store scan or API query)
    - normalize(): projection, flattening and defaults into records
    - extract(): fetch + normalize with logging and error wrapping
    """

    source_name: str = "source"

    def __init__(self):
        self.records_skipped = 0

    @abstractmethod
    async def fetch(self) -> Any:
        """Read the raw data from the upstream source"""
        pass

    @abstractmethod
    def normalize(self, raw: Any) -> List[R]:
        """Turn the raw data into normalized records"""
        pass

    async def extract(self) -> List[R]:
        """
        Execute fetch and normalize for this source.

        Raises:
            ETLException: pipeline errors from fetch/normalize, unchanged
            ExtractionError: any other failure, wrapped with source context
        """
        started = time.perf_counter()
        self.records_skipped = 0
        logger.info(f"Starting extraction for {self.source_name}")

        try:
            raw = await self.fetch()
            records = self.normalize(raw)
        except ETLException:
            raise
        except Exception as e:
            raise ExtractionError(
                f"Unexpected error during extraction of {self.source_name}",
                context={"source_name": self.source_name},
                original_exception=e
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Extracted {len(records)} {self.source_name} records "
            f"({self.records_skipped} malformed skipped, {elapsed_ms:.0f} ms)"
        )
        return records

    def skip_malformed(self, error: MalformedRecordError):
        """Record and log a per-record parse failure; extraction continues"""
        self.records_skipped += 1
        logger.warning(
            f"Skipping malformed record in {self.source_name}: {error.message}",
            extra={"error_context": error.to_dict()}
        )
