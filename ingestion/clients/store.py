"""
Column-family store read path: full table scans into DataFrames.
"""

from typing import Sequence

import pandas as pd
from sqlalchemy import column, select, table
from sqlalchemy.ext.asyncio import async_sessionmaker
import logging

from core.exceptions import StoreReadError

logger = logging.getLogger(__name__)


class TableReader:
    """
    Scan `keyspace.table` projecting only the requested columns.

    Each scan opens its own session so independent extractors can read
    concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker

    async def scan(self, keyspace: str, table_name: str, columns: Sequence[str]) -> pd.DataFrame:
        """
        Returns:
            DataFrame with exactly `columns`, one row per stored row

        Raises:
            StoreReadError: the scan failed
        """
        stmt = select(*[column(name) for name in columns]).select_from(
            table(table_name, schema=keyspace)
        )

        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                rows = result.mappings().all()
        except Exception as e:
            raise StoreReadError(
                f"Failed to scan {keyspace}.{table_name}",
                context={"keyspace": keyspace, "table_name": table_name},
                original_exception=e
            )

        logger.info(f"Read {len(rows)} rows from {keyspace}.{table_name}")
        return pd.DataFrame([dict(row) for row in rows], columns=list(columns))
