"""
User course completion extractor (column-family content consumption table)
"""

from typing import List

import pandas as pd

from ingestion.base import DataSource
from ingestion.clients.store import TableReader
from ingestion.transformers.completion_status import with_completion_status
from ingestion.transformers.normalizer import frame_records
from schemas.records import UserCourseCompletion

SOURCE_COLUMNS = ["userid", "courseid", "completionpercentage"]


class UserCourseCompletionExtractor(DataSource[UserCourseCompletion]):
    """Completion percentage and derived status per (user, course)"""

    source_name = "user_course_completion"

    def __init__(self, reader: TableReader, keyspace: str, table_name: str):
        super().__init__()
        self.reader = reader
        self.keyspace = keyspace
        self.table_name = table_name

    async def fetch(self) -> pd.DataFrame:
        return await self.reader.scan(self.keyspace, self.table_name, SOURCE_COLUMNS)

    def normalize(self, raw: pd.DataFrame) -> List[UserCourseCompletion]:
        df = raw.rename(columns={
            "userid": "completionUserID",
            "courseid": "completionCourseID",
            "completionpercentage": "completionPercentage",
        })
        df = df.assign(completionPercentage=pd.to_numeric(df["completionPercentage"], errors="coerce"))

        return [UserCourseCompletion(**row) for row in with_completion_status(frame_records(df))]
