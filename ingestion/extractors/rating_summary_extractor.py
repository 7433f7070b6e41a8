"""
Course rating summary extractor (column-family rating summary table)
"""

from typing import List

import pandas as pd
import logging

from ingestion.base import DataSource
from ingestion.clients.store import TableReader
from ingestion.transformers.normalizer import frame_records
from schemas.records import CourseRatingSummary

logger = logging.getLogger(__name__)

SOURCE_COLUMNS = [
    "activityid",
    "activitytype",
    "sum_of_total_ratings",
    "total_number_of_ratings",
    "totalcount1stars",
    "totalcount2stars",
    "totalcount3stars",
    "totalcount4stars",
    "totalcount5stars",
]

COLUMN_MAP = {
    "activityid": "courseID",
    "sum_of_total_ratings": "ratingSum",
    "total_number_of_ratings": "ratingCount",
    "totalcount1stars": "count1Star",
    "totalcount2stars": "count2Star",
    "totalcount3stars": "count3Star",
    "totalcount4stars": "count4Star",
    "totalcount5stars": "count5Star",
}


class CourseRatingSummaryExtractor(DataSource[CourseRatingSummary]):
    """
    Rating totals per course.

    Only course activities with at least one rating are kept; courses
    without ratings do not appear in the output.
    """

    source_name = "course_rating_summary"

    def __init__(self, reader: TableReader, keyspace: str, table_name: str):
        super().__init__()
        self.reader = reader
        self.keyspace = keyspace
        self.table_name = table_name

    async def fetch(self) -> pd.DataFrame:
        return await self.reader.scan(self.keyspace, self.table_name, SOURCE_COLUMNS)

    def normalize(self, raw: pd.DataFrame) -> List[CourseRatingSummary]:
        if raw.empty:
            return []

        rating_count = pd.to_numeric(raw["total_number_of_ratings"], errors="coerce")
        is_course = raw["activitytype"].map(lambda v: isinstance(v, str) and v.lower() == "course")
        df = raw[is_course & (rating_count > 0)].rename(columns=COLUMN_MAP)

        df = df.assign(
            ratingSum=pd.to_numeric(df["ratingSum"], errors="coerce"),
            ratingCount=pd.to_numeric(df["ratingCount"], errors="coerce"),
        )
        df = df.assign(ratingAverage=df["ratingSum"] / df["ratingCount"])

        return [CourseRatingSummary(**row) for row in frame_records(df[list(CourseRatingSummary.model_fields)])]
