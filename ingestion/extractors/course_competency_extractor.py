"""
Course competency mapping extractor (column-family content hierarchy table)
"""

from typing import List, Sequence

import pandas as pd

from core.exceptions import MalformedRecordError
from ingestion.base import DataSource
from ingestion.clients.store import TableReader
from ingestion.transformers.normalizer import parse_document, parse_document_list, parse_level
from schemas.records import CourseCompetency, LiveCourse
from schemas.sources import CourseCompetencyEntry, CourseHierarchy

SOURCE_COLUMNS = ["identifier", "hierarchy"]


class CourseCompetencyExtractor(DataSource[CourseCompetency]):
    """
    One row per (live course, mapped competency).

    The hierarchy document of every live course is parsed; its
    `competencies_v3` field is itself a JSON array of
    `{id, selectedLevelLevel}` entries. The level is the first number found
    in the level text, 1 when there is none. A course whose hierarchy or
    competency list cannot be parsed contributes no rows.
    """

    source_name = "course_competency"

    def __init__(
        self,
        reader: TableReader,
        keyspace: str,
        table_name: str,
        live_courses: Sequence[LiveCourse]
    ):
        super().__init__()
        self.reader = reader
        self.keyspace = keyspace
        self.table_name = table_name
        self.live_course_ids = [course.id for course in live_courses]

    async def fetch(self) -> pd.DataFrame:
        return await self.reader.scan(self.keyspace, self.table_name, SOURCE_COLUMNS)

    def normalize(self, raw: pd.DataFrame) -> List[CourseCompetency]:
        live = raw[raw["identifier"].isin(self.live_course_ids) & raw["hierarchy"].notna()]

        records = []
        for course_id, hierarchy_json in zip(live["identifier"], live["hierarchy"]):
            try:
                hierarchy = parse_document(CourseHierarchy, hierarchy_json, "hierarchy", course_id)
                if hierarchy.competencies_v3 is None:
                    continue
                entries = parse_document_list(
                    CourseCompetencyEntry, hierarchy.competencies_v3, "competencies_v3", course_id
                )
            except MalformedRecordError as e:
                self.skip_malformed(e)
                continue

            records.extend(
                CourseCompetency(
                    courseID=course_id,
                    courseStatus=hierarchy.status,
                    courseChannel=hierarchy.channel,
                    courseCompetencyID=entry.id,
                    courseCompetencyLevel=max(parse_level(entry.selectedLevelLevel), 1),
                )
                for entry in entries
            )
        return records
