"""
Declared competency extractor (column-family user table)
"""

from typing import List

import pandas as pd

from core.exceptions import MalformedRecordError
from ingestion.base import DataSource
from ingestion.clients.store import TableReader
from ingestion.transformers.normalizer import parse_document
from schemas.records import DeclaredCompetency
from schemas.sources import ProfileDetails

SOURCE_COLUMNS = ["userid", "profiledetails"]

DEFAULT_DECLARED_LEVEL = 1


class DeclaredCompetencyExtractor(DataSource[DeclaredCompetency]):
    """
    Competencies users declared on their profile.

    A competency listed without a self-attested level is taken as level 1.
    Entries without an id are dropped; a profile that cannot be parsed
    contributes no rows.
    """

    source_name = "declared_competency"

    def __init__(self, reader: TableReader, keyspace: str, table_name: str):
        super().__init__()
        self.reader = reader
        self.keyspace = keyspace
        self.table_name = table_name

    async def fetch(self) -> pd.DataFrame:
        return await self.reader.scan(self.keyspace, self.table_name, SOURCE_COLUMNS)

    def normalize(self, raw: pd.DataFrame) -> List[DeclaredCompetency]:
        profiles = raw[raw["profiledetails"].notna()]

        records = []
        for user_id, profile_json in zip(profiles["userid"], profiles["profiledetails"]):
            try:
                profile = parse_document(ProfileDetails, profile_json, "profiledetails", user_id)
            except MalformedRecordError as e:
                self.skip_malformed(e)
                continue

            for competency in profile.competencies or []:
                if competency is None or competency.id is None:
                    continue
                level = competency.competencySelfAttestedLevel
                records.append(DeclaredCompetency(
                    decUserID=user_id,
                    decCompetencyID=competency.id,
                    decCompetencyLevel=DEFAULT_DECLARED_LEVEL if level is None else level,
                ))
        return records
