"""
Expected competency extractor (Druid work order properties)
"""

from typing import Any, Dict, List

from ingestion.base import DataSource
from ingestion.clients.http_api import UpstreamAPI
from ingestion.transformers.normalizer import is_missing, parse_level
from schemas.records import ExpectedCompetency

# competency requirements of the latest approved work order issued to each user
EXPECTED_COMPETENCY_QUERY = (
    "SELECT edata_cb_data_deptId AS expOrgID, "
    "edata_cb_data_wa_id AS expWorkOrderID, "
    "edata_cb_data_wa_userId AS expUserID, "
    "edata_cb_data_wa_competency_id AS expCompetencyID, "
    "edata_cb_data_wa_competency_level AS expCompetencyLevel "
    "FROM \"cb-work-order-properties\" "
    "WHERE edata_cb_data_wa_competency_type='COMPETENCY' "
    "AND edata_cb_data_wa_id IN ("
    "SELECT LATEST(edata_cb_data_wa_id, 36) FROM \"cb-work-order-properties\" "
    "GROUP BY edata_cb_data_wa_userId)"
)


class ExpectedCompetencyExtractor(DataSource[ExpectedCompetency]):
    """
    Competency levels expected of each user by their latest work order.

    Rows without a competency id, or whose level parses to 0, are dropped.
    Druid reports null strings as "", which counts as a missing id.
    """

    source_name = "expected_competency"

    def __init__(self, api: UpstreamAPI, host: str, limit: int = 10000):
        super().__init__()
        self.api = api
        self.host = host
        self.limit = limit

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.api.druid_sql(EXPECTED_COMPETENCY_QUERY, self.host, limit=self.limit)

    def normalize(self, raw: List[Dict[str, Any]]) -> List[ExpectedCompetency]:
        records = []
        for row in raw:
            competency_id = row.get("expCompetencyID")
            if is_missing(competency_id) or competency_id == "":
                continue

            level = parse_level(row.get("expCompetencyLevel"))
            if level == 0:
                continue

            records.append(ExpectedCompetency(
                expOrgID=row.get("expOrgID"),
                expWorkOrderID=row.get("expWorkOrderID"),
                expUserID=row.get("expUserID"),
                expCompetencyID=competency_id,
                expCompetencyLevel=level,
            ))
        return records
