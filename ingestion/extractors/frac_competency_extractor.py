"""
Competency taxonomy extractor (FRAC dictionary GraphQL API)
"""

from typing import Any, Dict, List

from ingestion.base import DataSource
from ingestion.clients.http_api import UpstreamAPI
from ingestion.transformers.normalizer import parse_document
from schemas.records import FracCompetency
from schemas.sources import TaxonomyResponse


class FracCompetencyExtractor(DataSource[FracCompetency]):
    """All taxonomy competencies, unrestricted by code, type or area"""

    source_name = "frac_competency"

    def __init__(self, api: UpstreamAPI, host: str):
        super().__init__()
        self.api = api
        self.host = host

    async def fetch(self) -> Dict[str, Any]:
        return await self.api.frac_competencies(self.host)

    def normalize(self, raw: Dict[str, Any]) -> List[FracCompetency]:
        response = parse_document(TaxonomyResponse, raw, "getAllCompetencies")
        competencies = (response.data.getAllCompetencies if response.data else None) or []

        return [
            FracCompetency(
                fracCompetencyID=competency.id,
                fracCompetencyName=competency.name,
                fracCompetencyStatus=competency.status,
            )
            for competency in competencies
            if competency is not None
        ]
