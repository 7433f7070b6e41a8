"""
Live course extractor (search index)

Used only to restrict the course competency mapping to live content, so the
content hierarchy documents of non-live courses are never parsed.
"""

from typing import Any, Dict, List

from ingestion.base import DataSource
from ingestion.clients.http_api import UpstreamAPI
from ingestion.transformers.normalizer import parse_document
from schemas.records import LiveCourse
from schemas.sources import SearchResponse


class LiveCourseExtractor(DataSource[LiveCourse]):
    """Distinct identifiers of published courses (status Live, category Course)"""

    source_name = "live_course"

    def __init__(self, api: UpstreamAPI, host: str, limit: int = 1000):
        super().__init__()
        self.api = api
        self.host = host
        self.limit = limit

    async def fetch(self) -> Dict[str, Any]:
        return await self.api.search_live_courses(self.host, limit=self.limit)

    def normalize(self, raw: Dict[str, Any]) -> List[LiveCourse]:
        response = parse_document(SearchResponse, raw, "hits")
        hits = (response.hits.hits if response.hits else None) or []

        seen = set()
        courses = []
        for hit in hits:
            identifier = hit.source.identifier if hit is not None and hit.source is not None else None
            if identifier is None or identifier in seen:
                continue
            seen.add(identifier)
            courses.append(LiveCourse(id=identifier))
        return courses
