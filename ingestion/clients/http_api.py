"""
HTTP clients for the upstream query services.

- Analytical engine (Druid SQL)
- Search index (Elasticsearch composite search)
- Competency taxonomy (FRAC dictionary GraphQL)

Failures are not retried: any transport error, non-2xx status or
unparsable body is raised as an UpstreamUnavailableError subclass and
aborts the run.
"""

import json
from typing import Any, Dict, List, Optional

import httpx
import logging

from core.exceptions import (
    UnsupportedRequestError,
    UpstreamQueryError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("post",)

FRAC_COMPETENCY_QUERY = (
    "query filterCompetencies($cod: [String], $competencyType: [String], $competencyArea: [String]) {\n"
    "  getAllCompetencies(\n"
    "    cod: $cod\n"
    "    competencyType: $competencyType\n"
    "    competencyArea: $competencyArea\n"
    "  ) {\n"
    "    name\n"
    "    id\n"
    "    description\n"
    "    status\n"
    "    source\n"
    "    additionalProperties {\n"
    "      competencyType\n"
    "      competencyArea\n"
    "      __typename\n"
    "    }\n"
    "    __typename\n"
    "  }\n"
    "}\n"
)


class UpstreamAPI:
    """
    JSON-over-HTTP helper shared by the API-backed extractors.

    Attributes:
        timeout: Request timeout in seconds (default: 60.0)
    """

    def __init__(self, timeout: float = 60.0):
        self.timeout = timeout

    async def api(self, method: str, url: str, body: Dict[str, Any]) -> Any:
        """
        Send a JSON request and return the decoded JSON response.

        Raises:
            UnsupportedRequestError: method is not supported
            UpstreamUnavailableError: transport failure
            UpstreamQueryError: non-2xx status or non-JSON body
        """
        if method.lower() not in SUPPORTED_METHODS:
            raise UnsupportedRequestError(
                f"HTTP method '{method}' not supported",
                context={"api_url": url, "method": method}
            )

        headers = {"Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                logger.debug(f"POST {url}")
                response = await client.post(url, headers=headers, content=json.dumps(body))
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(
                f"Request to {url} failed",
                context={"api_url": url, "timeout": self.timeout},
                original_exception=e
            )

        if response.status_code >= 400:
            raise UpstreamQueryError(
                f"Upstream returned HTTP {response.status_code}",
                context={
                    "api_url": url,
                    "status_code": response.status_code,
                    "response_body": response.text[:500]  # Truncate
                }
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamQueryError(
                "Failed to parse JSON response",
                context={
                    "api_url": url,
                    "response_body": response.text[:500]
                },
                original_exception=e
            )

    async def druid_sql(
        self,
        query: str,
        host: str,
        result_format: str = "object",
        limit: int = 10000
    ) -> List[Dict[str, Any]]:
        """
        Run a Druid SQL query, returning result rows without the header row.
        """
        url = f"http://{host}:8888/druid/v2/sql"
        body = {
            "resultFormat": result_format,
            "header": True,
            "context": {"sqlOuterLimit": limit},
            "query": query,
        }
        rows = await self.api("POST", url, body)
        if not isinstance(rows, list):
            raise UpstreamQueryError(
                "Druid SQL response is not a list of rows",
                context={"api_url": url, "response_type": type(rows).__name__}
            )
        return rows[1:]

    async def search_live_courses(self, host: str, limit: int = 1000) -> Dict[str, Any]:
        """Search-index query for published courses (status Live, category Course)"""
        url = f"http://{host}:9200/compositesearch/_search"
        body = {
            "from": 0,
            "size": limit,
            "_source": ["identifier", "primaryCategory", "status", "channel", "competencies"],
            "query": {
                "bool": {
                    "must": [
                        {"match": {"status": "Live"}},
                        {"match": {"primaryCategory": "Course"}},
                    ]
                }
            },
        }
        return await self.api("POST", url, body)

    async def frac_competencies(
        self,
        host: str,
        code: Optional[List[str]] = None,
        competency_type: Optional[List[str]] = None,
        competency_area: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Taxonomy query; empty filters mean unrestricted"""
        url = f"https://{host}/graphql"
        body = {
            "operationName": "filterCompetencies",
            "variables": {
                "cod": code or [""],
                "competencyType": competency_type or [""],
                "competencyArea": competency_area or [""],
            },
            "query": FRAC_COMPETENCY_QUERY,
        }
        return await self.api("POST", url, body)
