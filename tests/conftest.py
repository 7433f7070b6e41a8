"""
Pytest configuration and fixtures
"""

import json
from typing import Any, Dict, List, Sequence, Tuple
from unittest.mock import AsyncMock, MagicMock

import pandas as pd
import pytest

from core.config import Settings


class FakeTableReader:
    """In-memory stand-in for TableReader keyed by (keyspace, table)"""

    def __init__(self, tables: Dict[Tuple[str, str], List[Dict[str, Any]]]):
        self.tables = tables
        self.scans: List[Tuple[str, str]] = []

    async def scan(self, keyspace: str, table_name: str, columns: Sequence[str]) -> pd.DataFrame:
        self.scans.append((keyspace, table_name))
        rows = self.tables.get((keyspace, table_name), [])
        return pd.DataFrame(rows, columns=list(columns))


def hierarchy_json(competencies, status="Live", channel="channel_1") -> str:
    """Content hierarchy document with competencies_v3 nested as a JSON string"""
    return json.dumps({
        "status": status,
        "channel": channel,
        "competencies_v3": json.dumps(competencies),
    })


def profile_json(competencies) -> str:
    return json.dumps({"competencies": competencies})


@pytest.fixture
def test_settings():
    """Settings with sequential extraction and small publish batches"""
    return Settings(
        EXTRACT_CONCURRENTLY=False,
        ETL_BATCH_SIZE=2,
        BROKER_LIST="broker:9092",
    )


@pytest.fixture
def run_timestamp():
    return 1700000000000


@pytest.fixture
def mock_db_session():
    """Async session whose execute/commit/rollback are recorded"""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def store_tables(test_settings):
    """
    Column-family tables for the end-to-end scenario:

    user_u expects comp_c at level 3 and declares nothing for it;
    live course course_k maps comp_c at level 2 and user_u is 50% through it.
    """
    s = test_settings
    return {
        (s.STORE_USER_KEYSPACE, s.STORE_RATING_SUMMARY_TABLE): [
            {
                "activityid": "course_k", "activitytype": "Course",
                "sum_of_total_ratings": 9.0, "total_number_of_ratings": 2,
                "totalcount1stars": 0, "totalcount2stars": 0, "totalcount3stars": 0,
                "totalcount4stars": 1, "totalcount5stars": 1,
            },
            {
                "activityid": "course_z", "activitytype": "course",
                "sum_of_total_ratings": 0.0, "total_number_of_ratings": 0,
                "totalcount1stars": 0, "totalcount2stars": 0, "totalcount3stars": 0,
                "totalcount4stars": 0, "totalcount5stars": 0,
            },
        ],
        (s.STORE_COURSE_KEYSPACE, s.STORE_USER_CONTENT_CONSUMPTION_TABLE): [
            {"userid": "user_u", "courseid": "course_k", "completionpercentage": 50.0},
        ],
        (s.STORE_HIERARCHY_KEYSPACE, s.STORE_CONTENT_HIERARCHY_TABLE): [
            {"identifier": "course_k", "hierarchy": hierarchy_json([{"id": "comp_c", "selectedLevelLevel": "Level 2"}])},
            {"identifier": "course_draft", "hierarchy": hierarchy_json([{"id": "comp_c", "selectedLevelLevel": "Level 1"}])},
        ],
        (s.STORE_USER_KEYSPACE, s.STORE_USER_TABLE): [
            {"userid": "user_u", "profiledetails": profile_json([{"id": "comp_other", "competencySelfAttestedLevel": 2}])},
        ],
    }


@pytest.fixture
def expected_rows():
    """Druid rows (header already removed)"""
    return [
        {
            "expOrgID": "org_o", "expWorkOrderID": "wo_w", "expUserID": "user_u",
            "expCompetencyID": "comp_c", "expCompetencyLevel": "Level 3",
        },
    ]


@pytest.fixture
def search_response():
    return {"hits": {"hits": [{"_source": {"identifier": "course_k", "status": "Live"}}]}}


@pytest.fixture
def taxonomy_response():
    return {
        "data": {
            "getAllCompetencies": [
                {"id": "comp_c", "name": "Noting and Drafting", "status": "VERIFIED"},
                {"id": "comp_other", "name": "Budgeting", "status": "UNVERIFIED"},
            ]
        }
    }


@pytest.fixture
def mock_api(expected_rows, search_response, taxonomy_response):
    """UpstreamAPI stand-in returning the scenario responses"""
    api = MagicMock()
    api.druid_sql = AsyncMock(return_value=expected_rows)
    api.search_live_courses = AsyncMock(return_value=search_response)
    api.frac_competencies = AsyncMock(return_value=taxonomy_response)
    return api


@pytest.fixture
def fake_reader(store_tables):
    return FakeTableReader(store_tables)
