"""
Unit tests for shared field parsing
"""

import numpy as np
import pandas as pd
import pytest

from core.exceptions import MalformedRecordError
from ingestion.transformers.normalizer import (
    frame_records,
    parse_document,
    parse_document_list,
    parse_level,
)
from schemas.sources import CourseCompetencyEntry, ProfileDetails


class TestParseLevel:
    """Test level extraction from free text"""

    @pytest.mark.parametrize("text,expected", [
        ("Level 3", 3),
        ("  4  ", 4),
        ("Level 12 of 3", 12),
        (5, 5),
        ("Level 0", 0),
        ("Level", 1),
        ("", 1),
        (None, 1),
        (float("nan"), 1),
    ])
    def test_parse_level(self, text, expected):
        assert parse_level(text) == expected

    def test_custom_default(self):
        assert parse_level("advanced", default=2) == 2

class TestParseDocument:
    """Test per-record document parsing"""

    def test_parse_json_text(self):
        profile = parse_document(
            ProfileDetails,
            '{"competencies": [{"id": "c1", "competencySelfAttestedLevel": 2}], "other": true}',
            "profiledetails"
        )

        assert profile.competencies[0].id == "c1"
        assert profile.competencies[0].competencySelfAttestedLevel == 2

    def test_parse_decoded_dict(self):
        profile = parse_document(ProfileDetails, {"competencies": None}, "profiledetails")

        assert profile.competencies is None

    def test_malformed_json_raises(self):
        with pytest.raises(MalformedRecordError) as exc_info:
            parse_document(ProfileDetails, '{"competencies": [', "profiledetails", record_key="user_1")

        assert exc_info.value.context["record_key"] == "user_1"
        assert exc_info.value.context["field_name"] == "profiledetails"

    def test_wrong_shape_raises(self):
        with pytest.raises(MalformedRecordError):
            parse_document(ProfileDetails, '{"competencies": "not a list"}', "profiledetails")

    def test_unparsable_self_attested_level_is_absent(self):
        profile = parse_document(
            ProfileDetails,
            '{"competencies": [{"id": "c1", "competencySelfAttestedLevel": "expert"}]}',
            "profiledetails"
        )

        assert profile.competencies[0].competencySelfAttestedLevel is None

    @pytest.mark.parametrize("level,expected", [
        (3, 3),
        (0, 0),
        (2.0, 2),
        ("2", 2),
        (" 4 ", 4),
        ("2.0", 2),
        (2.9, None),
        ("2.9", None),
        (-2, None),
        ("-1", None),
        (True, None),
        ([], None),
    ])
    def test_self_attested_level_coercion(self, level, expected):
        """Numbers and numeric text follow the same rule"""
        profile = parse_document(
            ProfileDetails,
            {"competencies": [{"id": "c1", "competencySelfAttestedLevel": level}]},
            "profiledetails"
        )

        assert profile.competencies[0].competencySelfAttestedLevel == expected


class TestParseDocumentList:
    """Test embedded JSON arrays"""

    def test_drops_null_entries(self):
        entries = parse_document_list(
            CourseCompetencyEntry,
            '[{"id": "c1", "selectedLevelLevel": "Level 2"}, null, {"id": 7, "selectedLevelLevel": 3}]',
            "competencies_v3"
        )

        assert [(e.id, e.selectedLevelLevel) for e in entries] == [("c1", "Level 2"), ("7", "3")]

    def test_not_a_list_raises(self):
        with pytest.raises(MalformedRecordError):
            parse_document_list(CourseCompetencyEntry, '{"id": "c1"}', "competencies_v3")

class TestFrameRecords:
    """Test DataFrame to record conversion"""

    def test_nan_becomes_none(self):
        df = pd.DataFrame({"a": [1.5, np.nan], "b": ["x", None]})

        assert frame_records(df) == [{"a": 1.5, "b": "x"}, {"a": None, "b": None}]

    def test_numpy_scalars_become_python(self):
        df = pd.DataFrame({"count": np.array([3], dtype=np.int64)})

        value = frame_records(df)[0]["count"]

        assert value == 3
        assert type(value) is int

    def test_empty_frame(self):
        assert frame_records(pd.DataFrame(columns=["a"])) == []

