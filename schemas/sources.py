"""
Pydantic schemas for the nested documents embedded in upstream sources.

Only the fields the pipeline reads are declared; anything else in the
documents is ignored. Parsing a document that does not match raises
pydantic.ValidationError, which callers turn into a per-record skip.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional, Union


class SourceDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


# ============================================================================
# Content hierarchy (course competency mapping)
# ============================================================================

class CourseCompetencyEntry(SourceDocument):
    id: Optional[str] = None
    selectedLevelLevel: Optional[str] = None

    @field_validator("selectedLevelLevel", mode="before")
    @classmethod
    def level_as_text(cls, v):
        """Levels are free text, but some producers write bare numbers"""
        if v is None:
            return None
        return str(v)


class CourseHierarchy(SourceDocument):
    status: Optional[str] = None
    channel: Optional[str] = None
    # usually a JSON string nested inside the hierarchy JSON, occasionally a list
    competencies_v3: Optional[Union[str, List[Any]]] = None


# ============================================================================
# User profile (declared competencies)
# ============================================================================

class ProfileCompetency(SourceDocument):
    id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    competencyType: Optional[str] = None
    competencySelfAttestedLevel: Optional[int] = None

    @field_validator("competencySelfAttestedLevel", mode="before")
    @classmethod
    def lenient_level(cls, v):
        """
        Whole non-negative numbers, given as numbers or numeric text.

        Anything else (fractions, negatives, words) is treated as absent.
        """
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, str):
            v = v.strip()
        try:
            number = float(v)
        except (TypeError, ValueError):
            return None
        if not number.is_integer() or number < 0:
            return None
        return int(number)


class ProfileDetails(SourceDocument):
    competencies: Optional[List[Optional[ProfileCompetency]]] = None


# ============================================================================
# Taxonomy (FRAC) GraphQL response
# ============================================================================

class CompetencyAdditionalProperties(SourceDocument):
    competencyType: Optional[str] = None
    competencyArea: Optional[str] = None


class TaxonomyCompetency(SourceDocument):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    source: Optional[str] = None
    additionalProperties: Optional[CompetencyAdditionalProperties] = None


class TaxonomyData(SourceDocument):
    getAllCompetencies: Optional[List[Optional[TaxonomyCompetency]]] = None


class TaxonomyResponse(SourceDocument):
    data: Optional[TaxonomyData] = None


# ============================================================================
# Search index response
# ============================================================================

class SearchHitSource(SourceDocument):
    identifier: Optional[str] = None
    primaryCategory: Optional[str] = None
    status: Optional[str] = None
    channel: Optional[str] = None
    competencies: Optional[Any] = None


class SearchHit(SourceDocument):
    source: Optional[SearchHitSource] = Field(None, alias="_source")


class SearchHits(SourceDocument):
    hits: Optional[List[Optional[SearchHit]]] = None


class SearchResponse(SourceDocument):
    hits: Optional[SearchHits] = None
