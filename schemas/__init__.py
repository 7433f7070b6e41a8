"""
Pydantic schemas for data validation and serialization.

Schemas:
    records: The normalized tables published by each run
    sources: Nested documents embedded in upstream sources (course hierarchy,
        user profile, taxonomy response, search index hits)

Usage:
    from schemas.records import CompetencyGap, CourseCompetency
    from schemas.sources import CourseHierarchy, ProfileDetails

Validation:
    Source documents are validated per record; a document that fails
    validation is skipped by the extractor that reads it rather than
    aborting the extraction.
"""

__all__ = [
    "CourseRatingSummary",
    "UserCourseCompletion",
    "FracCompetency",
    "LiveCourse",
    "CourseCompetency",
    "ExpectedCompetency",
    "DeclaredCompetency",
    "CompetencyGap",
    "CompetencyGapCompletion",
]
