"""
Pydantic schemas for the normalized tables produced by each run.

Field names are the published column names. Records are frozen: a table is
an immutable snapshot once produced.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Record(BaseModel):
    """Base for all normalized table rows"""

    model_config = ConfigDict(frozen=True, use_enum_values=True, coerce_numbers_to_str=True)


class CourseRatingSummary(Record):
    courseID: Optional[str] = None
    ratingSum: Optional[float] = None
    ratingCount: int = Field(..., gt=0)
    ratingAverage: Optional[float] = None
    count1Star: Optional[int] = None
    count2Star: Optional[int] = None
    count3Star: Optional[int] = None
    count4Star: Optional[int] = None
    count5Star: Optional[int] = None


class UserCourseCompletion(Record):
    completionUserID: Optional[str] = None
    completionCourseID: Optional[str] = None
    completionPercentage: Optional[float] = None
    completionStatus: str


class FracCompetency(Record):
    fracCompetencyID: Optional[str] = None
    fracCompetencyName: Optional[str] = None
    fracCompetencyStatus: Optional[str] = None


class LiveCourse(Record):
    id: str


class CourseCompetency(Record):
    courseID: str
    courseStatus: Optional[str] = None
    courseChannel: Optional[str] = None
    courseCompetencyID: Optional[str] = None
    courseCompetencyLevel: int = Field(1, ge=1)


class ExpectedCompetency(Record):
    expOrgID: Optional[str] = None
    expWorkOrderID: Optional[str] = None
    expUserID: Optional[str] = None
    expCompetencyID: str
    expCompetencyLevel: int = Field(..., ge=1)


class DeclaredCompetency(Record):
    decUserID: Optional[str] = None
    decCompetencyID: str
    decCompetencyLevel: int = Field(1, ge=0)


class CompetencyGap(Record):
    userID: Optional[str] = None
    competencyID: Optional[str] = None
    orgID: Optional[str] = None
    workOrderID: Optional[str] = None
    expectedLevel: int = Field(..., ge=1)
    declaredLevel: int = Field(..., ge=0)
    competencyGap: int

    @property
    def key(self):
        """Grouping key (user, competency, org, work order)"""
        return (self.userID, self.competencyID, self.orgID, self.workOrderID)


class CompetencyGapCompletion(CompetencyGap):
    completionPercentage: Optional[float] = None
    completionStatus: str
