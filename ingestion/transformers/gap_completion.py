"""
Attach course completion progress to competency gaps.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from schemas.records import (
    CompetencyGap,
    CompetencyGapCompletion,
    CourseCompetency,
    UserCourseCompletion,
)
from ingestion.transformers.completion_status import completion_status
from ingestion.transformers.normalizer import is_missing

logger = logging.getLogger(__name__)


def best_completion_by_gap(
    gaps: Sequence[CompetencyGap],
    course_competencies: Sequence[CourseCompetency],
    completions: Sequence[UserCourseCompletion]
) -> Dict[tuple, float]:
    """
    Best completion percentage per positive gap.

    A course qualifies for a gap when it maps the gap's competency at a level
    no higher than the expected level. Gaps without any qualifying course are
    absent from the result. Gaps with qualifying courses but no completion
    rows for the user get 0.0. All key comparisons treat None as equal to None.
    """
    courses_by_competency: Dict[Optional[str], List[Tuple[str, int]]] = defaultdict(list)
    for cc in course_competencies:
        courses_by_competency[cc.courseCompetencyID].append((cc.courseID, cc.courseCompetencyLevel))

    percentages_by_user_course: Dict[Tuple[Optional[str], Optional[str]], List[float]] = defaultdict(list)
    for ucc in completions:
        if not is_missing(ucc.completionPercentage):
            percentages_by_user_course[(ucc.completionUserID, ucc.completionCourseID)].append(ucc.completionPercentage)

    best: Dict[tuple, float] = {}
    for gap in gaps:
        if gap.competencyGap <= 0:
            continue

        qualifying_courses = [
            course_id
            for course_id, course_level in courses_by_competency.get(gap.competencyID, [])
            if course_level <= gap.expectedLevel
        ]
        if not qualifying_courses:
            continue

        percentages = [
            percentage
            for course_id in qualifying_courses
            for percentage in percentages_by_user_course.get((gap.userID, course_id), [])
        ]
        candidate = max(percentages) if percentages else 0.0
        best[gap.key] = max(best.get(gap.key, candidate), candidate)

    return best


def enrich_gap_completion(
    gaps: Sequence[CompetencyGap],
    course_competencies: Sequence[CourseCompetency],
    completions: Sequence[UserCourseCompletion]
) -> List[CompetencyGapCompletion]:
    """
    One output row per gap, in gap order.

    Non-positive gaps, and positive gaps with no qualifying course, keep a
    null completionPercentage and are classified not-enrolled.
    """
    best = best_completion_by_gap(gaps, course_competencies, completions)

    enriched = []
    for gap in gaps:
        percentage = best.get(gap.key)
        enriched.append(
            CompetencyGapCompletion(
                **gap.model_dump(),
                completionPercentage=percentage,
                completionStatus=completion_status(percentage).value,
            )
        )

    logger.info(
        f"Enriched {len(enriched)} competency gaps "
        f"({len(best)} with qualifying courses)"
    )
    return enriched
