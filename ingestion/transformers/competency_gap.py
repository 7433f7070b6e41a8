"""
Competency gap calculation: expected vs declared levels per user.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import logging

from schemas.records import CompetencyGap, DeclaredCompetency, ExpectedCompetency

logger = logging.getLogger(__name__)

GapKey = Tuple[Optional[str], Optional[str], Optional[str], Optional[str]]


def calculate_competency_gaps(
    expected: Sequence[ExpectedCompetency],
    declared: Sequence[DeclaredCompetency]
) -> List[CompetencyGap]:
    """
    Left-join expected competencies to declared ones and compute the gap.

    - Join key is (competencyID, userID); None matches None.
    - An expected row with no declared match has declared level 0.
    - Rows are grouped by (user, competency, org, work order); within a group
      the maximum expected level and the maximum declared level are taken
      independently, so duplicate source rows resolve to the highest value.
    - competencyGap = expectedLevel - declaredLevel, which may be negative.

    Output order follows the first appearance of each group in `expected`.
    """
    declared_levels: Dict[Tuple[Optional[str], Optional[str]], int] = {}
    for dec in declared:
        join_key = (dec.decCompetencyID, dec.decUserID)
        declared_levels[join_key] = max(declared_levels.get(join_key, dec.decCompetencyLevel), dec.decCompetencyLevel)

    groups: Dict[GapKey, List[int]] = {}
    for exp in expected:
        declared_level = declared_levels.get((exp.expCompetencyID, exp.expUserID), 0)
        key = (exp.expUserID, exp.expCompetencyID, exp.expOrgID, exp.expWorkOrderID)
        levels = groups.get(key)
        if levels is None:
            groups[key] = [exp.expCompetencyLevel, declared_level]
        else:
            levels[0] = max(levels[0], exp.expCompetencyLevel)
            levels[1] = max(levels[1], declared_level)

    gaps = [
        CompetencyGap(
            userID=user_id,
            competencyID=competency_id,
            orgID=org_id,
            workOrderID=work_order_id,
            expectedLevel=expected_level,
            declaredLevel=declared_level,
            competencyGap=expected_level - declared_level,
        )
        for (user_id, competency_id, org_id, work_order_id), (expected_level, declared_level) in groups.items()
    ]

    logger.info(
        f"Calculated {len(gaps)} competency gaps from {len(expected)} expected "
        f"and {len(declared)} declared rows"
    )
    return gaps
