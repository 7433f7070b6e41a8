"""
Completion status classification.

completionPercentage   completionStatus
NULL                   not-enrolled
0.0                    enrolled
0.0 < % < 10.0         started
10.0 <= % < 100.0      in-progress
100.0 and above        completed
"""

from typing import Any, Dict, Iterable, List, Optional
import enum

from ingestion.transformers.normalizer import is_missing


class CompletionStatus(str, enum.Enum):
    NOT_ENROLLED = "not-enrolled"
    ENROLLED = "enrolled"
    STARTED = "started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


def completion_status(percentage: Optional[float]) -> CompletionStatus:
    """First matching rule wins; total over all floats plus None."""
    if is_missing(percentage):
        return CompletionStatus.NOT_ENROLLED
    if percentage == 0.0:
        return CompletionStatus.ENROLLED
    if percentage < 10.0:
        return CompletionStatus.STARTED
    if percentage < 100.0:
        return CompletionStatus.IN_PROGRESS
    return CompletionStatus.COMPLETED


def with_completion_status(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copy each row adding completionStatus derived from completionPercentage"""
    return [
        {**row, "completionStatus": completion_status(row.get("completionPercentage")).value}
        for row in rows
    ]
