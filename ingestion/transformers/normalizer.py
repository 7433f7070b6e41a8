"""
Field-level parsing shared by the extractors.

Handles:
- Level extraction from free-text level fields
- Per-record parsing of embedded JSON documents into typed schemas
- DataFrame rows to plain records (NaN becomes None)
"""

from typing import Any, Dict, List, Optional, Type, TypeVar
import math
import re

import numpy as np
import pandas as pd
from pydantic import BaseModel, TypeAdapter, ValidationError

from core.exceptions import MalformedRecordError

T = TypeVar("T", bound=BaseModel)

LEVEL_PATTERN = re.compile(r"[0-9]+")


def parse_level(value: Any, default: int = 1) -> int:
    """
    Extract the numeric level from a free-text level field.

    Takes the first run of digits in the trimmed text ("Level 3" -> 3).
    Missing or digit-free text gives `default`.
    """
    if is_missing(value):
        return default
    match = LEVEL_PATTERN.search(str(value).strip())
    if match is None:
        return default
    return int(match.group(0))


def is_missing(value: Any) -> bool:
    """None, or a float NaN as produced by pandas"""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def parse_document(
    model: Type[T],
    value: Any,
    field_name: str,
    record_key: Any = None
) -> T:
    """
    Validate one embedded document (JSON text or already-decoded dict).

    Raises:
        MalformedRecordError: document is not valid JSON or does not fit `model`
    """
    try:
        if isinstance(value, (str, bytes)):
            return model.model_validate_json(value)
        return model.model_validate(value)
    except ValidationError as e:
        raise MalformedRecordError(
            f"Unparsable {field_name} document",
            context={"field_name": field_name, "record_key": record_key},
            original_exception=e
        )


def parse_document_list(
    model: Type[T],
    value: Any,
    field_name: str,
    record_key: Any = None
) -> List[T]:
    """
    Validate an embedded JSON array of documents, dropping null entries.

    Raises:
        MalformedRecordError: array is not valid JSON or an entry does not fit `model`
    """
    adapter = TypeAdapter(List[Optional[model]])
    try:
        if isinstance(value, (str, bytes)):
            items = adapter.validate_json(value)
        else:
            items = adapter.validate_python(value)
    except ValidationError as e:
        raise MalformedRecordError(
            f"Unparsable {field_name} list",
            context={"field_name": field_name, "record_key": record_key},
            original_exception=e
        )
    return [item for item in items if item is not None]


def frame_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame to a list of dicts with None in place of NaN"""
    if df.empty:
        return []
    records = df.astype(object).where(pd.notna(df), None).to_dict(orient="records")
    return [
        {key: value.item() if isinstance(value, np.generic) else value for key, value in record.items()}
        for record in records
    ]
