"""
Data preparation: shape validation, required-field check, truncation.
Pure functions; failures are reported in the result, never raised.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from shared.config import MAX_RECORDS


def validate_data(data: Any) -> Dict[str, Any]:
    """Check that data is a non-empty list of records. Returns {isValid, error}."""
    if data is None:
        return {"isValid": False, "error": "Data is required"}
    if not isinstance(data, (list, tuple)):
        return {"isValid": False, "error": "Data must be an array"}
    if len(data) == 0:
        return {"isValid": False, "error": "Data array is empty"}
    if not isinstance(data[0], Mapping):
        return {"isValid": False, "error": "Data records must be objects"}
    for index, record in enumerate(data):
        if not isinstance(record, Mapping):
            return {"isValid": False, "error": f"Data record at index {index} must be an object"}
    return {"isValid": True, "error": None}


def validate_fields(
    data: Sequence[Mapping],
    required_fields: Optional[List[str]],
    validate_all_rows: bool = False,
) -> Dict[str, Any]:
    """
    Check required fields. By default only the first record is sampled;
    validate_all_rows checks every row and reports the first offending one.
    Returns {isValid, error, missingFields}.
    """
    if not required_fields:
        return {"isValid": True, "error": None, "missingFields": []}

    rows = data if validate_all_rows else data[:1]
    for idx, record in enumerate(rows):
        keys = record if isinstance(record, Mapping) else {}
        missing = [f for f in required_fields if f not in keys]
        if missing:
            error = f"Missing required fields: {', '.join(missing)}"
            if validate_all_rows and idx > 0:
                error += f" (first missing at row {idx})"
            return {"isValid": False, "error": error, "missingFields": missing}

    return {"isValid": True, "error": None, "missingFields": []}


def truncate_data(data: Sequence[Mapping], limit: int = MAX_RECORDS) -> Dict[str, Any]:
    """Keep the first `limit` records. Returns {data, truncated, originalCount}."""
    original_count = len(data)
    truncated = original_count > limit
    return {
        "data": list(data[:limit]) if truncated else list(data),
        "truncated": truncated,
        "originalCount": original_count,
    }


def prepare_data(
    data: Any,
    required_fields: Optional[List[str]] = None,
    limit: Optional[int] = None,
    validate_all_rows: bool = False,
) -> Dict[str, Any]:
    """
    Validate and truncate raw records.
    Returns {data, valid, error, errorType, truncated, originalCount};
    data is empty whenever valid is False.
    """
    limit = MAX_RECORDS if limit is None else max(0, int(limit))
    original_count = len(data) if isinstance(data, (list, tuple)) else 0

    validation = validate_data(data)
    if not validation["isValid"]:
        return _invalid(validation["error"], "InvalidInput", original_count)

    field_validation = validate_fields(data, required_fields, validate_all_rows)
    if not field_validation["isValid"]:
        result = _invalid(field_validation["error"], "MissingFields", original_count)
        result["missingFields"] = field_validation["missingFields"]
        return result

    truncation = truncate_data(data, limit)
    if truncation["truncated"]:
        logger.info("Truncated input from {} to {} records", truncation["originalCount"], limit)

    return {
        "data": truncation["data"],
        "valid": True,
        "error": None,
        "errorType": None,
        "truncated": truncation["truncated"],
        "originalCount": truncation["originalCount"],
    }


def _invalid(error: str, error_type: str, original_count: int) -> Dict[str, Any]:
    return {
        "data": [],
        "valid": False,
        "error": error,
        "errorType": error_type,
        "truncated": False,
        "originalCount": original_count,
    }
