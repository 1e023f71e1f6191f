"""Shaping - validate, truncate and aggregate flat records."""

from .aggregate import NULL_LABEL, Operation, aggregate_data, group_key, series_total, to_number
from .prepare import prepare_data, truncate_data, validate_data, validate_fields
from .statistics import describe, extract_numeric, pearson, to_finite

__all__ = [
    "NULL_LABEL",
    "Operation",
    "aggregate_data",
    "describe",
    "extract_numeric",
    "group_key",
    "pearson",
    "prepare_data",
    "series_total",
    "to_finite",
    "to_number",
    "truncate_data",
    "validate_data",
    "validate_fields",
]
