"""Shared configuration, errors and formatters for shaping, loader and layout modules."""

from .errors import (
    DataSourceError,
    EmptyResult,
    InvalidGraph,
    InvalidHierarchy,
    InvalidInput,
    LoadFailed,
    MissingFields,
    VizError,
)
from .utils import (
    detach,
    format_currency,
    format_number,
    format_percent,
    format_value,
    truncate_label,
)

__all__ = [
    "DataSourceError",
    "EmptyResult",
    "InvalidGraph",
    "InvalidHierarchy",
    "InvalidInput",
    "LoadFailed",
    "MissingFields",
    "VizError",
    "detach",
    "format_currency",
    "format_number",
    "format_percent",
    "format_value",
    "truncate_label",
]
