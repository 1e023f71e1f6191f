"""
Error types for data shaping and resource loading.

Shaping errors subclass ValueError so route handlers that already catch
ValueError keep working. LoadFailed is the only error that is fatal to every
chart on a page.
"""

from typing import Any, Dict, List, Optional


class VizError(Exception):
    """Base error. Carries a short user-facing message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": self.__class__.__name__, "message": self.message}


class InvalidInput(VizError, ValueError):
    """Data is missing, not a list of records, or empty."""


class MissingFields(VizError, ValueError):
    """Required fields are absent from the sampled record."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["missing_fields"] = self.missing_fields
        return d


class InvalidHierarchy(VizError, ValueError):
    """Pre-built hierarchy is not an object."""


class InvalidGraph(VizError, ValueError):
    """Pre-built graph lacks a nodes (or links) list."""


class DataSourceError(VizError, ValueError):
    """No usable data source, or the upstream query rejected."""


class EmptyResult(VizError, ValueError):
    """Shaping succeeded but produced nothing to render."""


class LoadFailed(VizError):
    """
    Every attempt to load the rendering library failed.
    attempts holds one "origin: reason" line per failed attempt.
    """

    def __init__(self, message: str, attempts: Optional[List[str]] = None):
        super().__init__(message)
        self.attempts = list(attempts or [])

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["attempts"] = self.attempts
        return d
