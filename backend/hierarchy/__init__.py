"""Hierarchy - nested trees with value roll-up."""

from .tree import (
    ROOT_LABEL,
    ROOT_NAME,
    build_hierarchy,
    build_nested_hierarchy,
    calculate_total_value,
    normalize_hierarchy,
)

__all__ = [
    "ROOT_LABEL",
    "ROOT_NAME",
    "build_hierarchy",
    "build_nested_hierarchy",
    "calculate_total_value",
    "normalize_hierarchy",
]
