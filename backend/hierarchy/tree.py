"""
Hierarchy builder for part-of-whole views (treemap, sunburst).

Tree nodes are plain dicts: {name, value?, children?, data?}. A leaf carries a
numeric value, an internal node a non-empty children list. The synthetic root
uses ROOT_NAME, which never comes out of data-derived labels.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from shared.errors import InvalidHierarchy
from shaping.aggregate import (
    Operation,
    aggregate_data,
    group_key,
    reduce_group,
    sort_series,
    to_number,
)

ROOT_NAME = "__root__"
ROOT_LABEL = "All"
UNNAMED = "Unnamed"


def normalize_hierarchy(data: Any) -> Dict[str, Any]:
    """Validate a pre-built nested object and normalize every node."""
    if not isinstance(data, Mapping):
        raise InvalidHierarchy("Hierarchy data must be an object")
    return _normalize(data, "root")


def _normalize(node: Any, path: str) -> Dict[str, Any]:
    if not isinstance(node, Mapping):
        raise InvalidHierarchy(f"Hierarchy node at {path} must be an object")

    name = node.get("name")
    normalized: Dict[str, Any] = {
        "name": str(name) if name not in (None, "") else UNNAMED,
        "data": node.get("data") or {k: v for k, v in node.items() if k != "children"},
    }
    children = node.get("children")
    if isinstance(children, list) and children:
        normalized["children"] = [_normalize(c, f"{path}.{i}") for i, c in enumerate(children)]
    elif "value" in node:
        normalized["value"] = to_number(node.get("value"))
    return normalized


def build_hierarchy(
    data: Sequence[Mapping],
    group_field: str,
    value_field: Optional[str] = None,
    operation: Any = Operation.COUNT,
    secondary_group_field: Optional[str] = None,
) -> Dict[str, Any]:
    """Flat records to a tree: one level per grouping field, largest first."""
    if secondary_group_field:
        return build_nested_hierarchy(data, group_field, secondary_group_field, value_field, operation)

    aggregated = aggregate_data(data, group_field, value_field, operation)
    return _root([
        {"name": item["label"], "value": item["value"], "data": {"label": item["label"], "value": item["value"]}}
        for item in aggregated
    ])


def build_nested_hierarchy(
    data: Sequence[Mapping],
    group_field: str,
    secondary_group_field: str,
    value_field: Optional[str] = None,
    operation: Any = Operation.COUNT,
) -> Dict[str, Any]:
    """
    Two-level tree: primary key -> secondary key -> reduced value.
    Leaves are sorted within their parent, parents by the sum of their leaves.
    """
    op = Operation.parse(operation)
    groups: Dict[str, Dict[str, Dict[str, float]]] = {}
    for record in data or []:
        primary = group_key(record.get(group_field))
        secondary = group_key(record.get(secondary_group_field))
        group = groups.setdefault(primary, {}).setdefault(secondary, {"sum": 0.0, "count": 0})
        group["count"] += 1
        if value_field and record.get(value_field) is not None:
            group["sum"] += to_number(record.get(value_field))

    parents: List[Dict[str, Any]] = []
    for primary, secondaries in groups.items():
        leaves = []
        for secondary, group in secondaries.items():
            value = reduce_group(group, op)
            leaves.append({
                "name": secondary,
                "value": value,
                "data": {"primaryGroup": primary, "secondaryGroup": secondary, "value": value},
            })
        parents.append({
            "name": primary,
            "children": sort_series(leaves, label_key="name"),
            "data": {"primaryGroup": primary},
        })

    parents.sort(key=lambda p: (-sum(c["value"] for c in p["children"]), p["name"]))
    return _root(parents)


def calculate_total_value(node: Optional[Mapping]) -> float:
    """Sum of leaf values under node. Nodes with neither value nor children count as 0."""
    if not node:
        return 0
    if node.get("value") is not None:
        return node["value"]
    children = node.get("children")
    if children:
        return sum(calculate_total_value(child) for child in children)
    return 0


def _root(children: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"name": ROOT_NAME, "children": children, "data": {"label": ROOT_LABEL}}
