"""
Aggregation engine: group flat records by a field and reduce a value field.

Grouping keys are string-coerced; missing keys become the "Null" label so those
rows stay visible. Non-numeric values contribute 0 to sums. Output is sorted by
value descending, ties broken by label ascending.
"""

import math
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

NULL_LABEL = "Null"


class Operation(str, Enum):
    SUM = "Sum"
    COUNT = "Count"
    AVERAGE = "Average"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> "Operation":
        """Map user input to an operation. Anything unrecognised is UNKNOWN (reduces like COUNT)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for op in (cls.SUM, cls.COUNT, cls.AVERAGE):
                if op.value.lower() == wanted:
                    return op
        return cls.UNKNOWN


def group_key(value: Any) -> str:
    """String label for a grouping value: None -> 'Null', 1.0 -> '1', True -> 'true'."""
    if value is None:
        return NULL_LABEL
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Any) -> float:
    """Lenient numeric coercion; None, NaN and unparseable strings become 0."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            num = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return 0.0 if math.isnan(num) else num


def accumulate(
    data: Sequence[Mapping],
    key_fn: Callable[[Mapping], str],
    value_field: Optional[str],
) -> Dict[str, Dict[str, float]]:
    """Running {sum, count} per key, in first-seen key order."""
    groups: Dict[str, Dict[str, float]] = {}
    for record in data:
        group = groups.setdefault(key_fn(record), {"sum": 0.0, "count": 0})
        group["count"] += 1
        if value_field and record.get(value_field) is not None:
            group["sum"] += to_number(record.get(value_field))
    return groups


def reduce_group(group: Mapping[str, float], operation: Operation) -> float:
    if operation is Operation.SUM:
        return group["sum"]
    if operation is Operation.AVERAGE:
        return group["sum"] / group["count"] if group["count"] > 0 else 0
    if operation is Operation.COUNT:
        return group["count"]
    # UNKNOWN falls back to COUNT
    return group["count"]


def sort_series(entries: List[Dict[str, Any]], label_key: str = "label") -> List[Dict[str, Any]]:
    """Largest value first; equal values ordered by label."""
    return sorted(entries, key=lambda e: (-e["value"], str(e[label_key])))


def aggregate_data(
    data: Optional[Sequence[Mapping]],
    group_field: Optional[str],
    value_field: Optional[str] = None,
    operation: Any = Operation.COUNT,
) -> List[Dict[str, Any]]:
    """
    Group records by group_field and reduce value_field.
    Returns [{label, value}, ...]; empty when data or group_field is missing.
    """
    if not data or not group_field:
        return []

    op = Operation.parse(operation)
    groups = accumulate(data, lambda r: group_key(r.get(group_field)), value_field)
    result = [{"label": label, "value": reduce_group(g, op)} for label, g in groups.items()]
    return sort_series(result)


def series_total(series: Sequence[Mapping]) -> float:
    return sum(entry["value"] for entry in series)
