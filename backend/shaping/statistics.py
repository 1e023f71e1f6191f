"""Numeric helpers for distribution and correlation views."""

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


def to_finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def extract_numeric(data: Sequence[Mapping], field: str) -> List[float]:
    """Values of `field` that coerce to finite numbers; everything else is skipped."""
    values = []
    for record in data or []:
        num = to_finite(record.get(field))
        if num is not None:
            values.append(num)
    return values


def describe(values: Sequence[float]) -> Dict[str, float]:
    """Mean, median, population standard deviation, count, min and max."""
    n = len(values)
    if n == 0:
        return {"mean": 0, "median": 0, "stdDev": 0, "count": 0, "min": 0, "max": 0}

    ordered = sorted(values)
    mean = sum(values) / n
    mid = n // 2
    median = ordered[mid] if n % 2 else (ordered[mid - 1] + ordered[mid]) / 2
    variance = sum((v - mean) ** 2 for v in values) / n
    return {
        "mean": mean,
        "median": median,
        "stdDev": math.sqrt(variance),
        "count": n,
        "min": ordered[0],
        "max": ordered[-1],
    }


def pearson(points: Sequence[Tuple[float, float]]) -> Optional[float]:
    """Pearson correlation coefficient; None for fewer than two points or zero variance."""
    n = len(points)
    if n < 2:
        return None
    sum_x = sum(x for x, _ in points)
    sum_y = sum(y for _, y in points)
    sum_xy = sum(x * y for x, y in points)
    sum_x2 = sum(x * x for x, _ in points)
    sum_y2 = sum(y * y for _, y in points)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if spread <= 0:
        return None
    return numerator / math.sqrt(spread)
