"""Surface sizes and margin-aware plot dimensions."""

from typing import Any, Dict, NamedTuple, Optional

from .constants import (
    COMPACT_MIN_WIDTH,
    DEFAULT_MARGIN_BOTTOM,
    DEFAULT_MARGIN_LEFT,
    DEFAULT_MARGIN_RIGHT,
    DEFAULT_MARGIN_TOP,
)


class Size(NamedTuple):
    width: float
    height: float = 0


DEFAULT_MARGINS = {
    "top": DEFAULT_MARGIN_TOP,
    "right": DEFAULT_MARGIN_RIGHT,
    "bottom": DEFAULT_MARGIN_BOTTOM,
    "left": DEFAULT_MARGIN_LEFT,
}


def calculate_dimensions(
    container_width: float,
    container_height: float,
    margins: Optional[Dict[str, float]] = None,
) -> Dict[str, Any]:
    """Inner plot size after margins (never negative). Returns {width, height, margins}."""
    m = {**DEFAULT_MARGINS, **(margins or {})}
    return {
        "width": max(0, container_width - m["left"] - m["right"]),
        "height": max(0, container_height - m["top"] - m["bottom"]),
        "margins": m,
    }


def should_use_compact_mode(width: float, min_width: float = COMPACT_MIN_WIDTH) -> bool:
    return width < min_width
