"""Shared utilities: display formatters and the hand-off copy for the rendering layer."""

import copy
import math
import re
from typing import Any, Optional

_TRAILING_ZEROS = re.compile(r"\.0+$")

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(num) else num


def _fixed(value: float, decimals: int) -> str:
    return _TRAILING_ZEROS.sub("", f"{value:.{decimals}f}")


def format_number(value: Any, decimals: int = 1) -> str:
    """Compact number for axis ticks and tooltips: 1500 -> '1.5K', 2e6 -> '2M'."""
    num = _as_number(value)
    if num is None:
        return "0"
    abs_value = abs(num)
    sign = "-" if num < 0 else ""
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs_value >= threshold:
            return sign + _fixed(abs_value / threshold, decimals) + suffix
    return sign + _fixed(abs_value, decimals)


def format_currency(value: Any, currency: str = "USD") -> str:
    """Whole-unit currency string, e.g. 1234.4 -> '$1,234'."""
    num = _as_number(value)
    symbol = _CURRENCY_SYMBOLS.get((currency or "").upper())
    if symbol is None:
        symbol = f"{currency} " if currency else "$"
    if num is None:
        return f"{symbol}0"
    sign = "-" if num < 0 else ""
    return f"{sign}{symbol}{abs(num):,.0f}"


def format_percent(value: Any, decimals: int = 1) -> str:
    """Fraction to percent string: 0.5 -> '50.0%'."""
    num = _as_number(value)
    if num is None:
        return "0%"
    return f"{num * 100:.{decimals}f}%"


def truncate_label(label: Any, max_len: int = 20) -> str:
    """Shorten a label to max_len characters, ending with '...' when cut."""
    if label is None or label == "":
        return ""
    s = str(label)
    if len(s) <= max_len:
        return s
    return s[: max_len - 3] + "..."


def detach(structure: Any) -> Any:
    """
    Deep copy handed to the rendering layer.
    Layout libraries write coordinates into nodes in place; the caller keeps its own copy intact.
    """
    return copy.deepcopy(structure)


def format_value(value: Any, value_format: str = "number", currency: str = "USD") -> str:
    """Display string for a chart total or gauge reading; unknown formats fall back to number."""
    if value_format == "currency":
        return format_currency(value, currency)
    if value_format == "percent":
        return format_percent(value)
    return format_number(value)
