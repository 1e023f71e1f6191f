"""
Runtime configuration.
All values come from the environment with defaults tuned for interactive charts.
"""

import os
from pathlib import Path


def _str_env(name: str, default: str) -> str:
    v = os.environ.get(name)
    return v if v is not None else default


def _float_env(name: str, default: float) -> float:
    v = os.environ.get(name)
    return float(v) if v is not None else default


def _int_env(name: str, default: int) -> int:
    v = os.environ.get(name)
    return int(v) if v is not None else default


def _bool_env(name: str, default: bool) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


BACKEND_DIR = Path(__file__).parent.parent

# Data shaping guardrails
MAX_RECORDS = _int_env("VIZ_MAX_RECORDS", 2000)
MAX_NODES = _int_env("VIZ_MAX_NODES", 500)

# Readiness polling: frame budget, roughly one second at 60fps
POLL_MAX_ATTEMPTS = _int_env("VIZ_POLL_MAX_ATTEMPTS", 60)
FRAME_INTERVAL = _float_env("VIZ_FRAME_INTERVAL", 1 / 60)
RESIZE_DEBOUNCE_MS = _int_env("VIZ_RESIZE_DEBOUNCE_MS", 100)

# Rendering library sources, tried in this order after the bundled file
LIBRARY_NAME = _str_env("VIZ_LIBRARY_NAME", "d3")
LIBRARY_PATH = Path(_str_env("VIZ_LIBRARY_PATH", str(BACKEND_DIR / "static" / "d3.min.js")))
LIBRARY_RESOURCE_URL = _str_env("VIZ_LIBRARY_URL", "")
LIBRARY_CDN_URL = _str_env(
    "VIZ_LIBRARY_CDN_URL", "https://cdnjs.cloudflare.com/ajax/libs/d3/7.9.0/d3.min.js"
)
FETCH_ATTEMPTS = _int_env("VIZ_FETCH_ATTEMPTS", 3)
FETCH_TIMEOUT = _float_env("VIZ_FETCH_TIMEOUT", 15.0)
PRELOAD_LIBRARY = _bool_env("VIZ_PRELOAD_LIBRARY", False)

LOG_LEVEL = _str_env("VIZ_LOG_LEVEL", "INFO")
