"""Layout module - surface readiness, resize handling and plot dimensions."""

from .dimensions import Size, calculate_dimensions, should_use_compact_mode
from .mount import ChartMount
from .readiness import PollState, ReadinessPoll, poll, wait_until_ready
from .resize import ResizeDebouncer
from .scheduler import AsyncioScheduler, Scheduler

__all__ = [
    "AsyncioScheduler",
    "ChartMount",
    "PollState",
    "ReadinessPoll",
    "ResizeDebouncer",
    "Scheduler",
    "Size",
    "calculate_dimensions",
    "poll",
    "should_use_compact_mode",
    "wait_until_ready",
]
