"""
Chart mount controller: first render once the surface has width.
Holds at most one readiness poll; a resize signal can also trigger the first render.
"""

from typing import Any, Callable, Dict, Optional

from shared.config import POLL_MAX_ATTEMPTS, RESIZE_DEBOUNCE_MS

from .dimensions import Size, calculate_dimensions, should_use_compact_mode
from .readiness import Measure, ReadinessPoll, poll
from .resize import ResizeDebouncer
from .scheduler import Scheduler


class ChartMount:
    def __init__(
        self,
        measure: Measure,
        render: Callable[[float], Any],
        scheduler: Optional[Scheduler] = None,
        max_attempts: int = POLL_MAX_ATTEMPTS,
        debounce_ms: int = RESIZE_DEBOUNCE_MS,
        margins: Optional[Dict[str, float]] = None,
    ):
        """
        render(width) draws the chart and returns True when it actually rendered.
        Before each draw, dimensions and compact are refreshed from the surface size.
        """
        self._measure = measure
        self._render = render
        self._scheduler = scheduler
        self._max_attempts = max_attempts
        self._margins = margins
        self.rendered = False
        self.dimensions: Optional[Dict[str, Any]] = None
        self.compact = False
        self.poll: Optional[ReadinessPoll] = None
        self.resize = ResizeDebouncer(self._on_resize, debounce_ms, scheduler)

    def attempt(self) -> bool:
        """Render now if possible, otherwise wait for layout. Safe to call repeatedly."""
        if self.rendered:
            return True
        size = self._measure()
        if size.width > 0:
            self._draw(size)
        if not self.rendered and self.poll is None:
            self.poll = poll(self._measure, self._on_ready, self._max_attempts, self._scheduler)
        return self.rendered

    def teardown(self) -> None:
        self._stop_poll()
        self.resize.disconnect()

    def _draw(self, size: Size) -> None:
        self.dimensions = calculate_dimensions(size.width, size.height, self._margins)
        self.compact = should_use_compact_mode(size.width)
        self.rendered = bool(self._render(size.width)) or self.rendered
        if self.rendered:
            self._stop_poll()

    def _stop_poll(self) -> None:
        if self.poll is not None:
            self.poll.cancel()
            self.poll = None

    def _on_ready(self, width: float) -> None:
        self.poll = None
        if not self.rendered:
            self._draw(Size(width, self._measure().height))

    def _on_resize(self, size: Size) -> None:
        if size.width > 0:
            self._draw(size)
