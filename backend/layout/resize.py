"""Debounced resize signal: only the last size in a burst reaches the callback."""

from typing import Any, Callable, Optional

from shared.config import RESIZE_DEBOUNCE_MS

from .dimensions import Size
from .scheduler import AsyncioScheduler, Scheduler


class ResizeDebouncer:
    def __init__(
        self,
        callback: Callable[[Size], Any],
        debounce_ms: int = RESIZE_DEBOUNCE_MS,
        scheduler: Optional[Scheduler] = None,
    ):
        self._callback = callback
        self.delay = debounce_ms / 1000
        self._scheduler = scheduler or AsyncioScheduler()
        self._handle: Any = None
        self.connected = True

    def notify(self, size: Size) -> None:
        """Record a new size; restarts the debounce window."""
        if not self.connected:
            return
        self._revoke()
        self._handle = self._scheduler.schedule(lambda: self._fire(size), self.delay)

    def disconnect(self) -> None:
        self.connected = False
        self._revoke()

    def _fire(self, size: Size) -> None:
        self._handle = None
        if self.connected:
            self._callback(size)

    def _revoke(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
