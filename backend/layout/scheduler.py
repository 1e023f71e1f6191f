"""
Scheduler abstraction for frame-driven work.
schedule(callback) runs on the next frame; schedule(callback, delay) after delay seconds.
"""

import asyncio
from typing import Any, Callable, Optional, Protocol

from shared.config import FRAME_INTERVAL


class Scheduler(Protocol):
    def schedule(self, callback: Callable[[], None], delay: Optional[float] = None) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


class AsyncioScheduler:
    """Frames are emulated with loop.call_later at a fixed interval."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, frame_interval: float = FRAME_INTERVAL):
        self._loop = loop
        self.frame_interval = frame_interval

    def schedule(self, callback: Callable[[], None], delay: Optional[float] = None) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self.frame_interval if delay is None else delay, callback)

    def cancel(self, handle: Any) -> None:
        if handle is not None:
            handle.cancel()
