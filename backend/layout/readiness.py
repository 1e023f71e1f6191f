"""
Layout-readiness poller.

Samples a surface once per frame until it reports a non-zero width, then calls
on_ready(width) exactly once. Gives up silently after max_attempts frames.
cancel() is idempotent and is honoured even when a check is already running:
the cancelled flag is read before rescheduling and again before on_ready.
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Optional

from loguru import logger

from shared.config import POLL_MAX_ATTEMPTS

from .dimensions import Size
from .scheduler import AsyncioScheduler, Scheduler

Measure = Callable[[], Size]


class PollState(str, Enum):
    SCHEDULED = "scheduled"
    CHECKING = "checking"
    READY = "ready"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class ReadinessPoll:
    """One polling lifecycle. Owners keep at most one active instance per surface."""

    def __init__(
        self,
        measure: Measure,
        on_ready: Callable[[float], Any],
        max_attempts: int = POLL_MAX_ATTEMPTS,
        scheduler: Optional[Scheduler] = None,
        on_exhausted: Optional[Callable[[], Any]] = None,
    ):
        self._measure = measure
        self._on_ready = on_ready
        self._on_exhausted = on_exhausted
        self.max_attempts = max(0, int(max_attempts))
        self._scheduler = scheduler or AsyncioScheduler()
        self.attempt = 0
        self.cancelled = False
        self.state = PollState.SCHEDULED
        self._handle: Any = None

    @property
    def done(self) -> bool:
        return self.state in (PollState.READY, PollState.EXHAUSTED, PollState.CANCELLED)

    def start(self) -> "ReadinessPoll":
        if self._handle is None and self.state is PollState.SCHEDULED and not self.cancelled:
            self._handle = self._scheduler.schedule(self._check)
        return self

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        if not self.done:
            self.state = PollState.CANCELLED

    def _check(self) -> None:
        self._handle = None
        if self.cancelled:
            return
        self.state = PollState.CHECKING
        width = self._measure().width
        if width > 0:
            if self.cancelled:
                self.state = PollState.CANCELLED
                return
            self.state = PollState.READY
            self._on_ready(width)
            return
        if self.cancelled:
            self.state = PollState.CANCELLED
            return
        if self.attempt >= self.max_attempts:
            self.state = PollState.EXHAUSTED
            logger.debug("Surface never reported a width after {} attempts", self.attempt)
            if self._on_exhausted is not None:
                self._on_exhausted()
            return
        self.attempt += 1
        logger.debug("Surface not ready, attempt {}/{}", self.attempt, self.max_attempts)
        self.state = PollState.SCHEDULED
        self._handle = self._scheduler.schedule(self._check)


def poll(
    measure: Measure,
    on_ready: Callable[[float], Any],
    max_attempts: int = POLL_MAX_ATTEMPTS,
    scheduler: Optional[Scheduler] = None,
) -> ReadinessPoll:
    """Start polling on the next frame. Returns the handle; call cancel() when done."""
    return ReadinessPoll(measure, on_ready, max_attempts, scheduler).start()


async def wait_until_ready(
    measure: Measure,
    max_attempts: int = POLL_MAX_ATTEMPTS,
    scheduler: Optional[Scheduler] = None,
) -> Optional[float]:
    """Await the surface width; None when the attempt budget runs out."""
    loop = asyncio.get_running_loop()
    ready: asyncio.Future = loop.create_future()

    def settle(width: Optional[float]) -> None:
        if not ready.done():
            ready.set_result(width)

    handle = ReadinessPoll(measure, settle, max_attempts, scheduler, on_exhausted=lambda: settle(None))
    handle.start()
    try:
        return await ready
    finally:
        handle.cancel()
