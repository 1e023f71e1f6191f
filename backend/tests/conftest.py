"""Shared fixtures: a frame-by-frame scheduler and a clean library singleton."""

import itertools

import pytest

import loader


class ManualScheduler:
    """
    Scheduler driven by the test. schedule(cb) queues for the next frame,
    schedule(cb, delay) queues a timer released by advance().
    """

    def __init__(self):
        self.now = 0.0
        self._ids = itertools.count(1)
        self._frames = {}
        self._timers = {}
        self.cancelled = []

    def schedule(self, callback, delay=None):
        handle = next(self._ids)
        if delay is None:
            self._frames[handle] = callback
        else:
            self._timers[handle] = (self.now + delay, callback)
        return handle

    def cancel(self, handle):
        self.cancelled.append(handle)
        self._frames.pop(handle, None)
        self._timers.pop(handle, None)

    @property
    def pending(self):
        return len(self._frames) + len(self._timers)

    def run_frame(self):
        """Run callbacks queued before this frame. Returns how many ran."""
        ran = 0
        for handle in list(self._frames):
            callback = self._frames.pop(handle, None)
            if callback is not None:
                callback()
                ran += 1
        return ran

    def run_frames(self, count):
        for _ in range(count):
            if not self.run_frame():
                break

    def advance(self, seconds):
        self.now += seconds
        due = sorted((h for h, (t, _) in self._timers.items() if t <= self.now), key=lambda h: self._timers[h][0])
        for handle in due:
            entry = self._timers.pop(handle, None)
            if entry is not None:
                entry[1]()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture(autouse=True)
def clean_library():
    loader.reset_library()
    yield
    loader.reset_library()


@pytest.fixture
def sales_records():
    return [
        {"Id": "001", "Region": "West", "Stage": "Won", "Amount": 100},
        {"Id": "002", "Region": "East", "Stage": "Won", "Amount": 250},
        {"Id": "003", "Region": "West", "Stage": "Lost", "Amount": 50},
        {"Id": "004", "Region": None, "Stage": "Open", "Amount": "n/a"},
    ]
