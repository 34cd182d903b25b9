"""Millisecond clocks for charge timing and wind re-rolls."""

import time


class SystemClock:
    """Monotonic wall clock in milliseconds."""

    def now(self) -> float:
        return time.perf_counter() * 1000.0


class ManualClock:
    """Clock that only moves when told to. Used by tests and the agent env."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        self._now += ms
        return self._now

    def set(self, ms: float) -> None:
        self._now = float(ms)
