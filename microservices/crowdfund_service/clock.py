"""
Crowdfund Service Clocks

Time sources for deadline arithmetic. All timestamps are integer nanoseconds.
"""

import threading
import time
from typing import Optional

NANOS_PER_SECOND = 1_000_000_000
SECONDS_PER_DAY = 86_400
NANOS_PER_DAY = SECONDS_PER_DAY * NANOS_PER_SECOND

# Timestamps are signed 64-bit nanoseconds
MAX_TIMESTAMP_NS = 2**63 - 1


class SystemClock:
    """Wall-clock time in nanoseconds, clamped so it never goes backwards"""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        current = time.time_ns()
        with self._lock:
            if current < self._last:
                current = self._last
            self._last = current
        return current


class FixedClock:
    """Settable clock for tests and simulations"""

    def __init__(self, start: Optional[int] = None):
        self._now = time.time_ns() if start is None else start

    def now(self) -> int:
        return self._now

    def set(self, value: int) -> None:
        if value < self._now:
            raise ValueError("FixedClock cannot move backwards")
        self._now = value

    def advance(self, nanos: int = 0, *, seconds: float = 0, days: float = 0) -> int:
        delta = nanos + int(seconds * NANOS_PER_SECOND) + int(days * NANOS_PER_DAY)
        self.set(self._now + delta)
        return self._now


__all__ = [
    "NANOS_PER_SECOND",
    "SECONDS_PER_DAY",
    "NANOS_PER_DAY",
    "MAX_TIMESTAMP_NS",
    "SystemClock",
    "FixedClock",
]
