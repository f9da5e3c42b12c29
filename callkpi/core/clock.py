"""
Clocks stamping points at write time. SystemClock is used in production,
FixedClock makes line-protocol payloads reproducible in tests.
"""

import time
from dataclasses import dataclass

Nanos = int


class SystemClock:
    def now_ns(self) -> Nanos:
        return time.time_ns()


@dataclass(frozen=True)
class FixedClock:
    ts_ns: Nanos

    def now_ns(self) -> Nanos:
        return self.ts_ns
