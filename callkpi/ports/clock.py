"""Clock Port Interface.

Contract: Provides the write timestamp of an emitted point.
"""

from __future__ import annotations

from typing import Protocol


class Clock(Protocol):
    def now_ns(self) -> int:
        """Return current UTC time as nanoseconds since the epoch."""
        ...
