"""MetricSink Port Interface.

Contract: Deliver one tagged point (metrics + tags) to a time-series store.
Failures are returned, never raised.
"""

from __future__ import annotations

from typing import Protocol

from callkpi.errors.errors import EmitError
from callkpi.types.types import MetricSet, Result, TagSet


class MetricSink(Protocol):
    def emit(self, metrics: MetricSet, tags: TagSet) -> Result[None, EmitError]: ...
