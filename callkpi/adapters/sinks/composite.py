"""Fan one point out to several sinks."""

from __future__ import annotations

from typing import Sequence

from callkpi.errors.errors import EmitError
from callkpi.ports.metric_sink import MetricSink
from callkpi.types.types import Err, MetricSet, Ok, Result, TagSet


class CompositeSink:
    """
    Every sink receives the point, even when an earlier one failed.
    The first failure is the one reported.
    """

    def __init__(self, sinks: Sequence[MetricSink]) -> None:
        if not sinks:
            raise ValueError("CompositeSink needs at least one sink")
        self._sinks = tuple(sinks)

    @property
    def sinks(self) -> tuple[MetricSink, ...]:
        return self._sinks

    def emit(self, metrics: MetricSet, tags: TagSet) -> Result[None, EmitError]:
        first_error: Err[EmitError] | None = None
        for sink in self._sinks:
            result = sink.emit(metrics, tags)
            if isinstance(result, Err) and first_error is None:
                first_error = result
        return first_error if first_error is not None else Ok(None)
