"""JSON Lines sink adapter.

Implements the MetricSink port by appending each point as one JSON object per
line. Used to mirror what is written to InfluxDB for inspection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import orjson

from callkpi.core.clock import SystemClock
from callkpi.errors.errors import EmitError
from callkpi.ports.clock import Clock
from callkpi.types.types import Err, MetricSet, Ok, Result, TagSet


class JsonlSink:
    def __init__(
        self,
        sink_path: Path,
        measurement: str,
        clock: Optional[Clock] = None,
    ) -> None:
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)
        self._measurement = measurement
        self._clock = clock or SystemClock()

    @property
    def sink_path(self) -> Path:
        return self._sink_path

    def emit(self, metrics: MetricSet, tags: TagSet) -> Result[None, EmitError]:
        record: dict[str, Any] = {
            "measurement": self._measurement,
            "ts_ns": self._clock.now_ns(),
            "metrics": metrics.as_dict(),
            "tags": tags.as_dict(),
        }
        try:
            self._write_record(record)
        except OSError as e:
            return Err(
                EmitError(
                    f"JSONL write failed: {e}",
                    component="jsonl",
                    details={"path": str(self._sink_path)},
                )
            )
        return Ok(None)

    def _write_record(self, record: Mapping[str, Any]) -> None:
        # One write per record keeps concurrent appends line-atomic
        payload = orjson.dumps(record) + b"\n"
        with self._sink_path.open("ab") as handle:
            handle.write(payload)
