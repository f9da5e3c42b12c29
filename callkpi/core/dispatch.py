"""
Top-level dispatch for captured transactions.

CallKpiHook is the object the capture engine calls once per transaction:

    capture engine -> on_event -> is_eligible -> extract -> sink.emit

Activation is decided once in the constructor. Failures of any stage are
logged and dropped; on_event never raises back into the capture engine.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional, Union

from callkpi.adapters.sinks.composite import CompositeSink
from callkpi.adapters.sinks.influxdb import InfluxDBSink
from callkpi.adapters.sinks.jsonl import JsonlSink
from callkpi.config.configs import InfluxConfig, is_active, load_config
from callkpi.core.extractor import extract
from callkpi.core.filter import ineligibility
from callkpi.ports.clock import Clock
from callkpi.ports.metric_sink import MetricSink
from callkpi.types.types import CapturedEvent, Err

logger = logging.getLogger(__name__)

RawEvent = Union[CapturedEvent, Mapping[str, Any]]


def build_sink(config: InfluxConfig, clock: Optional[Clock] = None) -> MetricSink:
    """InfluxDB sink, mirrored to JSON Lines when an echo path is configured."""
    influx = InfluxDBSink(config, clock=clock)
    if config.echo_path is None:
        return influx
    mirror = JsonlSink(config.echo_path, measurement=config.measurement, clock=clock)
    return CompositeSink([influx, mirror])


class CallKpiHook:
    """
    Turns captured HTTP transactions into call KPI points.

    Args:
        config: Resolved destination settings
        sink: Where points go; built from config when omitted
        name: Hook name for logging
    """

    def __init__(
        self,
        config: InfluxConfig,
        sink: Optional[MetricSink] = None,
        name: str = "callkpi",
    ) -> None:
        self._config = config
        self._name = name
        self._active = is_active(config)
        self._sink: Optional[MetricSink] = None
        if self._active:
            self._sink = sink if sink is not None else build_sink(config)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def config(self) -> InfluxConfig:
        return self._config

    def on_event(self, event: RawEvent) -> None:
        if not self._active or self._sink is None:
            return
        try:
            self._process(event, self._sink)
        except Exception as e:
            logger.error(
                f"[{self._name}] Unexpected error: {e}",
                exc_info=True,
                extra={"event": "callkpi_unexpected_error"},
            )

    # Hook name used by the capture engine's scripting interface
    on_item_captured = on_event

    def _process(self, event: RawEvent, sink: MetricSink) -> None:
        skipped = ineligibility(event)
        if skipped is not None:
            logger.debug(
                f"[{self._name}] Skipped: {skipped}",
                extra=skipped.log_extra(),
            )
            return

        extracted = extract(event)
        if isinstance(extracted, Err):
            logger.warning(
                f"[{self._name}] Extraction error: {extracted.error}",
                extra=extracted.error.log_extra(),
            )
            return

        metrics, tags = extracted.value
        emitted = sink.emit(metrics, tags)
        if isinstance(emitted, Err):
            logger.warning(
                f"[{self._name}] Emit error: {emitted.error}",
                extra=emitted.error.log_extra(),
            )


def build_hook(environ: Optional[Mapping[str, str]] = None) -> CallKpiHook:
    """Load settings from the environment and build the hook the capture engine calls."""
    return CallKpiHook(load_config(os.environ if environ is None else environ))
