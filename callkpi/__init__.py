"""
Call KPI telemetry adapter.

Turns HTTP transactions observed by a traffic-capture engine into tagged
points (latency, bandwidth, status code + source/destination identity) and
writes them to InfluxDB v2 for visualization in Grafana.

Components:
- InfluxConfig / load_config / is_active: Destination settings and activation gate
- is_eligible: Event filter (http only)
- extract: Field extractor (MetricSet + TagSet, "unresolved" defaults)
- InfluxDBSink: Line-protocol writer for the InfluxDB v2 write API
- CallKpiHook: The per-transaction entry point the capture engine calls

Usage:
    from callkpi import build_hook

    hook = build_hook()  # reads INFLUXDB_URL, INFLUXDB_TOKEN, INFLUXDB_ORG, ...
    hook.on_event(captured_item)
"""

from callkpi.adapters.sinks.influxdb import InfluxDBSink, emit
from callkpi.config.configs import InfluxConfig, is_active, load_config
from callkpi.core.dispatch import CallKpiHook, build_hook
from callkpi.core.extractor import extract
from callkpi.core.filter import is_eligible
from callkpi.errors.errors import (
    CallKpiError,
    ConfigurationError,
    EmitError,
    ExtractionError,
    IneligibleEventError,
)
from callkpi.types.types import UNRESOLVED, CapturedEvent, MetricSet, TagSet

__all__ = [
    # Main entry point
    "CallKpiHook",
    "build_hook",
    # Pipeline stages
    "InfluxConfig",
    "load_config",
    "is_active",
    "is_eligible",
    "extract",
    "InfluxDBSink",
    "emit",
    # Types
    "CapturedEvent",
    "MetricSet",
    "TagSet",
    "UNRESOLVED",
    # Errors
    "CallKpiError",
    "ConfigurationError",
    "IneligibleEventError",
    "ExtractionError",
    "EmitError",
]
