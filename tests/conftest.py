from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from callkpi.config.configs import InfluxConfig
from callkpi.errors.errors import EmitError
from callkpi.types.types import Err, MetricSet, Ok, Result, TagSet

HTTP_EVENT: dict[str, Any] = {
    "protocol": {"name": "http", "version": "1.1"},
    "elapsedTime": 120,
    "requestSize": 200,
    "responseSize": 500,
    "response": {"status": 200},
    "src": {"ip": "10.0.0.1"},
    "dst": {"ip": "10.0.0.2", "port": 8080, "name": "svc-b", "namespace": "prod"},
    "request": {"path": "/v1/x", "method": "GET"},
    "node": {"name": "node1"},
}


@dataclass
class RecordingSink:
    """MetricSink stub capturing every point, optionally failing."""

    points: List[Tuple[MetricSet, TagSet]] = field(default_factory=list)
    error: Optional[EmitError] = None

    def emit(self, metrics: MetricSet, tags: TagSet) -> Result[None, EmitError]:
        self.points.append((metrics, tags))
        if self.error is not None:
            return Err(self.error)
        return Ok(None)


def _fake_response(status_code: int = 204, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def fake_response() -> Callable[..., MagicMock]:
    """Factory for requests.Response stand-ins."""
    return _fake_response


@pytest.fixture
def http_event() -> dict[str, Any]:
    return copy.deepcopy(HTTP_EVENT)


@pytest.fixture
def full_config() -> InfluxConfig:
    return InfluxConfig(url="http://influxdb:8086", token="t0k3n", org="acme")


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()
