"""InfluxDB v2 sink adapter.

Implements the MetricSink port by writing one line-protocol record per point
to the InfluxDB v2 HTTP write endpoint:

    POST {url}/api/v2/write?org={org}&bucket={bucket}&precision=ns
    Authorization: Token {token}

    callKPIs,dst_name=svc-b,dst_ip=10.0.0.2,... latency=120.0,bandwidth=700.0,status=200.0 1700000000000000000

Every call is an independent request; there is no session, batching or retry.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import requests

from callkpi.config.configs import InfluxConfig
from callkpi.core.clock import SystemClock
from callkpi.errors.errors import ConfigurationError, EmitError
from callkpi.ports.clock import Clock
from callkpi.types.types import Err, MetricSet, Number, Ok, Result, TagSet

logger = logging.getLogger(__name__)

WRITE_PATH = "/api/v2/write"
PRECISION = "ns"
_MAX_BODY_IN_ERROR = 256

# Raw newlines would end the record early
_LINE_BREAK_ESCAPES = {"\n": r"\n", "\r": r"\r"}
_MEASUREMENT_ESCAPES = str.maketrans({",": r"\,", " ": r"\ ", **_LINE_BREAK_ESCAPES})
_KEY_ESCAPES = str.maketrans({",": r"\,", "=": r"\=", " ": r"\ ", **_LINE_BREAK_ESCAPES})


# ------------------------- Line protocol ------------------------------


def escape_measurement(name: str) -> str:
    return name.replace("\\", "\\\\").translate(_MEASUREMENT_ESCAPES)


def escape_key(text: str) -> str:
    """Escape a tag key, tag value or field key."""
    return text.replace("\\", "\\\\").translate(_KEY_ESCAPES)


def format_field(value: Number) -> str:
    # Always float, so a field never flips between integer and float columns
    return repr(float(value))


def to_line_protocol(
    measurement: str,
    metrics: MetricSet,
    tags: TagSet,
    ts_ns: Optional[int] = None,
) -> str:
    """
    Render one point as an InfluxDB line-protocol record.

    Tags keep TagSet order. Tags with an empty value are left out, since line
    protocol cannot carry them.
    """
    tag_part = "".join(
        f",{escape_key(key)}={escape_key(value)}" for key, value in tags.as_dict().items() if value
    )
    field_part = ",".join(
        f"{escape_key(key)}={format_field(value)}" for key, value in metrics.as_dict().items()
    )
    line = f"{escape_measurement(measurement)}{tag_part} {field_part}"
    if ts_ns is not None:
        line = f"{line} {ts_ns}"
    return line


# ------------------------- Adapter ------------------------------------


class InfluxDBSink:
    """
    Write points to InfluxDB v2.

    Transport failures and non-2xx answers are returned as Err(EmitError);
    nothing is raised to the caller.
    """

    def __init__(
        self,
        config: InfluxConfig,
        *,
        clock: Optional[Clock] = None,
        post: Optional[Callable[..., requests.Response]] = None,
    ) -> None:
        if not config.url or not config.token or not config.org:
            raise ConfigurationError(
                "InfluxDB sink requires url, token and org",
                field=",".join(config.missing_fields()),
                component="influxdb",
            )
        self._config = config
        self._clock = clock or SystemClock()
        self._post = post
        self._write_url = config.url.rstrip("/") + WRITE_PATH

    @property
    def write_url(self) -> str:
        return self._write_url

    def _params(self) -> Mapping[str, str]:
        return {
            "org": self._config.org or "",
            "bucket": self._config.bucket,
            "precision": PRECISION,
        }

    def _headers(self) -> Mapping[str, str]:
        return {
            "Authorization": f"Token {self._config.token}",
            "Content-Type": "text/plain; charset=utf-8",
            "Accept": "application/json",
        }

    def emit(self, metrics: MetricSet, tags: TagSet) -> Result[None, EmitError]:
        body = to_line_protocol(
            self._config.measurement, metrics, tags, ts_ns=self._clock.now_ns()
        )

        try:
            post = self._post or requests.post
            response = post(
                self._write_url,
                params=self._params(),
                data=body.encode("utf-8"),
                headers=self._headers(),
                timeout=self._config.timeout_s,
            )
        except requests.RequestException as e:
            return Err(
                EmitError(
                    f"InfluxDB write failed: {e}",
                    url=self._write_url,
                    component="influxdb",
                )
            )

        if not 200 <= response.status_code < 300:
            return Err(
                EmitError(
                    "InfluxDB rejected the write",
                    url=self._write_url,
                    status_code=response.status_code,
                    component="influxdb",
                    details={"body": (response.text or "")[:_MAX_BODY_IN_ERROR]},
                )
            )

        logger.debug(
            "influxdb_point_written",
            extra={
                "event": "influxdb_point_written",
                "bucket": self._config.bucket,
                "measurement": self._config.measurement,
                "status_code": response.status_code,
            },
        )
        return Ok(None)


def emit(
    config: InfluxConfig,
    metrics: MetricSet,
    tags: TagSet,
    **sink_kwargs: Any,
) -> Result[None, EmitError]:
    """One-shot write of a single point using the given destination."""
    try:
        sink = InfluxDBSink(config, **sink_kwargs)
    except ConfigurationError as e:
        return Err(EmitError(str(e), url=config.url, component="influxdb"))
    return sink.emit(metrics, tags)
