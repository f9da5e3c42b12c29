"""
Destination settings for the InfluxDB sink.

Settings are read once from the environment at startup and frozen. The
activation gate decides, also once, whether anything is emitted at all.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Mapping, Optional

from callkpi.errors.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BUCKET: Final[str] = "Kubeshark"
DEFAULT_MEASUREMENT: Final[str] = "callKPIs"

# Environment variable names
ENV_URL: Final[str] = "INFLUXDB_URL"
ENV_TOKEN: Final[str] = "INFLUXDB_TOKEN"
ENV_ORG: Final[str] = "INFLUXDB_ORG"
ENV_BUCKET: Final[str] = "INFLUXDB_BUCKET"
ENV_MEASUREMENT: Final[str] = "INFLUXDB_MEASUREMENT"
ENV_TIMEOUT: Final[str] = "INFLUXDB_TIMEOUT"
ENV_ECHO_PATH: Final[str] = "CALLKPI_ECHO_PATH"


@dataclass(frozen=True)
class InfluxConfig:
    """
    Immutable destination coordinates.

    Example:
        config = InfluxConfig(
            url="http://influxdb:8086",
            token="my-token",
            org="my-org",
        )
    """

    url: Optional[str] = None
    token: Optional[str] = None
    org: Optional[str] = None
    bucket: str = DEFAULT_BUCKET
    measurement: str = DEFAULT_MEASUREMENT

    # None blocks until the sink answers
    timeout_s: Optional[float] = None

    # Mirror every emitted point to a JSON Lines file
    echo_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ConfigurationError(
                "timeout_s must be positive",
                field="timeout_s",
                value=self.timeout_s,
            )

    def __repr__(self) -> str:
        token = "***REDACTED***" if self.token else None
        return (
            f"InfluxConfig(url={self.url!r}, token={token!r}, org={self.org!r}, "
            f"bucket={self.bucket!r}, measurement={self.measurement!r}, "
            f"timeout_s={self.timeout_s!r}, echo_path={self.echo_path!r})"
        )

    def missing_fields(self) -> list[str]:
        """Names of the environment variables that block activation."""
        mandatory = ((ENV_URL, self.url), (ENV_TOKEN, self.token), (ENV_ORG, self.org))
        return [name for name, value in mandatory if not value]


def parse_timeout(raw: Optional[str]) -> Optional[float]:
    """
    Parse a timeout in seconds.

    Raises:
        ConfigurationError: if raw is not a positive number.
    """
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_TIMEOUT} must be a number of seconds",
            field=ENV_TIMEOUT,
            value=raw,
        ) from e
    if not timeout > 0:
        raise ConfigurationError(
            f"{ENV_TIMEOUT} must be positive",
            field=ENV_TIMEOUT,
            value=raw,
        )
    return timeout


def _timeout_or_default(raw: Optional[str]) -> Optional[float]:
    # Invalid values fall back to blocking writes
    try:
        return parse_timeout(raw)
    except ConfigurationError as e:
        logger.warning(
            f"Ignoring {ENV_TIMEOUT}: {e}",
            extra={**e.log_extra(), "value": raw},
        )
        return None


def load_config(environ: Optional[Mapping[str, str]] = None) -> InfluxConfig:
    """
    Resolve destination settings from the environment.

    Unset or empty bucket and measurement fall back to their defaults.
    Missing mandatory values are not an error here; see is_active(). An
    invalid timeout is logged and ignored.
    """
    env = os.environ if environ is None else environ

    echo_raw = env.get(ENV_ECHO_PATH)
    config = InfluxConfig(
        url=env.get(ENV_URL) or None,
        token=env.get(ENV_TOKEN) or None,
        org=env.get(ENV_ORG) or None,
        bucket=env.get(ENV_BUCKET) or DEFAULT_BUCKET,
        measurement=env.get(ENV_MEASUREMENT) or DEFAULT_MEASUREMENT,
        timeout_s=_timeout_or_default(env.get(ENV_TIMEOUT)),
        echo_path=Path(echo_raw) if echo_raw else None,
    )

    logger.debug(
        "influxdb_config_loaded",
        extra={
            "event": "influxdb_config_loaded",
            "bucket": config.bucket,
            "measurement": config.measurement,
            "source": "env",
        },
    )
    return config


def is_active(config: InfluxConfig) -> bool:
    """
    Activation gate: True iff url, token and org are all present.

    Logs a single diagnostic when the gate stays closed. Callers evaluate this
    once per process and keep the answer.
    """
    missing = config.missing_fields()
    if missing:
        logger.error(
            f"One or more of the mandatory InfluxDB variables is missing ({', '.join(missing)}). "
            "Call KPIs will not be sent.",
            extra={"event": "influxdb_config_incomplete", "missing": missing},
        )
        return False
    return True
