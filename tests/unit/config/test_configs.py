import logging

import pytest

from callkpi.config.configs import (
    DEFAULT_BUCKET,
    DEFAULT_MEASUREMENT,
    InfluxConfig,
    is_active,
    load_config,
    parse_timeout,
)
from callkpi.errors.errors import ConfigurationError

FULL_ENV = {
    "INFLUXDB_URL": "http://influxdb:8086",
    "INFLUXDB_TOKEN": "t0k3n",
    "INFLUXDB_ORG": "acme",
}


class TestLoadConfig:
    def test_reads_mandatory_values(self) -> None:
        config = load_config(FULL_ENV)

        assert config.url == "http://influxdb:8086"
        assert config.token == "t0k3n"
        assert config.org == "acme"

    def test_bucket_and_measurement_default(self) -> None:
        config = load_config(FULL_ENV)

        assert config.bucket == DEFAULT_BUCKET == "Kubeshark"
        assert config.measurement == DEFAULT_MEASUREMENT == "callKPIs"

    def test_empty_bucket_and_measurement_default(self) -> None:
        env = {**FULL_ENV, "INFLUXDB_BUCKET": "", "INFLUXDB_MEASUREMENT": ""}
        config = load_config(env)

        assert config.bucket == "Kubeshark"
        assert config.measurement == "callKPIs"

    def test_bucket_and_measurement_override(self) -> None:
        env = {**FULL_ENV, "INFLUXDB_BUCKET": "traffic", "INFLUXDB_MEASUREMENT": "kpis"}
        config = load_config(env)

        assert config.bucket == "traffic"
        assert config.measurement == "kpis"

    def test_reads_process_environment_by_default(self, monkeypatch) -> None:
        for key, value in FULL_ENV.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setenv("INFLUXDB_BUCKET", "from-env")

        config = load_config()

        assert config.org == "acme"
        assert config.bucket == "from-env"

    def test_empty_mandatory_values_become_none(self) -> None:
        config = load_config({"INFLUXDB_URL": "", "INFLUXDB_TOKEN": "", "INFLUXDB_ORG": ""})

        assert config.url is None
        assert config.token is None
        assert config.org is None

    def test_timeout_and_echo_path(self, tmp_path) -> None:
        echo = tmp_path / "points.jsonl"
        env = {**FULL_ENV, "INFLUXDB_TIMEOUT": "2.5", "CALLKPI_ECHO_PATH": str(echo)}
        config = load_config(env)

        assert config.timeout_s == 2.5
        assert config.echo_path == echo

    def test_invalid_timeout_is_ignored(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="callkpi.config.configs"):
            config = load_config({**FULL_ENV, "INFLUXDB_TIMEOUT": "soon"})

        assert config.timeout_s is None
        assert any("INFLUXDB_TIMEOUT" in r.getMessage() for r in caplog.records)
        assert caplog.records[-1].event == "callkpi_config_invalid"
        assert caplog.records[-1].value == "soon"


class TestParseTimeout:
    def test_unset(self) -> None:
        assert parse_timeout(None) is None
        assert parse_timeout("") is None

    def test_number(self) -> None:
        assert parse_timeout("10") == 10.0

    @pytest.mark.parametrize("raw", ["abc", "0", "-1"])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(ConfigurationError) as exc:
            parse_timeout(raw)
        assert exc.value.field == "INFLUXDB_TIMEOUT"


class TestInfluxConfig:
    def test_frozen(self, full_config: InfluxConfig) -> None:
        with pytest.raises(AttributeError):
            full_config.url = "http://elsewhere"  # type: ignore[misc]

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            InfluxConfig(url="u", token="t", org="o", timeout_s=0)

    def test_repr_redacts_token(self, full_config: InfluxConfig) -> None:
        assert "t0k3n" not in repr(full_config)
        assert "***REDACTED***" in repr(full_config)

    def test_missing_fields(self) -> None:
        config = InfluxConfig(url="http://influxdb:8086")
        assert config.missing_fields() == ["INFLUXDB_TOKEN", "INFLUXDB_ORG"]


class TestIsActive:
    def test_active_with_all_mandatory_values(self, full_config: InfluxConfig) -> None:
        assert is_active(full_config) is True

    @pytest.mark.parametrize("missing", ["INFLUXDB_URL", "INFLUXDB_TOKEN", "INFLUXDB_ORG"])
    def test_inactive_when_any_mandatory_missing(self, missing: str) -> None:
        env = {k: v for k, v in FULL_ENV.items() if k != missing}
        assert is_active(load_config(env)) is False

    def test_single_diagnostic_without_secret(self, caplog) -> None:
        config = InfluxConfig(token="t0k3n", org="acme")

        with caplog.at_level(logging.ERROR, logger="callkpi.config.configs"):
            assert is_active(config) is False

        assert len(caplog.records) == 1
        message = caplog.records[0].getMessage()
        assert message.startswith("One or more of the mandatory InfluxDB variables is missing (INFLUXDB_URL)")
        assert caplog.records[0].args == ()
        assert "t0k3n" not in message
        assert caplog.records[0].event == "influxdb_config_incomplete"

    def test_no_diagnostic_when_active(self, full_config: InfluxConfig, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="callkpi.config.configs"):
            is_active(full_config)

        assert caplog.records == []
