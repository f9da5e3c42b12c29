"""
Errors raised or returned by the call KPI pipeline.

None of these leave CallKpiHook.on_event. Each error knows the structured
log fields it is reported with (log_extra), so the dispatcher logs every
stage failure the same way:

    logger.warning(f"... {error}", extra=error.log_extra())
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional


class CallKpiError(Exception):
    """Base exception for all adapter errors."""

    # Value of the "event" field on the log record reporting this error
    log_event: ClassVar[str] = "callkpi_error"

    def __init__(
        self,
        message: str,
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.component = component
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        context = [f"{key}={value}" for key, value in self.details.items()]
        if self.component:
            context.insert(0, f"in {self.component}")
        return f"{message} ({', '.join(context)})" if context else message

    def _log_fields(self) -> dict[str, Any]:
        return {}

    def log_extra(self) -> dict[str, Any]:
        """Fields for logging's extra= when this error is reported."""
        return {"event": self.log_event, "component": self.component, **self._log_fields()}


class ConfigurationError(CallKpiError):
    """Raised when a configuration value is missing or cannot be parsed."""

    log_event = "callkpi_config_invalid"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.value = value
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, component=component, details=details)

    def _log_fields(self) -> dict[str, Any]:
        return {"field": self.field}


class IneligibleEventError(CallKpiError):
    """Event protocol is not recorded. Not a failure; callers skip silently."""

    log_event = "callkpi_event_skipped"

    def __init__(
        self,
        message: str,
        *,
        protocol: Optional[str] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.protocol = protocol
        super().__init__(message, component=component, details=details)

    def _log_fields(self) -> dict[str, Any]:
        return {"protocol": self.protocol}


class ExtractionError(CallKpiError):
    """Raised when a captured event cannot be mapped into metrics and tags."""

    log_event = "callkpi_extraction_failed"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        # field is the dotted path of the offending event field, e.g. "dst.ip"
        self.field = field
        super().__init__(message, component=component, details=details)

    def _log_fields(self) -> dict[str, Any]:
        return {"field": self.field}


class EmitError(CallKpiError):
    """Raised when a point cannot be delivered to the sink."""

    log_event = "callkpi_emit_failed"

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, component=component, details=details)

    @property
    def retryable(self) -> bool:
        """Transport failures and 5xx answers; writes are never retried here."""
        return self.status_code is None or self.status_code >= 500

    def _log_fields(self) -> dict[str, Any]:
        return {"status_code": self.status_code, "url": self.url, "retryable": self.retryable}
