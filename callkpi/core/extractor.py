"""
Field extractor.

Maps one eligible captured transaction into the metric set and the tag set of
a single point:

- latency   = elapsedTime
- bandwidth = requestSize + responseSize
- status    = response.status

Identity names and namespaces the capture engine could not resolve are
replaced by UNRESOLVED. ip, port, path and node pass through as-is. Numbers
are not range-checked; the producer's values are trusted.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from callkpi.errors.errors import ExtractionError
from callkpi.types.types import (
    UNRESOLVED,
    CapturedEvent,
    Err,
    MetricSet,
    Ok,
    Result,
    TagSet,
)

Extracted = tuple[MetricSet, TagSet]


def _or_unresolved(value: Optional[str]) -> str:
    # Empty strings count as unresolved too
    return value if value else UNRESOLVED


def parse_event(raw: Union[CapturedEvent, Mapping[str, Any]]) -> CapturedEvent:
    """
    Validate a raw capture-engine record into a CapturedEvent.

    Raises:
        ExtractionError: if a required field is missing or has the wrong type.
    """
    if isinstance(raw, CapturedEvent):
        return raw
    try:
        return CapturedEvent.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0] if e.error_count() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ExtractionError(
            f"Malformed captured event: {first.get('msg', 'invalid')}",
            field=location or None,
            component="extractor",
            details={"error_count": e.error_count()},
        ) from e


def extract_metrics(event: CapturedEvent) -> MetricSet:
    return MetricSet(
        latency=event.elapsed_time,
        bandwidth=event.request_size + event.response_size,
        status=event.response.status,
    )


def extract_tags(event: CapturedEvent) -> TagSet:
    return TagSet(
        dst_name=_or_unresolved(event.dst.name),
        dst_ip=event.dst.ip,
        dst_port=str(event.dst.port),
        dst_ns=_or_unresolved(event.dst.namespace),
        src_name=_or_unresolved(event.src.name),
        src_ip=event.src.ip,
        src_ns=_or_unresolved(event.src.namespace),
        path=event.request.path,
        node=event.node.name,
    )


def extract(
    event: Union[CapturedEvent, Mapping[str, Any]],
) -> Result[Extracted, ExtractionError]:
    """Map one event into (MetricSet, TagSet); malformed events come back as Err."""
    try:
        parsed = parse_event(event)
    except ExtractionError as e:
        return Err(e)
    return Ok((extract_metrics(parsed), extract_tags(parsed)))
