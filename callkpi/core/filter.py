"""
Event filter: only transactions of the recognized application protocol are
turned into points. Everything else is skipped without complaint.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from callkpi.errors.errors import IneligibleEventError
from callkpi.types.types import HTTP_PROTOCOL, CapturedEvent


def protocol_name(event: Union[CapturedEvent, Mapping[str, Any]]) -> Optional[str]:
    """Read protocol.name from a model or raw mapping, or None if unreadable."""
    if isinstance(event, CapturedEvent):
        return event.protocol.name
    if not isinstance(event, Mapping):
        return None
    protocol = event.get("protocol")
    if not isinstance(protocol, Mapping):
        return None
    name = protocol.get("name")
    return name if isinstance(name, str) else None


def ineligibility(
    event: Union[CapturedEvent, Mapping[str, Any]],
) -> Optional[IneligibleEventError]:
    """Why the event is skipped, or None when it should be emitted."""
    protocol = protocol_name(event)
    if protocol == HTTP_PROTOCOL:
        return None
    return IneligibleEventError(
        f"Protocol {protocol!r} is not recorded",
        protocol=protocol,
        component="filter",
    )


def is_eligible(event: Union[CapturedEvent, Mapping[str, Any]]) -> bool:
    return ineligibility(event) is None
