"""CaptureHook Port Interface.

Contract: The capture engine holds a reference to a hook and calls on_event
once per observed transaction. The hook owns no loop or thread and never
raises back into the engine.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Union

from callkpi.types.types import CapturedEvent


class CaptureHook(Protocol):
    def on_event(self, event: Union[CapturedEvent, Mapping[str, Any]]) -> None: ...
