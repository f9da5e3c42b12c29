"""
define canonical types
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Final, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

# -------- Aliases (clarify intent) --------
Number = Union[int, float]
UnixNanos = int

HTTP_PROTOCOL: Final[str] = "http"
UNRESOLVED: Final[str] = "unresolved"

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


# -------- Captured event (inbound, produced by the capture engine) --------


class _EventModel(BaseModel):
    # Capture engines add fields freely; only the ones read below are required.
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class ProtocolInfo(_EventModel):
    name: str


class SourcePeer(_EventModel):
    ip: str
    name: Optional[str] = None  # unresolved by the capture engine when absent
    namespace: Optional[str] = None


class DestinationPeer(_EventModel):
    ip: str
    port: Union[int, str]
    name: Optional[str] = None
    namespace: Optional[str] = None


class RequestInfo(_EventModel):
    path: str


class ResponseInfo(_EventModel):
    status: Number


class NodeInfo(_EventModel):
    name: str


class CapturedEvent(_EventModel):
    """
    One observed transaction, in the capture engine's camelCase shape:

        {
            "protocol": {"name": "http"},
            "elapsedTime": 120,
            "requestSize": 200,
            "responseSize": 500,
            "response": {"status": 200},
            "src": {"ip": "10.0.0.1", "name": "svc-a", "namespace": "prod"},
            "dst": {"ip": "10.0.0.2", "port": 8080, "name": "svc-b"},
            "request": {"path": "/v1/x"},
            "node": {"name": "node1"},
        }
    """

    protocol: ProtocolInfo
    elapsed_time: Number = Field(alias="elapsedTime")
    request_size: Number = Field(alias="requestSize")
    response_size: Number = Field(alias="responseSize")
    response: ResponseInfo
    src: SourcePeer
    dst: DestinationPeer
    request: RequestInfo
    node: NodeInfo


# -------- Emitted point (outbound, written to the sink) --------


@dataclass(frozen=True, slots=True)
class MetricSet:
    latency: Number  # elapsedTime
    bandwidth: Number  # requestSize + responseSize
    status: Number  # response.status

    def as_dict(self) -> dict[str, Number]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class TagSet:
    """
    Identity tags of a point. Field order is the order tags are written in.
    Every tag is always present; unresolved identities carry UNRESOLVED.
    """

    dst_name: str
    dst_ip: str
    dst_port: str
    dst_ns: str
    src_name: str
    src_ip: str
    src_ns: str
    path: str
    node: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


# -------- Results --------


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E


Result = Union[Ok[T], Err[E]]
