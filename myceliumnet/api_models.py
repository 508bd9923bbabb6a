"""Data types exchanged with the node's HTTP admin API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Optional, Union

#: JSON representation of an infinite metric.
INFINITE_STR = "infinite"
_U16_MAX = 0xFFFF


def _require_u16(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer, got {value!r}")
    if not 0 <= value <= _U16_MAX:
        raise ValueError(
            f"{what} must be a non-negative integer within the range of u16, got {value}"
        )
    return value


def _require_str(data: dict, key: str) -> str:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


@total_ordering
@dataclass(frozen=True)
class Metric:
    """A route metric: a finite u16 value, or infinite when ``value`` is None.

    Finite metrics order before the infinite metric.
    """

    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.value is not None:
            _require_u16(self.value, "metric")

    @classmethod
    def infinite(cls) -> "Metric":
        """The infinite metric."""
        return cls(None)

    @property
    def is_infinite(self) -> bool:
        return self.value is None

    def _key(self) -> tuple:
        return (1, 0) if self.value is None else (0, self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Metric):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return INFINITE_STR if self.value is None else str(self.value)

    def to_json(self) -> Union[int, str]:
        """JSON value: the number, or the string ``"infinite"``."""
        return INFINITE_STR if self.value is None else self.value

    @classmethod
    def from_json(cls, value: Any) -> "Metric":
        """Parse a JSON metric. Raises ValueError on anything else."""
        if isinstance(value, str):
            if value == INFINITE_STR:
                return cls.infinite()
            raise ValueError(f"invalid metric {value!r}, expected {INFINITE_STR!r}")
        return cls(_require_u16(value, "metric"))


@dataclass(frozen=True, order=True)
class Route:
    """A route as reported by the API."""

    subnet: str
    next_hop: str
    metric: Metric
    seqno: int

    def __post_init__(self) -> None:
        _require_u16(self.seqno, "seqno")

    def to_json(self) -> dict:
        return {
            "subnet": self.subnet,
            "nextHop": self.next_hop,
            "metric": self.metric.to_json(),
            "seqno": self.seqno,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Route":
        """Build a route from its decoded JSON object. Raises ValueError."""
        if not isinstance(data, dict):
            raise ValueError(f"route must be an object, got {data!r}")
        if "metric" not in data:
            raise ValueError("missing field 'metric'")
        if "seqno" not in data:
            raise ValueError("missing field 'seqno'")
        return cls(
            subnet=_require_str(data, "subnet"),
            next_hop=_require_str(data, "nextHop"),
            metric=Metric.from_json(data["metric"]),
            seqno=_require_u16(data["seqno"], "seqno"),
        )


def parse_routes(text: Union[str, bytes]) -> list[Route]:
    """Parse a JSON array of routes. Raises ValueError on malformed input."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of routes")
    return [Route.from_json(item) for item in data]


@dataclass(frozen=True)
class AddPeer:
    """Payload of an add peer request."""

    endpoint: str

    def to_json(self) -> dict:
        return {"endpoint": self.endpoint}

    @classmethod
    def from_json(cls, data: Any) -> "AddPeer":
        if not isinstance(data, dict):
            raise ValueError(f"payload must be an object, got {data!r}")
        return cls(endpoint=_require_str(data, "endpoint"))


@dataclass(frozen=True)
class Info:
    """General info about a node."""

    node_subnet: str
    node_pubkey: str

    def to_json(self) -> dict:
        return {"nodeSubnet": self.node_subnet, "nodePubkey": self.node_pubkey}

    @classmethod
    def from_json(cls, data: Any) -> "Info":
        if not isinstance(data, dict):
            raise ValueError(f"info must be an object, got {data!r}")
        return cls(
            node_subnet=_require_str(data, "nodeSubnet"),
            node_pubkey=_require_str(data, "nodePubkey"),
        )


@dataclass(frozen=True)
class PubKey:
    """Public key of a node."""

    public_key: str

    def to_json(self) -> dict:
        return {"publicKey": self.public_key}