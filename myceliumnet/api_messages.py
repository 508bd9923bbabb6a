"""Message types exchanged with the node's HTTP message API."""

from __future__ import annotations

import base64
import binascii
import ipaddress
from dataclasses import dataclass
from typing import Any, Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

#: Default amount of time, in seconds, to try and send a message.
DEFAULT_MESSAGE_TRY_DURATION = 60 * 5


def encode_base64(data: bytes) -> str:
    """Encode ``data`` in standard, padded base64."""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode standard, padded base64. Raises ValueError on invalid input."""
    if not isinstance(text, str):
        raise ValueError(f"base64 value must be a string, got {text!r}")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as err:
        raise ValueError(f"invalid base64: {err}") from None


def _require_dict(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {data!r}")
    return data


def _require_str(data: dict, key: str) -> str:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


def _require_ip(data: dict, key: str) -> IPAddress:
    return ipaddress.ip_address(_require_str(data, key))


def _optional_binary(data: dict, key: str) -> Optional[bytes]:
    value = data.get(key)
    if value is None:
        return None
    return decode_base64(value)


def _as_ip(value: Union[IPAddress, str]) -> IPAddress:
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    return ipaddress.ip_address(value)


@dataclass(frozen=True)
class MessageDestination:
    """Destination of a message: either an overlay IP or a public key (hex)."""

    ip: Optional[IPAddress] = None
    pk: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.ip is None) == (self.pk is None):
            raise ValueError("a destination needs exactly one of ip or pk")
        if self.ip is not None:
            object.__setattr__(self, "ip", _as_ip(self.ip))

    def to_json(self) -> dict:
        if self.ip is not None:
            return {"ip": str(self.ip)}
        return {"pk": self.pk}

    @classmethod
    def from_json(cls, data: Any) -> "MessageDestination":
        """Parse ``{"ip": ...}`` or ``{"pk": ...}``. Raises ValueError."""
        data = _require_dict(data, "destination")
        if len(data) != 1:
            raise ValueError(f"destination must have exactly one variant, got {data!r}")
        if "ip" in data:
            return cls(ip=_require_ip(data, "ip"))
        if "pk" in data:
            return cls(pk=_require_str(data, "pk"))
        raise ValueError(f"unknown destination variant in {data!r}")


@dataclass(frozen=True)
class MessageSendInfo:
    """Body of a request to push a message."""

    dst: MessageDestination
    payload: bytes
    topic: Optional[bytes] = None

    def to_json(self) -> dict:
        out: dict = {"dst": self.dst.to_json()}
        if self.topic is not None:
            out["topic"] = encode_base64(self.topic)
        out["payload"] = encode_base64(self.payload)
        return out

    @classmethod
    def from_json(cls, data: Any) -> "MessageSendInfo":
        data = _require_dict(data, "message")
        if "dst" not in data:
            raise ValueError("missing field 'dst'")
        return cls(
            dst=MessageDestination.from_json(data["dst"]),
            payload=decode_base64(_require_str(data, "payload")),
            topic=_optional_binary(data, "topic"),
        )


@dataclass(frozen=True)
class MessageReceiveInfo:
    """A message received by the node."""

    id: str
    src_ip: IPAddress
    src_pk: str
    dst_ip: IPAddress
    dst_pk: str
    payload: bytes
    topic: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "src_ip", _as_ip(self.src_ip))
        object.__setattr__(self, "dst_ip", _as_ip(self.dst_ip))

    def to_json(self) -> dict:
        out: dict = {
            "id": self.id,
            "srcIp": str(self.src_ip),
            "srcPk": self.src_pk,
            "dstIp": str(self.dst_ip),
            "dstPk": self.dst_pk,
        }
        if self.topic is not None:
            out["topic"] = encode_base64(self.topic)
        out["payload"] = encode_base64(self.payload)
        return out

    @classmethod
    def from_json(cls, data: Any) -> "MessageReceiveInfo":
        data = _require_dict(data, "message")
        return cls(
            id=_require_str(data, "id"),
            src_ip=_require_ip(data, "srcIp"),
            src_pk=_require_str(data, "srcPk"),
            dst_ip=_require_ip(data, "dstIp"),
            dst_pk=_require_str(data, "dstPk"),
            payload=decode_base64(_require_str(data, "payload")),
            topic=_optional_binary(data, "topic"),
        )


@dataclass(frozen=True)
class MessageIdReply:
    """Reply holding only the id of a pushed message."""

    id: str

    def to_json(self) -> dict:
        return {"id": self.id}

    @classmethod
    def from_json(cls, data: Any) -> "MessageIdReply":
        data = _require_dict(data, "reply")
        return cls(id=_require_str(data, "id"))


def parse_push_message_response(data: Any) -> Union[MessageReceiveInfo, MessageIdReply]:
    """Parse a push response: a full reply message, or just the message id.

    Raises ValueError if it is neither.
    """
    try:
        return MessageReceiveInfo.from_json(data)
    except ValueError:
        pass
    try:
        return MessageIdReply.from_json(data)
    except ValueError:
        raise ValueError(f"not a valid push message response: {data!r}") from None