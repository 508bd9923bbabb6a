"""The babel Update TLV."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .seqno_request import ROUTER_ID_BYTE_SIZE
from .wire import (
    AE_IPV4,
    AE_IPV6,
    AE_IPV6_LL,
    AE_WILDCARD,
    LINK_LOCAL_PREFIX,
    Subnet,
    ae_for,
    make_subnet,
    prefix_bytes,
    read_u8,
    read_u16,
    take,
)

#: Flag bit indicating an Update establishes a new default prefix.
UPDATE_FLAG_PREFIX = 0x80
#: Flag bit indicating an Update establishes a new default router id.
UPDATE_FLAG_ROUTER_ID = 0x40
#: Mask leaving only the valid Update flags.
FLAG_MASK = 0b1100_0000
#: Wire size of an Update body without its prefix.
UPDATE_BASE_WIRE_SIZE = 10 + ROUTER_ID_BYTE_SIZE
#: Size of the fixed fields preceding the prefix.
_FIXED_HEADER_SIZE = 10

_CENTISECOND = timedelta(milliseconds=10)


@dataclass(frozen=True)
class Update:
    """Update TLV body.

    ``interval`` is expressed in centiseconds, as on the wire. The router id of
    the sender is carried along with the update.
    """

    flags: int
    interval: int
    seqno: int
    metric: int
    subnet: Subnet
    router_id: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "router_id", bytes(self.router_id))
        if len(self.router_id) != ROUTER_ID_BYTE_SIZE:
            raise ValueError(
                f"router id must be {ROUTER_ID_BYTE_SIZE} bytes, got {len(self.router_id)}"
            )

    @classmethod
    def new(
        cls,
        interval: timedelta,
        seqno: int,
        metric: int,
        subnet: Subnet,
        router_id: bytes,
    ) -> "Update":
        """Create an update without flags; ``interval`` is a timedelta."""
        centiseconds = (interval // _CENTISECOND) & 0xFFFF
        return cls(
            flags=0,
            interval=centiseconds,
            seqno=seqno,
            metric=metric,
            subnet=subnet,
            router_id=router_id,
        )

    def interval_duration(self) -> timedelta:
        """Time until a new update for the subnet is received at the latest."""
        return self.interval * _CENTISECOND

    def wire_size(self) -> int:
        """Size of this Update on the wire, without TLV header."""
        return UPDATE_BASE_WIRE_SIZE + (self.subnet.prefixlen + 7) // 8

    @classmethod
    def from_bytes(cls, src: bytearray, length: int) -> Optional["Update"]:
        """Decode an Update of ``length`` body bytes, consuming them from ``src``.

        Unknown flag bits are dropped. Returns None for an unknown address
        encoding or an impossible prefix length. Raises ValueError on a short
        buffer.
        """
        ae = read_u8(src)
        flags = read_u8(src) & FLAG_MASK
        plen = read_u8(src)
        read_u8(src)  # omitted
        interval = read_u16(src)
        seqno = read_u16(src)
        metric = read_u16(src)
        prefix_size = (plen + 7) // 8

        if ae == AE_WILDCARD:
            if prefix_size != 0:
                return None
            address = ipaddress.IPv6Address(0)
        elif ae == AE_IPV4:
            if plen > 32:
                return None
            address = ipaddress.IPv4Address(take(src, prefix_size) + bytes(4 - prefix_size))
        elif ae == AE_IPV6:
            if plen > 128:
                return None
            address = ipaddress.IPv6Address(take(src, prefix_size) + bytes(16 - prefix_size))
        elif ae == AE_IPV6_LL:
            if plen != 64:
                return None
            address = ipaddress.IPv6Address(LINK_LOCAL_PREFIX + take(src, 8))
        else:
            take(src, length - _FIXED_HEADER_SIZE)
            return None

        try:
            subnet = make_subnet(address, plen)
        except ValueError:
            return None

        router_id = take(src, ROUTER_ID_BYTE_SIZE)
        return cls(
            flags=flags,
            interval=interval,
            seqno=seqno,
            metric=metric,
            subnet=subnet,
            router_id=router_id,
        )

    def to_bytes(self) -> bytes:
        """Encode this Update body."""
        header = struct.pack(
            ">BBBBHHH",
            ae_for(self.subnet),
            self.flags,
            self.subnet.prefixlen,
            0,
            self.interval,
            self.seqno,
            self.metric,
        )
        return header + prefix_bytes(self.subnet) + self.router_id