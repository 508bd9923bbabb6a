"""The babel IHU ("I Heard You") TLV."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from typing import Optional, Union

from .wire import (
    AE_IPV4,
    AE_IPV6,
    AE_IPV6_LL,
    AE_WILDCARD,
    LINK_LOCAL_PREFIX,
    ae_for,
    read_u8,
    read_u16,
    take,
)

#: Wire size of an IHU body without its address.
IHU_BASE_WIRE_SIZE = 6

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Ihu:
    """IHU TLV body.

    The interval must not be 0, as the receiver derives its hold time from it.
    """

    rx_cost: int
    interval: int
    address: Optional[IPAddress] = None

    def __post_init__(self) -> None:
        if self.interval == 0:
            raise ValueError("Ihu interval MUST NOT be 0")

    def wire_size(self) -> int:
        """Size of this IHU on the wire, without TLV header."""
        if self.address is None:
            return IHU_BASE_WIRE_SIZE
        return IHU_BASE_WIRE_SIZE + len(self.address.packed)

    @classmethod
    def from_bytes(cls, src: bytearray, length: int) -> Optional["Ihu"]:
        """Decode an IHU of ``length`` body bytes, consuming them from ``src``.

        Returns None for an unknown address encoding or a zero interval; the
        body is still consumed. Raises ValueError on a short buffer.
        """
        ae = read_u8(src)
        read_u8(src)  # reserved
        rx_cost = read_u16(src)
        interval = read_u16(src)

        address: Optional[IPAddress]
        if ae == AE_WILDCARD:
            address = None
        elif ae == AE_IPV4:
            address = ipaddress.IPv4Address(take(src, 4))
        elif ae == AE_IPV6:
            address = ipaddress.IPv6Address(take(src, 16))
        elif ae == AE_IPV6_LL:
            address = ipaddress.IPv6Address(LINK_LOCAL_PREFIX + take(src, 8))
        else:
            take(src, length - IHU_BASE_WIRE_SIZE)
            return None

        if interval == 0:
            return None
        return cls(rx_cost=rx_cost, interval=interval, address=address)

    def to_bytes(self) -> bytes:
        """Encode this IHU body."""
        header = struct.pack(">BBHH", ae_for(self.address), 0, self.rx_cost, self.interval)
        if self.address is None:
            return header
        return header + self.address.packed