"""The babel Route Request TLV."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Optional

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
    take,
)

#: Wire size of a RouteRequest body without its prefix.
ROUTE_REQUEST_BASE_WIRE_SIZE = 2


@dataclass(frozen=True)
class RouteRequest:
    """Route request TLV body.

    A request without a prefix asks for a full route table dump.
    """

    prefix: Optional[Subnet] = None

    def wire_size(self) -> int:
        """Size of this RouteRequest on the wire, without TLV header."""
        if self.prefix is None:
            return ROUTE_REQUEST_BASE_WIRE_SIZE
        return ROUTE_REQUEST_BASE_WIRE_SIZE + (self.prefix.prefixlen + 7) // 8

    @classmethod
    def from_bytes(cls, src: bytearray, length: int) -> Optional["RouteRequest"]:
        """Decode a RouteRequest of ``length`` body bytes, consuming them from ``src``.

        Returns None for an unknown address encoding or an impossible prefix
        length. Raises ValueError on a short buffer.
        """
        ae = read_u8(src)
        plen = read_u8(src)
        prefix_size = (plen + 7) // 8

        if ae == AE_WILDCARD:
            address = None
        elif ae == AE_IPV4:
            if plen > 32:
                return None
            raw = take(src, prefix_size)
            address = ipaddress.IPv4Address(raw + bytes(4 - prefix_size))
        elif ae == AE_IPV6:
            if plen > 128:
                return None
            raw = take(src, prefix_size)
            address = ipaddress.IPv6Address(raw + bytes(16 - prefix_size))
        elif ae == AE_IPV6_LL:
            if plen != 64:
                return None
            address = ipaddress.IPv6Address(LINK_LOCAL_PREFIX + take(src, 8))
        else:
            take(src, length - ROUTE_REQUEST_BASE_WIRE_SIZE)
            return None

        prefix: Optional[Subnet] = None
        if address is not None:
            try:
                prefix = make_subnet(address, plen)
            except ValueError:
                prefix = None
        return cls(prefix=prefix)

    def to_bytes(self) -> bytes:
        """Encode this RouteRequest body."""
        if self.prefix is None:
            # Prefix length must be 0 for wildcard requests.
            return bytes([AE_WILDCARD, 0])
        return bytes([ae_for(self.prefix), self.prefix.prefixlen]) + prefix_bytes(
            self.prefix
        )