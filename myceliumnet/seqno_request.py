"""The babel Seqno Request TLV."""

from __future__ import annotations

import ipaddress
import struct
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
    read_u16,
    take,
)

#: Size of a router id on the wire.
ROUTER_ID_BYTE_SIZE = 40
#: Hop count used in new seqno requests.
DEFAULT_HOP_COUNT = 64
#: Wire size of a SeqNoRequest body without its prefix.
SEQNO_REQUEST_BASE_WIRE_SIZE = 6 + ROUTER_ID_BYTE_SIZE


@dataclass
class SeqNoRequest:
    """Seqno request TLV body.

    ``hop_count`` is the maximum number of times the request may be forwarded,
    plus one; it is never 0.
    """

    seqno: int
    hop_count: int
    router_id: bytes
    prefix: Subnet

    def __post_init__(self) -> None:
        self.router_id = bytes(self.router_id)
        if len(self.router_id) != ROUTER_ID_BYTE_SIZE:
            raise ValueError(
                f"router id must be {ROUTER_ID_BYTE_SIZE} bytes, got {len(self.router_id)}"
            )
        if not 1 <= self.hop_count <= 255:
            raise ValueError(f"hop count must be between 1 and 255, got {self.hop_count}")

    @classmethod
    def new(cls, seqno: int, router_id: bytes, prefix: Subnet) -> "SeqNoRequest":
        """Create a request for ``prefix`` from ``router_id`` with the default hop count."""
        return cls(
            seqno=seqno, hop_count=DEFAULT_HOP_COUNT, router_id=router_id, prefix=prefix
        )

    def decrement_hop_count(self) -> None:
        """Decrement the hop count.

        Raises ValueError if the hop count is 1, as 0 is not allowed.
        """
        if self.hop_count <= 1:
            raise ValueError("Decrementing a hop count of 1 is not allowed")
        self.hop_count -= 1

    def wire_size(self) -> int:
        """Size of this SeqNoRequest on the wire, without TLV header."""
        return SEQNO_REQUEST_BASE_WIRE_SIZE + (self.prefix.prefixlen + 7) // 8

    @classmethod
    def from_bytes(cls, src: bytearray, length: int) -> Optional["SeqNoRequest"]:
        """Decode a SeqNoRequest of ``length`` body bytes, consuming them from ``src``.

        Returns None for an unknown address encoding, an impossible prefix
        length or a hop count of 0. Raises ValueError on a short buffer.
        """
        ae = read_u8(src)
        plen = read_u8(src)
        seqno = read_u16(src)
        hop_count = read_u8(src)
        read_u8(src)  # reserved
        router_id = take(src, ROUTER_ID_BYTE_SIZE)

        prefix_size = (plen + 7) // 8

        if ae == AE_WILDCARD:
            if plen != 0:
                return None
            address = ipaddress.IPv6Address(0)
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
            take(src, length - SEQNO_REQUEST_BASE_WIRE_SIZE)
            return None

        try:
            prefix = make_subnet(address, plen)
        except ValueError:
            return None

        if hop_count == 0:
            return None

        return cls(seqno=seqno, hop_count=hop_count, router_id=router_id, prefix=prefix)

    def to_bytes(self) -> bytes:
        """Encode this SeqNoRequest body."""
        header = struct.pack(
            ">BBHBB",
            ae_for(self.prefix),
            self.prefix.prefixlen,
            self.seqno,
            self.hop_count,
            0,
        )
        return header + self.router_id + prefix_bytes(self.prefix)