"""Low level helpers for reading and writing babel TLV bodies.

Incoming data lives in a ``bytearray`` which the readers consume from the
front, so that after a successful decode the buffer holds whatever follows the
decoded item.
"""

from __future__ import annotations

import ipaddress
from typing import Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
Subnet = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

#: Magic byte identifying a babel packet.
BABEL_MAGIC = 42
#: Protocol version in use.
BABEL_VERSION = 2
#: Size of a babel packet header on the wire.
HEADER_WIRE_SIZE = 4

#: TLV type codes.
TLV_TYPE_HELLO = 4
TLV_TYPE_IHU = 5
TLV_TYPE_UPDATE = 8
TLV_TYPE_ROUTE_REQUEST = 9
TLV_TYPE_SEQNO_REQUEST = 10

#: Wildcard address, the value is empty.
AE_WILDCARD = 0
#: IPv4 address, at most 4 bytes.
AE_IPV4 = 1
#: IPv6 address, at most 16 bytes.
AE_IPV6 = 2
#: Link-local IPv6 address, 8 bytes with an implied ``fe80::/64`` prefix.
AE_IPV6_LL = 3

#: The 8 byte prefix implied by :data:`AE_IPV6_LL`.
LINK_LOCAL_PREFIX = b"\xfe\x80" + bytes(6)


def take(src: bytearray, count: int) -> bytes:
    """Remove and return the first ``count`` bytes of ``src``.

    Raises ValueError if fewer than ``count`` bytes are available.
    """
    if count < 0:
        raise ValueError(f"cannot take a negative amount of bytes ({count})")
    if count > len(src):
        raise ValueError(
            f"insufficient bytes in buffer: need {count}, have {len(src)}"
        )
    out = bytes(src[:count])
    del src[:count]
    return out


def read_u8(src: bytearray) -> int:
    """Consume a single unsigned byte."""
    return take(src, 1)[0]


def read_u16(src: bytearray) -> int:
    """Consume a big-endian unsigned 16 bit integer."""
    return int.from_bytes(take(src, 2), "big")


def ae_for(address: Optional[IPAddress]) -> int:
    """Return the address encoding used on the wire for ``address``."""
    if address is None:
        return AE_WILDCARD
    if isinstance(address, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        address = address.network_address
    return AE_IPV4 if address.version == 4 else AE_IPV6


def prefix_bytes(subnet: Subnet) -> bytes:
    """Return the significant leading bytes of a subnet's address."""
    size = (subnet.prefixlen + 7) // 8
    return subnet.network_address.packed[:size]


def make_subnet(address: Union[IPAddress, str, bytes, int], prefix_len: int) -> Subnet:
    """Build a subnet from an address and a prefix length.

    Host bits are cleared. Raises ValueError if the prefix length does not fit
    the address family.
    """
    if not isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        address = ipaddress.ip_address(address)
    if address.version == 4:
        return ipaddress.IPv4Network((address, prefix_len), strict=False)
    return ipaddress.IPv6Network((address, prefix_len), strict=False)