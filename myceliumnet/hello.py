"""The babel Hello TLV."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .wire import read_u16

#: Flag bit indicating a Hello is sent as unicast.
HELLO_FLAG_UNICAST = 0x8000
#: Mask leaving only the valid Hello flags.
FLAG_MASK = 0b10000000_00000000
#: Wire size of a Hello body, without TLV header.
HELLO_WIRE_SIZE = 6


@dataclass(frozen=True)
class Hello:
    """Hello TLV body."""

    flags: int
    seqno: int
    interval: int

    @classmethod
    def new_unicast(cls, seqno: int, interval: int) -> "Hello":
        """Create a unicast hello."""
        return cls(flags=HELLO_FLAG_UNICAST, seqno=seqno, interval=interval)

    def wire_size(self) -> int:
        """Size of this Hello on the wire."""
        return HELLO_WIRE_SIZE

    @classmethod
    def from_bytes(cls, src: bytearray) -> "Hello":
        """Decode a Hello, consuming its bytes from ``src``.

        Unknown flag bits are dropped. Raises ValueError on a short buffer.
        """
        flags = read_u16(src) & FLAG_MASK
        seqno = read_u16(src)
        interval = read_u16(src)
        return cls(flags=flags, seqno=seqno, interval=interval)

    def to_bytes(self) -> bytes:
        """Encode this Hello body."""
        return struct.pack(">HHH", self.flags, self.seqno, self.interval)