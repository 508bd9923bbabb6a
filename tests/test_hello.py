import pytest

from myceliumnet.hello import HELLO_FLAG_UNICAST, Hello


def test_encoding():
    data = Hello(flags=0, seqno=25, interval=400).to_bytes()
    assert len(data) == 6
    assert data == bytes([0, 0, 0, 25, 1, 144])

    data = Hello(flags=HELLO_FLAG_UNICAST, seqno=16, interval=4000).to_bytes()
    assert len(data) == 6
    assert data == bytes([128, 0, 0, 16, 15, 160])


def test_decoding():
    buf = bytearray([0b10000000, 0b00000000, 0, 19, 2, 1])
    expected = Hello(flags=HELLO_FLAG_UNICAST, seqno=19, interval=513)
    assert Hello.from_bytes(buf) == expected
    assert len(buf) == 0

    buf = bytearray([0b00000000, 0b00000000, 1, 19, 200, 100])
    expected = Hello(flags=0, seqno=275, interval=51300)
    assert Hello.from_bytes(buf) == expected
    assert len(buf) == 0


def test_decode_ignores_invalid_flag_bits():
    buf = bytearray([0b10001001, 0b00000000, 0, 100, 1, 144])
    assert Hello.from_bytes(buf) == Hello(flags=HELLO_FLAG_UNICAST, seqno=100, interval=400)
    assert len(buf) == 0

    buf = bytearray([0b00001001, 0b00000000, 0, 100, 1, 144])
    assert Hello.from_bytes(buf) == Hello(flags=0, seqno=100, interval=400)
    assert len(buf) == 0


def test_roundtrip():
    src = Hello.new_unicast(16, 400)
    buf = bytearray(src.to_bytes())
    decoded = Hello.from_bytes(buf)
    assert decoded == src
    assert len(buf) == 0


def test_new_unicast_sets_flag_and_wire_size():
    hello = Hello.new_unicast(15, 400)
    assert hello.flags == HELLO_FLAG_UNICAST
    assert hello.wire_size() == 6
    assert len(hello.to_bytes()) == hello.wire_size()


def test_decode_leaves_trailing_bytes():
    buf = bytearray([0, 0, 0, 25, 1, 144, 9, 9])
    Hello.from_bytes(buf)
    assert buf == bytearray([9, 9])


def test_decode_short_buffer_raises():
    with pytest.raises(ValueError):
        Hello.from_bytes(bytearray([0, 0, 0, 25]))