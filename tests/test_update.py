import ipaddress
from datetime import timedelta

import pytest

from myceliumnet.update import UPDATE_FLAG_PREFIX, UPDATE_FLAG_ROUTER_ID, Update
from myceliumnet.wire import make_subnet


def test_encoding_ipv6():
    update = Update(
        flags=0b1100_0000,
        interval=400,
        seqno=17,
        metric=25,
        subnet=make_subnet(ipaddress.IPv6Address("200:19:1a:1b:1c::1d"), 64),
        router_id=bytes([1] * 40),
    )
    data = update.to_bytes()
    assert len(data) == 58
    assert list(data) == [2, 192, 64, 0, 1, 144, 0, 17, 0, 25, 2, 0, 0, 25, 0, 26, 0, 27] + [1] * 40


def test_encoding_ipv4():
    update = Update(
        flags=0,
        interval=600,
        seqno=170,
        metric=256,
        subnet=make_subnet(ipaddress.IPv4Address("10.101.4.1"), 23),
        router_id=bytes([2] * 40),
    )
    data = update.to_bytes()
    assert len(data) == 53
    assert list(data) == [1, 0, 23, 0, 2, 88, 0, 170, 1, 0, 10, 101, 4] + [2] * 40


def test_decoding_wildcard():
    buf = bytearray([0, 64, 0, 0, 0, 100, 0, 70, 2, 0] + [3] * 40)
    expected = Update(
        flags=0b0100_0000,
        interval=100,
        seqno=70,
        metric=512,
        subnet=make_subnet(ipaddress.IPv6Address("::"), 0),
        router_id=bytes([3] * 40),
    )
    assert Update.from_bytes(buf, len(buf)) == expected
    assert len(buf) == 0


def test_decoding_link_local():
    buf = bytearray([3, 0, 64, 0, 3, 232, 0, 42, 3, 1, 0, 10, 0, 20, 0, 30, 0, 40] + [4] * 40)
    expected = Update(
        flags=0,
        interval=1000,
        seqno=42,
        metric=769,
        subnet=make_subnet(ipaddress.IPv6Address("fe80::a:14:1e:28"), 64),
        router_id=bytes([4] * 40),
    )
    assert Update.from_bytes(buf, len(buf)) == expected
    assert len(buf) == 0


def test_decode_ignores_invalid_ae_encoding():
    buf = bytearray(
        [
            4, 0, 64, 0, 0, 44, 2, 0, 0, 10, 10, 5, 0, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16,
            17, 18, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5,
            5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5,
        ]
    )
    assert Update.from_bytes(buf, len(buf)) is None
    assert len(buf) == 0


def test_decode_ignores_invalid_flag_bits():
    buf = bytearray([3, 255, 64, 0, 3, 232, 0, 42, 3, 1, 0, 10, 0, 20, 0, 30, 0, 40] + [4] * 40)
    expected = Update(
        flags=UPDATE_FLAG_PREFIX | UPDATE_FLAG_ROUTER_ID,
        interval=1000,
        seqno=42,
        metric=769,
        subnet=make_subnet(ipaddress.IPv6Address("fe80::a:14:1e:28"), 64),
        router_id=bytes([4] * 40),
    )
    assert Update.from_bytes(buf, len(buf)) == expected
    assert len(buf) == 0


def test_roundtrip():
    src = Update.new(
        timedelta(seconds=64),
        10,
        25,
        make_subnet(ipaddress.IPv6Address("21f:4025:abcd:dead::"), 64),
        bytes([6] * 40),
    )
    buf = bytearray(src.to_bytes())
    decoded = Update.from_bytes(buf, len(buf))
    assert decoded == src
    assert len(buf) == 0


def test_interval_duration_matches_new():
    update = Update.new(
        timedelta(seconds=64),
        10,
        25,
        make_subnet(ipaddress.IPv6Address("21f:4025:abcd:dead::"), 64),
        bytes([6] * 40),
    )
    assert update.interval_duration() == timedelta(seconds=64)
    assert update.flags == 0


def test_wire_size_matches_encoding():
    update = Update.new(
        timedelta(seconds=4),
        1,
        2,
        make_subnet(ipaddress.IPv4Address("10.101.4.1"), 23),
        bytes([7] * 40),
    )
    assert update.wire_size() == len(update.to_bytes())


def test_router_id_length_is_checked():
    with pytest.raises(ValueError):
        Update.new(
            timedelta(seconds=1),
            1,
            1,
            make_subnet(ipaddress.IPv6Address("400::"), 64),
            bytes(3),
        )


def test_short_buffer_raises():
    buf = bytearray([2, 0, 64, 0, 0, 44])
    with pytest.raises(ValueError):
        Update.from_bytes(buf, 58)