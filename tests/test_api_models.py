import json

import pytest

from myceliumnet.api_models import (
    INFINITE_STR,
    AddPeer,
    Info,
    Metric,
    PubKey,
    Route,
    parse_routes,
)

NEXT_HOP = "TCP [2a02:1811:d584:7400:c503:ff39:de03:9e44]:45694 <-> [2a01:4f8:212:fa6::2]:9651"

ROUTES_JSON = """
[
    {"subnet":"406:1d77:2438:aa7c::/64","nextHop":"TCP [2a02:1811:d584:7400:c503:ff39:de03:9e44]:45694 <-> [2a01:4f8:212:fa6::2]:9651","metric":20,"seqno":0},
    {"subnet":"407:8458:dbf5:4ed7::/64","nextHop":"TCP [2a02:1811:d584:7400:c503:ff39:de03:9e44]:45694 <-> [2a01:4f8:212:fa6::2]:9651","metric":174,"seqno":0},
    {"subnet":"408:7ba3:3a4d:808a::/64","nextHop":"TCP [2a02:1811:d584:7400:c503:ff39:de03:9e44]:45694 <-> [2a01:4f8:212:fa6::2]:9651","metric":"infinite","seqno":0}
]
"""


def test_finite_metric_serialization():
    assert json.dumps(Metric(10).to_json()) == "10"


def test_infinite_metric_serialization():
    assert json.dumps(Metric.infinite().to_json()) == f'"{INFINITE_STR}"'


def test_deserialize_metric():
    assert Metric.from_json(20) == Metric(20)
    assert Metric.from_json(INFINITE_STR) == Metric.infinite()
    with pytest.raises(ValueError):
        Metric.from_json("invalid")


@pytest.mark.parametrize("bad", [-1, 65536, 1.5, True, None, [1]])
def test_deserialize_metric_rejects(bad):
    with pytest.raises(ValueError):
        Metric.from_json(bad)


def test_metric_ordering_and_display():
    assert Metric(5) < Metric(20) < Metric.infinite()
    assert Metric(65535) < Metric.infinite()
    assert str(Metric(174)) == "174"
    assert str(Metric.infinite()) == INFINITE_STR
    assert sorted([Metric.infinite(), Metric(3), Metric(1)]) == [
        Metric(1),
        Metric(3),
        Metric.infinite(),
    ]


def test_deserialize_route():
    routes = parse_routes(ROUTES_JSON)
    assert routes[0] == Route(
        subnet="406:1d77:2438:aa7c::/64",
        next_hop=NEXT_HOP,
        metric=Metric(20),
        seqno=0,
    )
    assert routes[1] == Route(
        subnet="407:8458:dbf5:4ed7::/64",
        next_hop=NEXT_HOP,
        metric=Metric(174),
        seqno=0,
    )
    assert routes[2] == Route(
        subnet="408:7ba3:3a4d:808a::/64",
        next_hop=NEXT_HOP,
        metric=Metric.infinite(),
        seqno=0,
    )


def test_route_json_round_trip():
    for route in parse_routes(ROUTES_JSON):
        assert Route.from_json(json.loads(json.dumps(route.to_json()))) == route


def test_route_missing_field():
    with pytest.raises(ValueError):
        Route.from_json({"subnet": "406:1d77:2438:aa7c::/64", "metric": 20, "seqno": 0})


def test_parse_routes_rejects_object():
    with pytest.raises(ValueError):
        parse_routes('{"subnet": "x"}')


def test_route_ordering_by_fields():
    routes = parse_routes(ROUTES_JSON)
    assert sorted(reversed(routes)) == routes


def test_add_peer_round_trip():
    peer = AddPeer(endpoint="tcp://[2a01:4f8:212:fa6::2]:9651")
    assert AddPeer.from_json(peer.to_json()) == peer
    assert peer.to_json() == {"endpoint": "tcp://[2a01:4f8:212:fa6::2]:9651"}


def test_info_from_json():
    info = Info.from_json({"nodeSubnet": "406:1d77:2438:aa7c::/64", "nodePubkey": "ab" * 32})
    assert info.node_subnet == "406:1d77:2438:aa7c::/64"
    assert info.node_pubkey == "ab" * 32
    assert Info.from_json(info.to_json()) == info
    with pytest.raises(ValueError):
        Info.from_json({"nodeSubnet": "406:1d77:2438:aa7c::/64"})


def test_pubkey_to_json():
    assert PubKey(public_key="cd" * 32).to_json() == {"publicKey": "cd" * 32}