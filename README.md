# myceliumnet

Python helpers for working with a mycelium overlay network node:

- encoding and decoding of the Babel routing TLVs that nodes exchange
  (Hello, IHU, Update, route request and seqno request);
- data models for the node's HTTP admin and message API, with their JSON
  forms;
- functions that send and receive messages through a running node's HTTP
  API.

Install with `pip install .`, or `pip install .[test]` to run the tests
with `pytest`.

## TLV bodies

Each TLV type has its own module: `myceliumnet.hello`, `myceliumnet.ihu`,
`myceliumnet.route_request`, `myceliumnet.seqno_request` and
`myceliumnet.update`. Every TLV class reports its size on the wire (without
the 2 byte TLV header) with `wire_size()`, encodes its body with
`to_bytes()`, and is decoded with the `from_bytes` class method.

Decoding consumes bytes from the front of a `bytearray`, so after a decode
the buffer holds whatever follows the TLV. A buffer that is too short raises
`ValueError`. A body with an unknown address encoding is skipped (using the
given body length) and decodes to `None`; so does an impossible prefix
length, or a seqno request with a hop count of 0.

```python
import ipaddress
from datetime import timedelta

from myceliumnet.hello import Hello
from myceliumnet.ihu import Ihu
from myceliumnet.update import Update
from myceliumnet.wire import make_subnet

hello = Hello.new_unicast(15, 400)
hello.to_bytes()                       # b"\x80\x00\x00\x0f\x01\x90"
Hello.from_bytes(bytearray(hello.to_bytes())) == hello   # True

ihu = Ihu(rx_cost=25, interval=400, address=ipaddress.ip_address("1.1.1.1"))
buf = bytearray(ihu.to_bytes())
Ihu.from_bytes(buf, len(buf)) == ihu   # True

update = Update.new(
    timedelta(seconds=64),
    10,
    25,
    make_subnet("21f:4025:abcd:dead::", 64),
    bytes(40),                         # router id, 40 bytes
)
update.interval                        # 6400 centiseconds
```

`SeqNoRequest.new(seqno, router_id, prefix)` starts with a hop count of 64;
`decrement_hop_count()` raises `ValueError` instead of reaching 0.
`Ihu` refuses an interval of 0.

`myceliumnet.wire` holds the shared pieces: the protocol constants, the
buffer readers `take`, `read_u8` and `read_u16`, `ae_for`, `prefix_bytes`
and `make_subnet`.

## API models

`myceliumnet.api_models` holds the JSON shapes of the admin API. A route
metric is a number from 0 to 65535 or the string `"infinite"`, and finite
metrics sort before the infinite one:

```python
from myceliumnet.api_models import Metric, parse_routes

Metric.from_json(20).to_json()         # 20
Metric.infinite().to_json()            # "infinite"
Metric.from_json("invalid")            # raises ValueError

routes = parse_routes(response_text)   # list of Route
```

It also has `AddPeer`, `Info` and `PubKey`.

`myceliumnet.api_messages` holds `MessageDestination` (an overlay IP or a
hex public key), `MessageSendInfo`, `MessageReceiveInfo`, `MessageIdReply`
and `parse_push_message_response`. Payloads and topics travel as standard
base64; `encode_base64` and `decode_base64` do the conversion.

## Sending and receiving messages

`myceliumnet.cli_messages` talks to a node's HTTP API, by default at
`127.0.0.1:8989`:

```python
from myceliumnet.cli_messages import recv_msg, send_msg

send_msg("400:1234::1", msg="hello", topic="chat")
send_msg("400:1234::1", msg="ping", wait=True, timeout=10)
recv_msg(timeout=5, topic="chat")
recv_msg(timeout=5, raw=True, msg_path="payload.bin")
```

A destination is either a 64 character hex public key or an IPv6 address
inside `400::/7`. Responses are printed as JSON; topics and payloads show as
text when they are valid UTF-8 and as base64 otherwise. Invalid input raises
`ValueError`, and transport failures raise `requests.RequestException`.

## What this package does not do

- It encodes and decodes single TLV bodies only. It does not frame whole
  Babel packets (the 4 byte packet header) or read them from a stream.
- It does not run a node, a router or an HTTP API server, and does not
  collect or export metrics.
- For the admin API it provides only the data models: there are no
  functions here to list, add or remove peers or to list routes.
- It installs no command-line program; the message functions are called
  from Python.