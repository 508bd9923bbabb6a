"""Command line helpers to send and receive messages over the HTTP API."""

from __future__ import annotations

import ipaddress
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple, Union
from urllib.parse import quote

import requests

from .api_messages import (
    MessageDestination,
    MessageIdReply,
    MessageReceiveInfo,
    MessageSendInfo,
    encode_base64,
    parse_push_message_response,
)

logger = logging.getLogger(__name__)

ServerAddr = Union[str, Tuple[str, int]]

#: Address of the node API used when none is given.
DEFAULT_SERVER_ADDR = "127.0.0.1:8989"
#: The overlay subnet every node address lives in.
GLOBAL_SUBNET = ipaddress.ip_network("400::/7")
#: Default time to wait, in seconds: a year should be sufficient.
DEFAULT_WAIT_SECS = 60 * 60 * 24 * 365
#: Maximum length of a topic in bytes.
MAX_TOPIC_LEN = 255
#: Length of a hex encoded public key.
_PUBKEY_HEX_LEN = 64
_STATUS_NO_CONTENT = 204


def _base_url(server_addr: ServerAddr) -> str:
    if isinstance(server_addr, tuple):
        host, port = server_addr
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{port}"
    return f"http://{server_addr}"


def _print_json(obj: dict) -> None:
    print(json.dumps(obj, separators=(",", ":")))


def _readable(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return encode_base64(data)


def cli_message(info: MessageReceiveInfo) -> dict:
    """JSON form of a received message for display.

    Topic and payload are shown as text when they are valid UTF-8, and as
    base64 otherwise.
    """
    out: dict = {
        "id": info.id,
        "srcIp": str(info.src_ip),
        "srcPk": info.src_pk,
        "dstIp": str(info.dst_ip),
        "dstPk": info.dst_pk,
    }
    if info.topic is not None:
        out["topic"] = _readable(info.topic)
    out["payload"] = _readable(info.payload)
    return out


def _parse_destination(destination: str) -> MessageDestination:
    if len(destination) == _PUBKEY_HEX_LEN:
        try:
            raw = bytes.fromhex(destination)
        except ValueError:
            raw = b""
        if len(raw) != _PUBKEY_HEX_LEN // 2:
            logger.error("%s is not a valid hex encoded public key", destination)
            raise ValueError("Invalid hex encoded public key")
        return MessageDestination(pk=destination.lower())

    try:
        ip = ipaddress.ip_address(destination)
    except ValueError as err:
        logger.error("%s is not a valid IPv6 address: %s", destination, err)
        raise ValueError("Invalid IPv6 address") from None
    if ip not in GLOBAL_SUBNET:
        logger.error("%s is not a part of %s", destination, GLOBAL_SUBNET)
        raise ValueError("IPv6 address is not part of the mycelium subnet")
    return MessageDestination(ip=ip)


def send_msg(
    destination: str,
    msg: Optional[str] = None,
    wait: bool = False,
    timeout: Optional[int] = None,
    reply_to: Optional[str] = None,
    topic: Optional[str] = None,
    msg_path: Optional[Union[str, Path]] = None,
    server_addr: ServerAddr = DEFAULT_SERVER_ADDR,
) -> None:
    """Send a message to ``destination`` and print the response.

    The message is read from ``msg_path`` if given, else taken from ``msg``.
    With ``wait`` the reply is awaited and printed. Raises ValueError for
    invalid input, OSError if the file cannot be read and
    ``requests.RequestException`` on transport errors.
    """
    if reply_to is not None and wait:
        logger.error("Can't wait on a reply for a reply, either use --reply-to or --wait")
        raise ValueError("Only one of --reply-to or --wait is allowed")

    dst = _parse_destination(destination)

    if msg_path is not None:
        try:
            payload = Path(msg_path).read_bytes()
        except OSError as err:
            logger.error("Could not read file at %s: %s", msg_path, err)
            raise
    elif msg is not None:
        payload = msg.encode("utf-8")
    else:
        logger.error("Message is a required argument if `--msg-path` is not provided")
        raise ValueError("Message is a required argument if `--msg-path` is not provided")

    url = f"{_base_url(server_addr)}/api/v1/messages"
    if reply_to is not None:
        url += f"/reply/{reply_to}"
    if wait:
        reply_timeout = DEFAULT_WAIT_SECS if timeout is None else timeout
        url += f"?reply_timeout={reply_timeout}"

    body = MessageSendInfo(
        dst=dst,
        payload=payload,
        topic=None if topic is None else topic.encode("utf-8"),
    )
    try:
        resp = requests.post(url, json=body.to_json())
    except requests.RequestException as err:
        logger.error("Failed to send request: %s", err)
        raise

    if resp.status_code == _STATUS_NO_CONTENT:
        return

    try:
        parsed = parse_push_message_response(resp.json())
    except ValueError as err:
        logger.error("Failed to load response body %s", err)
        raise

    if isinstance(parsed, MessageIdReply):
        _print_json(parsed.to_json())
    else:
        _print_json(cli_message(parsed))


def recv_msg(
    timeout: Optional[int] = None,
    topic: Optional[str] = None,
    msg_path: Optional[Union[str, Path]] = None,
    raw: bool = False,
    server_addr: ServerAddr = DEFAULT_SERVER_ADDR,
) -> None:
    """Wait for a message and print it.

    The payload is written to ``msg_path`` if given. With ``raw`` only the
    payload is printed. Raises ValueError for a topic over 255 bytes.
    """
    wait = DEFAULT_WAIT_SECS if timeout is None else timeout
    url = f"{_base_url(server_addr)}/api/v1/messages?timeout={wait}"
    if topic is not None:
        topic_bytes = topic.encode("utf-8")
        if len(topic_bytes) > MAX_TOPIC_LEN:
            logger.error(
                "%s is longer than the maximum allowed topic length of %d",
                topic,
                MAX_TOPIC_LEN,
            )
            raise ValueError("Topic too long")
        url += f"&topic={quote(encode_base64(topic_bytes), safe='')}"

    try:
        resp = requests.get(url)
    except requests.RequestException as err:
        logger.error("Failed to wait for message: %s", err)
        raise

    if resp.status_code == _STATUS_NO_CONTENT:
        logger.debug("No message ready yet")
        return

    logger.debug("Received message response")
    try:
        info = MessageReceiveInfo.from_json(resp.json())
    except ValueError as err:
        logger.error("Failed to load response json: %s", err)
        raise

    message = cli_message(info)

    if msg_path is not None:
        try:
            Path(msg_path).write_bytes(info.payload)
        except OSError as err:
            logger.error("Failed to write response payload to file: %s", err)
            raise
        del message["payload"]

    if raw:
        if msg_path is None:
            sys.stdout.flush()
            sys.stdout.buffer.write(info.payload)
            sys.stdout.buffer.flush()
            sys.stdout.write("\n")
            sys.stdout.flush()
    else:
        _print_json(message)