#!/usr/bin/env python3
"""
Netstring framing for the daemon/viewer history channel.

Netstrings frame each message as <length>:<content>, where length is
ASCII decimal digits, followed by a colon, the raw content bytes, and a
trailing comma. Example: "12:Hello world!," frames "Hello world!".

Each frame carries one UTF-8 JSON object:
- {"type": "history", "items": [...]}: history push, daemon to viewer
- {"type": "request"}: on-demand history request, viewer to daemon

An empty netstring ("0:,") is the goodbye message sent before a clean
disconnect.
"""
import asyncio
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Maximum size of a single frame in bytes (10 MB).
MAX_CONTENT_SIZE: int = 10485760

# Maximum digits in the length field (8 digits allows up to 99999999 bytes).
MAX_LENGTH_DIGITS: int = 8

# Goodbye message: empty netstring signaling clean shutdown.
GOODBYE_MESSAGE: bytes = b"0:,"

# Timeout for goodbye message drain in seconds.
GOODBYE_DRAIN_TIMEOUT: float = 2.0

HISTORY = "history"
REQUEST = "request"


class ProtocolError(Exception):
    """
    Exception raised for protocol-level errors.

    Raised when netstring parsing fails due to invalid format, size
    violations, connection issues, or when a frame does not hold a
    valid message.
    """

    pass


def encode_netstring(data: bytes) -> bytes:
    """
    Encode raw bytes as a netstring.

    Args:
        data: Raw bytes to encode.

    Returns:
        Netstring-encoded bytes in format "<length>:<content>,".
    """
    return f"{len(data)}:".encode("ascii") + data + b","


def validate_content_size(data: bytes) -> bool:
    """
    Check if content size is within the allowed limit.

    Args:
        data: Raw frame content to validate.

    Returns:
        True if len(data) <= MAX_CONTENT_SIZE, False otherwise.
    """
    return len(data) <= MAX_CONTENT_SIZE


async def read_netstring(reader: asyncio.StreamReader) -> bytes:
    """
    Read and decode a netstring from an async stream.

    Args:
        reader: asyncio StreamReader to read from.

    Returns:
        Decoded content bytes.

    Raises:
        ProtocolError: On invalid format, size violation, or connection closed.
    """
    length_bytes = b""
    while len(length_bytes) < MAX_LENGTH_DIGITS + 1:
        byte = await reader.read(1)
        if not byte:
            raise ProtocolError("Connection closed while reading length field")
        if byte == b":":
            break
        if not byte.isdigit():
            raise ProtocolError(f"Invalid character in length field: {byte!r}")
        length_bytes += byte
    else:
        raise ProtocolError("Length field exceeds maximum digits")
    if not length_bytes:
        raise ProtocolError("Empty length field")
    length = int(length_bytes.decode("ascii"))
    if length > MAX_CONTENT_SIZE:
        raise ProtocolError(f"Content size {length} exceeds limit {MAX_CONTENT_SIZE}")
    try:
        content = await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise ProtocolError(f"Connection closed after {e.partial!r} bytes") from e
    comma = await reader.read(1)
    if comma != b",":
        raise ProtocolError(f"Expected comma terminator, got {comma!r}")
    return content


def encode_history(items: list[str]) -> bytes:
    """
    Frame a history push message that fits within MAX_CONTENT_SIZE.

    Oldest items are dropped until the frame fits, so a viewer never
    receives a frame it would reject.

    Args:
        items: Distinct texts, newest first.

    Returns:
        Netstring-framed history message.
    """
    kept = list(items)
    while True:
        payload = json.dumps(
            {"type": HISTORY, "items": kept}, ensure_ascii=False
        ).encode("utf-8", "replace")
        if validate_content_size(payload) or not kept:
            break
        kept.pop()
    if len(kept) < len(items):
        logger.warning(
            "History too large for one frame, sending %d of %d items",
            len(kept),
            len(items),
        )
    return encode_netstring(payload)


def encode_request() -> bytes:
    """Frame an on-demand history request."""
    return encode_netstring(json.dumps({"type": REQUEST}).encode("utf-8"))


def decode_message(content: bytes) -> dict[str, Any]:
    """
    Decode the JSON message carried by a netstring frame.

    Args:
        content: Frame content, non-empty.

    Returns:
        The message object. History messages are checked to carry a list
        of strings under "items".

    Raises:
        ProtocolError: If the content is not a known, well-formed message.
    """
    try:
        message = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"Invalid message payload: {e}") from e
    if not isinstance(message, dict):
        raise ProtocolError(f"Expected JSON object, got {type(message).__name__}")
    kind = message.get("type")
    if kind == HISTORY:
        items = message.get("items")
        if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
            raise ProtocolError("History message items must be a list of strings")
    elif kind != REQUEST:
        raise ProtocolError(f"Unknown message type: {kind!r}")
    return message


async def send_goodbye(writer: asyncio.StreamWriter) -> None:
    """
    Send goodbye message to signal clean shutdown.

    Errors are ignored since the connection may already be dead during
    shutdown.

    Args:
        writer: asyncio StreamWriter to send goodbye on.
    """
    try:
        writer.write(GOODBYE_MESSAGE)
        await asyncio.wait_for(writer.drain(), timeout=GOODBYE_DRAIN_TIMEOUT)
    except (OSError, asyncio.TimeoutError):
        pass


def is_goodbye(content: bytes) -> bool:
    """
    Check if content is a goodbye message (empty bytes).

    Args:
        content: Decoded netstring content to check.

    Returns:
        True if content is empty bytes, False otherwise.
    """
    return content == b""
