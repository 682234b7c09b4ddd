#!/usr/bin/env python3
"""Viewer connection and retry logic.

This module provides the viewer side of the history channel. The viewer
connects to the daemon's Unix domain socket, requests the current
history, then receives a push whenever the remote table changes.
Connection failures are retried with tenacity exponential backoff so a
viewer can be started before the daemon.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from tenacity import retry, retry_if_exception_type, stop_never, wait_exponential

from cloudclip.constants import INITIAL_WAIT, MAX_WAIT, WAIT_MULTIPLIER
from cloudclip.protocol import (
    HISTORY,
    decode_message,
    encode_request,
    is_goodbye,
    read_netstring,
    send_goodbye,
)

logger = logging.getLogger(__name__)


async def connect_to_daemon(
    socket_path: str,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to the daemon's history socket.

    Args:
        socket_path: Path to the Unix domain socket.

    Returns:
        Tuple of (StreamReader, StreamWriter) for the connection.

    Raises:
        ConnectionError: If connection fails (socket not found, refused, etc).
    """
    try:
        return await asyncio.open_unix_connection(socket_path)
    except OSError as e:
        raise ConnectionError(f"Failed to connect to {socket_path}: {e}") from e


async def receive_history(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    on_history: Callable[[list[str]], None],
    once: bool = False,
) -> list[str] | None:
    """Request history and hand every push to on_history.

    Args:
        reader: The asyncio StreamReader for the daemon connection.
        writer: The asyncio StreamWriter for the daemon connection.
        on_history: Called with each history list received.
        once: Return after the first history list.

    Returns:
        The first history list when once is True, otherwise None after
        the daemon says goodbye.

    Raises:
        ProtocolError: On a malformed frame or lost connection.
    """
    writer.write(encode_request())
    await writer.drain()
    while True:
        content = await read_netstring(reader)
        if is_goodbye(content):
            logger.debug("Daemon closed the history channel")
            return None
        message = decode_message(content)
        if message["type"] != HISTORY:
            logger.warning("Ignoring unexpected %s message from daemon", message["type"])
            continue
        items = message["items"]
        on_history(items)
        if once:
            await send_goodbye(writer)
            return items


async def fetch_history_once(socket_path: str) -> list[str]:
    """Connect once, fetch the current history and disconnect.

    Args:
        socket_path: Path to the Unix domain socket.

    Returns:
        Distinct texts, newest first.

    Raises:
        ConnectionError: If the daemon is not reachable.
        ProtocolError: On a malformed reply or early disconnect.
    """
    reader, writer = await connect_to_daemon(socket_path)
    try:
        items = await receive_history(reader, writer, lambda _: None, once=True)
    finally:
        writer.close()
        await writer.wait_closed()
    return items or []


@retry(
    wait=wait_exponential(
        multiplier=WAIT_MULTIPLIER,
        min=INITIAL_WAIT,
        max=MAX_WAIT,
    ),
    retry=retry_if_exception_type((ConnectionError, OSError)),
    stop=stop_never,
)
async def run_viewer_connection(
    socket_path: str,
    on_history: Callable[[list[str]], None],
) -> None:
    """Connect to the daemon with retry and follow history pushes.

    Returns normally when the daemon says goodbye.

    Args:
        socket_path: Path to the Unix domain socket.
        on_history: Called with each history list received.
    """
    logger.debug("Connecting to daemon at %s", socket_path)
    try:
        reader, writer = await connect_to_daemon(socket_path)
    except ConnectionError:
        logger.warning("Connection to %s failed, will retry", socket_path)
        raise

    logger.debug("Connected to daemon at %s", socket_path)
    try:
        await receive_history(reader, writer, on_history)
    except (ConnectionError, OSError) as e:
        logger.warning("Connection lost: %s, will retry", e)
        raise
    finally:
        writer.close()
        await writer.wait_closed()
