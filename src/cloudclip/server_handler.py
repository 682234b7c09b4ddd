#!/usr/bin/env python3
"""Viewer connection handling for the daemon.

The daemon pushes history to every connected viewer through a
HistoryBroadcaster, and answers on-demand requests from a single viewer
with a freshly fetched history.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cloudclip.history import fetch_history
from cloudclip.protocol import (
    REQUEST,
    ProtocolError,
    decode_message,
    encode_history,
    is_goodbye,
    read_netstring,
    send_goodbye,
)

if TYPE_CHECKING:
    from cloudclip.store import SyncStorePort

logger = logging.getLogger(__name__)

# Seconds a viewer gets to accept one frame before it is dropped.
VIEWER_DRAIN_TIMEOUT: float = 2.0


async def send_frame(writer: asyncio.StreamWriter, frame: bytes) -> None:
    """Write one frame and wait, bounded, for the viewer to take it.

    Raises:
        asyncio.TimeoutError: If the viewer does not read within
            VIEWER_DRAIN_TIMEOUT.
    """
    writer.write(frame)
    await asyncio.wait_for(writer.drain(), timeout=VIEWER_DRAIN_TIMEOUT)


class HistoryBroadcaster:
    """HistoryView that forwards pushes to all connected viewers.

    A viewer that does not accept a push within VIEWER_DRAIN_TIMEOUT is
    dropped, so a stalled viewer never holds up the remote poller.

    Attributes:
        writers: Stream writers of the connected viewers.
    """

    def __init__(self) -> None:
        self.writers: set[asyncio.StreamWriter] = set()

    def add(self, writer: asyncio.StreamWriter) -> None:
        self.writers.add(writer)

    def remove(self, writer: asyncio.StreamWriter) -> None:
        self.writers.discard(writer)

    async def push(self, items: list[str]) -> None:
        """Send items to every viewer, dropping viewers that fail."""
        frame = encode_history(items)
        for writer in list(self.writers):
            try:
                await send_frame(writer, frame)
            except asyncio.TimeoutError:
                logger.warning("Dropping viewer that stopped reading")
                self.remove(writer)
                writer.transport.abort()
            except (ConnectionError, OSError) as e:
                logger.warning("Dropping viewer after failed push: %s", e)
                self.remove(writer)
                writer.close()
        logger.debug("Pushed %d items to %d viewer(s)", len(items), len(self.writers))

    async def close(self) -> None:
        """Say goodbye to every viewer and close their connections."""
        for writer in list(self.writers):
            await send_goodbye(writer)
            writer.close()
        self.writers.clear()


async def handle_viewer(
    broadcaster: HistoryBroadcaster,
    store: SyncStorePort,
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
) -> None:
    """Serve a single viewer connection.

    Registers the viewer for pushes and answers each request message
    with the current history. Returns when the viewer says goodbye,
    disconnects or violates the protocol.

    Args:
        broadcaster: Registry of connected viewers.
        store: The remote store used to answer requests.
        reader: The asyncio StreamReader for the viewer connection.
        writer: The asyncio StreamWriter for the viewer connection.
    """
    logger.debug("Viewer connected")
    broadcaster.add(writer)
    try:
        while True:
            content = await read_netstring(reader)
            if is_goodbye(content):
                logger.debug("Viewer disconnected cleanly")
                break
            message = decode_message(content)
            if message["type"] != REQUEST:
                logger.warning("Ignoring unexpected %s message from viewer", message["type"])
                continue
            history = await fetch_history(store)
            await send_frame(writer, encode_history(history))
    except ProtocolError as e:
        logger.debug("Viewer connection ended: %s", e)
    except asyncio.TimeoutError:
        logger.warning("Viewer stopped reading, closing connection")
    except ConnectionError as e:
        logger.warning("Viewer connection error: %s", e)
    finally:
        broadcaster.remove(writer)
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError):
            pass
