#!/usr/bin/env python3
"""Daemon mode implementation for cloudclip.

The daemon runs on each device that shares the clipboard. It:
- Uploads local clipboard changes to the remote table
- Polls the remote table and applies entries made on other devices
- Serves the deduplicated history to viewers over a Unix domain socket

On startup the clipboard is primed with the newest remote entry. Store
failures, including missing credentials, never stop the daemon; it then
keeps watching the local clipboard without syncing.

Usage:
    cloudclip --daemon --socket /path/to/socket
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

from cloudclip.clipboard import SystemClipboard
from cloudclip.constants import POLL_INTERVAL
from cloudclip.server_handler import HistoryBroadcaster, handle_viewer
from cloudclip.server_socket import print_startup_message
from cloudclip.store import NullStore, create_store
from cloudclip.sync_handlers import prime_clipboard
from cloudclip.sync_loop import run_sync_loop

if TYPE_CHECKING:
    from cloudclip.config import StoreConfig

logger = logging.getLogger(__name__)


async def run_daemon(
    socket_path: str,
    config: StoreConfig | None,
    interval: float = POLL_INTERVAL,
) -> None:
    """Run the sync loops and the history server until SIGINT/SIGTERM.

    Args:
        socket_path: Path to the Unix domain socket to serve history on.
        config: Store settings, or None to run without syncing.
        interval: Seconds between ticks of each loop.
    """
    store = await create_store(config)
    clipboard = SystemClipboard()
    broadcaster = HistoryBroadcaster()

    await prime_clipboard(clipboard, store)

    server = await asyncio.start_unix_server(
        lambda r, w: handle_viewer(broadcaster, store, r, w),
        path=socket_path,
    )
    print_startup_message(socket_path, synced=not isinstance(store, NullStore))

    shutdown_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)

    async with server:
        try:
            await run_sync_loop(clipboard, store, broadcaster, shutdown_requested, interval)
        finally:
            logger.debug("Shutting down")
            await broadcaster.close()
            server.close()
