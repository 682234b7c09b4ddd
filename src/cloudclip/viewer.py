#!/usr/bin/env python3
"""Viewer mode implementation for cloudclip.

The viewer is a minimal HistoryView living in its own process. It
connects to a running daemon over the history socket and prints the
deduplicated clipboard history every time the daemon pushes a new one.
With an entry index it instead copies that entry into the clipboard and
exits.

See viewer_retry.py for connection handling.
"""

from __future__ import annotations

import asyncio
import signal
from contextlib import suppress

import click

from cloudclip.clipboard import SystemClipboard
from cloudclip.history_view import render_history, select_entry
from cloudclip.viewer_retry import fetch_history_once, run_viewer_connection


def print_history(items: list[str]) -> None:
    """Print a rendered history block to stdout."""
    click.echo(render_history(items))
    click.echo()


async def run_viewer(socket_path: str) -> None:
    """Follow history pushes from the daemon until interrupted.

    Args:
        socket_path: Path to the daemon's Unix domain socket.
    """
    shutdown_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)

    follow = asyncio.create_task(run_viewer_connection(socket_path, print_history))
    stop = asyncio.create_task(shutdown_requested.wait())
    done, pending = await asyncio.wait({follow, stop}, return_when=asyncio.FIRST_COMPLETED)
    for task in pending:
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
    if follow in done:
        follow.result()


async def run_select(socket_path: str, index: int) -> str:
    """Copy history entry index into the clipboard.

    Args:
        socket_path: Path to the daemon's Unix domain socket.
        index: Position of the entry, 0 being the newest.

    Returns:
        The text copied.

    Raises:
        ConnectionError: If the daemon is not reachable.
        IndexError: If index is outside the history.
    """
    items = await fetch_history_once(socket_path)
    return await select_entry(SystemClipboard(), items, index)
