#!/usr/bin/env python3
"""Periodic scheduling of the watcher and poller loops.

Both loops run as independent asyncio tasks on a fixed cadence. A tick
is awaited before the next one is scheduled, so ticks of the same loop
never overlap. If a tick overruns one or more intervals the missed ticks
are dropped rather than queued. A tick that raises is logged and the
loop carries on with the next one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import TYPE_CHECKING

from cloudclip.constants import POLL_INTERVAL
from cloudclip.sync_handlers import local_tick, remote_tick
from cloudclip.sync_state import LocalWatchState, RemotePollState

if TYPE_CHECKING:
    from cloudclip.clipboard import ClipboardPort
    from cloudclip.history_view import HistoryView
    from cloudclip.store import SyncStorePort

logger = logging.getLogger(__name__)


async def run_periodic(
    tick: Callable[[], Awaitable[None]],
    interval: float,
    shutdown: asyncio.Event,
    name: str = "tick",
) -> None:
    """Call tick every interval seconds until shutdown is set.

    Args:
        tick: Coroutine function run once per interval.
        interval: Seconds between tick start times.
        shutdown: Event that stops the loop when set.
        name: Label used in log messages.
    """
    loop = asyncio.get_running_loop()
    next_run = loop.time()
    while not shutdown.is_set():
        try:
            await tick()
        except Exception:
            logger.exception("%s tick failed", name)

        next_run += interval
        delay = next_run - loop.time()
        if delay < 0:
            missed = int(-delay // interval) + 1
            logger.debug("%s overran, skipping %d tick(s)", name, missed)
            next_run += missed * interval
            delay = next_run - loop.time()

        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(shutdown.wait(), timeout=delay)


async def run_sync_loop(
    clipboard: ClipboardPort,
    store: SyncStorePort,
    view: HistoryView,
    shutdown: asyncio.Event,
    interval: float = POLL_INTERVAL,
) -> None:
    """Run the local watcher and remote poller until shutdown is set.

    The watcher's state is seeded from the current clipboard so content
    present at startup is not uploaded.

    Args:
        clipboard: The local clipboard.
        store: The remote store.
        view: Receiver of history pushes.
        shutdown: Event that stops both loops when set.
        interval: Seconds between ticks of each loop.
    """
    watch_state = LocalWatchState(last_text=await clipboard.read())
    poll_state = RemotePollState()

    async def watch() -> None:
        await local_tick(watch_state, clipboard, store)

    async def poll() -> None:
        await remote_tick(poll_state, clipboard, store, view)

    tasks = [
        asyncio.create_task(run_periodic(watch, interval, shutdown, "local watcher")),
        asyncio.create_task(run_periodic(poll, interval, shutdown, "remote poller")),
    ]
    try:
        await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task
