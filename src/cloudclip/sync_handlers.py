#!/usr/bin/env python3
"""Clipboard synchronization tick handlers.

This module provides one tick of each periodic loop plus the startup
bootstrap:
- local_tick: upload a local clipboard change to the store
- remote_tick: apply a new remote entry to the local clipboard and
  push the refreshed history to viewers
- prime_clipboard: copy the newest remote text into the clipboard once
  at startup

Store failures are logged here and never reach the loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cloudclip.history import fetch_history
from cloudclip.store import StoreError

if TYPE_CHECKING:
    from cloudclip.clipboard import ClipboardPort
    from cloudclip.history_view import HistoryView
    from cloudclip.store import SyncStorePort
    from cloudclip.sync_state import LocalWatchState, RemotePollState

logger = logging.getLogger(__name__)


async def local_tick(
    state: LocalWatchState,
    clipboard: ClipboardPort,
    store: SyncStorePort,
) -> None:
    """Upload the clipboard text if it changed since the last tick.

    The text is recorded as observed before the insert, so a failed
    insert is not retried on the next tick.

    Args:
        state: The watcher's own state.
        clipboard: The local clipboard.
        store: The remote store.
    """
    text = await clipboard.read()
    if not text:
        return
    if text == state.last_text:
        return

    state.last_text = text
    try:
        await store.insert(text)
    except StoreError as e:
        logger.error("Failed to upload clipboard change: %s", e)
        return
    logger.debug("Uploaded %d characters", len(text))


async def remote_tick(
    state: RemotePollState,
    clipboard: ClipboardPort,
    store: SyncStorePort,
    view: HistoryView,
) -> None:
    """Apply the newest remote entry if it is new to this poller.

    Writes to the clipboard only when its text differs from the current
    clipboard content, so our own uploads are not written back.

    Args:
        state: The poller's own state.
        clipboard: The local clipboard.
        store: The remote store.
        view: Receiver of the refreshed history.
    """
    try:
        entries = await store.query_newest(1)
    except StoreError as e:
        logger.error("Failed to poll store: %s", e)
        return
    if not entries:
        return

    latest = entries[0]
    if latest.id == state.last_id:
        return
    state.last_id = latest.id

    if await clipboard.read() != latest.text:
        await clipboard.write(latest.text)
        logger.debug("Applied remote entry %s to clipboard", latest.id)

    history = await fetch_history(store)
    await view.push(history)


async def prime_clipboard(clipboard: ClipboardPort, store: SyncStorePort) -> None:
    """Copy the newest remote text into the clipboard at startup.

    Args:
        clipboard: The local clipboard.
        store: The remote store.
    """
    history = await fetch_history(store)
    if not history:
        return
    if await clipboard.read() != history[0]:
        await clipboard.write(history[0])
        logger.debug("Primed clipboard from store")
