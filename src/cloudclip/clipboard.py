#!/usr/bin/env python3
"""System clipboard access.

The sync loops only need plain text reads and writes, so the clipboard is
reached through pyperclip, which picks a platform backend (pbcopy, xclip,
xsel, wl-clipboard, win32) at first use. Calls block, so they are pushed
to a worker thread to keep the event loop responsive.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import pyperclip

logger = logging.getLogger(__name__)


class ClipboardPort(Protocol):
    """Text clipboard used by the sync loops."""

    async def read(self) -> str: ...

    async def write(self, text: str) -> None: ...


class SystemClipboard:
    """ClipboardPort backed by the OS clipboard."""

    async def read(self) -> str:
        """Return the current clipboard text, or "" if it cannot be read."""
        try:
            text = await asyncio.to_thread(pyperclip.paste)
        except pyperclip.PyperclipException as e:
            logger.error("Failed to read clipboard: %s", e)
            return ""
        return text or ""

    async def write(self, text: str) -> None:
        """Replace the clipboard text; failures are logged."""
        try:
            await asyncio.to_thread(pyperclip.copy, text)
        except pyperclip.PyperclipException as e:
            logger.error("Failed to write clipboard: %s", e)
            return
        logger.debug("Set clipboard to %d characters", len(text))
