#!/usr/bin/env python3
"""History view contract and plain-text rendering.

A history view receives the deduplicated, newest-first list of recent
clipboard texts whenever the remote poller sees a new top entry, and
once on request. Selecting an entry copies it back to the clipboard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cloudclip.clipboard import ClipboardPort

EMPTY_HISTORY = "No copied text yet"


class HistoryView(Protocol):
    """Receiver of history pushes."""

    async def push(self, items: list[str]) -> None: ...


def render_history(items: list[str]) -> str:
    """Render history as numbered lines, newest first.

    Line breaks inside an entry are shown as a return symbol so each
    entry stays on one line.

    Args:
        items: Distinct texts, newest first.

    Returns:
        The rendered text, or EMPTY_HISTORY for an empty list.
    """
    if not items:
        return EMPTY_HISTORY
    width = len(str(len(items)))
    lines = []
    for index, text in enumerate(items):
        flat = text.replace("\r\n", "\n").replace("\n", " ↵ ")
        lines.append(f"{index:>{width}}  {flat}")
    return "\n".join(lines)


async def select_entry(clipboard: ClipboardPort, items: list[str], index: int) -> str:
    """Copy one history entry into the clipboard.

    Args:
        clipboard: The local clipboard.
        items: History as last received.
        index: Position of the entry, 0 being the newest.

    Returns:
        The text written to the clipboard.

    Raises:
        IndexError: If index is outside the history.
    """
    if not 0 <= index < len(items):
        raise IndexError(f"No history entry {index} (have {len(items)})")
    text = items[index]
    await clipboard.write(text)
    return text
