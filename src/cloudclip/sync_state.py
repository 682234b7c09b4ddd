#!/usr/bin/env python3
"""Per-loop synchronization state.

Each periodic loop owns its own "last observed" value and nothing else.
The loops never read each other's state; they are coupled only through
the OS clipboard and the remote store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class LocalWatchState:
    """State for the local clipboard watcher.

    Attributes:
        last_text: Last clipboard text the watcher observed. Seeded from
            the clipboard at startup so existing content is not uploaded.
    """

    last_text: str = ""


@dataclass
class RemotePollState:
    """State for the remote poller.

    Attributes:
        last_id: Id of the newest remote entry seen so far, or None
            before the first successful query.
    """

    last_id: Any = None
