#!/usr/bin/env python3
"""History view of the remote clipboard table.

The table keeps every copy, so the same text shows up many times. The
history shown to viewers is a projection of the newest FETCH_LIMIT rows:
one line per distinct text, placed at that text's newest occurrence,
newest first, capped at RESULT_LIMIT. The store itself is never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from cloudclip.constants import FETCH_LIMIT, RESULT_LIMIT
from cloudclip.store import StoreError

if TYPE_CHECKING:
    from cloudclip.store import ClipboardEntry, SyncStorePort

logger = logging.getLogger(__name__)


def dedupe_texts(
    entries: Iterable[ClipboardEntry], limit: int = RESULT_LIMIT
) -> list[str]:
    """Keep the newest occurrence of each distinct text.

    Args:
        entries: Entries ordered newest first.
        limit: Maximum number of texts to return.

    Returns:
        Distinct texts, newest first, at most limit long.
    """
    seen: set[str] = set()
    texts: list[str] = []
    for entry in entries:
        if len(texts) >= limit:
            break
        if entry.text in seen:
            continue
        seen.add(entry.text)
        texts.append(entry.text)
    return texts


async def fetch_history(store: SyncStorePort) -> list[str]:
    """Fetch the deduplicated history from the store.

    An empty list means "no data" and may also be returned when the
    store could not be queried.

    Args:
        store: The remote store.

    Returns:
        Distinct texts, newest first, at most RESULT_LIMIT long.
    """
    try:
        entries = await store.query_newest(FETCH_LIMIT)
    except StoreError as e:
        logger.error("History fetch failed: %s", e)
        return []
    history = dedupe_texts(entries, RESULT_LIMIT)
    logger.debug("Fetched and deduplicated %d items", len(history))
    return history
