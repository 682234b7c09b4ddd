#!/usr/bin/env python3
"""Remote clipboard store.

The store is an append-only table of timestamped text entries. The sync
loops only ever insert a row or ask for the newest rows, so the port
exposes exactly those two operations:

- insert(text): append one entry; id and created_at are assigned remotely
- query_newest(limit): newest entries first, ties broken by id

SupabaseStore talks to a hosted Postgres table through the async supabase
client. NullStore is used when no credentials are configured; it accepts
inserts silently and always reports an empty table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import acreate_client

if TYPE_CHECKING:
    from supabase import AsyncClient

    from cloudclip.config import StoreConfig

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """
    Exception raised when the remote store cannot be reached or queried.

    Wraps client, transport and row decoding failures so callers only
    need to handle a single type at the call site.
    """

    pass


@dataclass(frozen=True)
class ClipboardEntry:
    """One immutable row of the remote clipboard table.

    Attributes:
        id: Store-assigned identifier, ordered consistently with created_at.
        text: The copied text.
        created_at: Timestamp assigned by the store at insert time.
    """

    id: Any
    text: str
    created_at: datetime


class SyncStorePort(Protocol):
    """Operations the sync loops need from the remote store."""

    async def insert(self, text: str) -> None: ...

    async def query_newest(self, limit: int) -> list[ClipboardEntry]: ...


def parse_entry(row: dict[str, Any]) -> ClipboardEntry:
    """Convert a raw table row into a ClipboardEntry.

    Args:
        row: Mapping with id, text and created_at keys.

    Returns:
        The decoded entry.

    Raises:
        StoreError: If a field is missing or has the wrong type.
    """
    try:
        text = row["text"]
        if not isinstance(text, str):
            raise TypeError(f"text is {type(text).__name__}, expected str")
        created_at = row["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        return ClipboardEntry(id=row["id"], text=text, created_at=created_at)
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Malformed row {row!r}: {e}") from e


class SupabaseStore:
    """SyncStorePort backed by a Supabase (PostgREST) table."""

    def __init__(self, client: AsyncClient, table: str) -> None:
        self.client = client
        self.table = table

    async def insert(self, text: str) -> None:
        """Append one entry holding text.

        Raises:
            StoreError: If the request fails.
        """
        try:
            await self.client.table(self.table).insert({"text": text}).execute()
        except (APIError, httpx.HTTPError) as e:
            raise StoreError(f"Insert into {self.table} failed: {e}") from e

    async def query_newest(self, limit: int) -> list[ClipboardEntry]:
        """Return up to limit entries, newest first.

        Raises:
            StoreError: If the request fails or a row cannot be decoded.
        """
        try:
            response = await (
                self.client.table(self.table)
                .select("id, text, created_at")
                .order("created_at", desc=True)
                .order("id", desc=True)
                .limit(limit)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError(f"Query on {self.table} failed: {e}") from e
        return [parse_entry(row) for row in response.data or []]


class NullStore:
    """SyncStorePort used when the store is not configured."""

    async def insert(self, text: str) -> None:
        pass

    async def query_newest(self, limit: int) -> list[ClipboardEntry]:
        return []


async def create_store(config: StoreConfig | None) -> SupabaseStore | NullStore:
    """Create the store for the given configuration.

    Returns a NullStore when config is None or the client cannot be
    created, so the daemon keeps watching the local clipboard.

    Args:
        config: Store settings, or None when credentials are missing.

    Returns:
        A SupabaseStore, or a NullStore in degraded mode.
    """
    if config is None:
        return NullStore()
    try:
        client = await acreate_client(config.url, config.key)
    except Exception as e:
        logger.error("Failed to initialize store client: %s", e)
        return NullStore()
    logger.debug("Store client initialized for table %s", config.table)
    return SupabaseStore(client, config.table)
