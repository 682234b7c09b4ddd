#!/usr/bin/env python3
"""Pytest fixtures for cloudclip tests.

Provides in-memory doubles for the clipboard, the remote store and the
history view, plus a temporary socket path.
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from cloudclip.store import ClipboardEntry, StoreError

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_entries(*texts: str) -> list[ClipboardEntry]:
    """Build entries newest first from texts given newest first."""
    count = len(texts)
    return [
        ClipboardEntry(id=count - i, text=text, created_at=BASE_TIME + timedelta(seconds=count - i))
        for i, text in enumerate(texts)
    ]


class FakeClipboard:
    """ClipboardPort holding text in memory and recording writes."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.writes: list[str] = []

    async def read(self) -> str:
        return self.text

    async def write(self, text: str) -> None:
        self.writes.append(text)
        self.text = text


class FakeStore:
    """Append-only in-memory SyncStorePort with failure switches."""

    def __init__(self) -> None:
        self.entries: list[ClipboardEntry] = []
        self.inserts: list[str] = []
        self.queries: list[int] = []
        self.fail_insert = False
        self.fail_query = False

    def add(self, text: str) -> ClipboardEntry:
        entry = ClipboardEntry(
            id=len(self.entries) + 1,
            text=text,
            created_at=BASE_TIME + timedelta(seconds=len(self.entries)),
        )
        self.entries.append(entry)
        return entry

    async def insert(self, text: str) -> None:
        self.inserts.append(text)
        if self.fail_insert:
            raise StoreError("insert refused")
        self.add(text)

    async def query_newest(self, limit: int) -> list[ClipboardEntry]:
        self.queries.append(limit)
        if self.fail_query:
            raise StoreError("store unreachable")
        return list(reversed(self.entries))[:limit]


class RecordingView:
    """HistoryView that records every push."""

    def __init__(self) -> None:
        self.pushes: list[list[str]] = []

    async def push(self, items: list[str]) -> None:
        self.pushes.append(items)


@pytest.fixture
def clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def store() -> FakeStore:
    """Create an empty in-memory store."""
    return FakeStore()


@pytest.fixture
def view() -> RecordingView:
    """Create a history view that records pushes."""
    return RecordingView()


@pytest.fixture
def temp_socket_path(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary path for Unix domain socket testing."""
    socket_path = tmp_path / "test.sock"
    yield socket_path
    if socket_path.exists():
        socket_path.unlink()
