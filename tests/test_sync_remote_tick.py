#!/usr/bin/env python3
"""
Tests for the remote poller tick and clipboard priming.

Tests idempotent re-polls, the feedback-loop guard on clipboard writes,
history pushes and store failure handling.
"""
import pytest

from conftest import FakeClipboard, FakeStore, RecordingView
from cloudclip.sync_handlers import prime_clipboard, remote_tick
from cloudclip.sync_state import RemotePollState


@pytest.mark.asyncio
async def test_remote_tick_applies_new_entry(
    clipboard: FakeClipboard, store: FakeStore, view: RecordingView
) -> None:
    """Test a new top entry is written to the clipboard and history is pushed."""
    state = RemotePollState()
    store.add("older")
    entry = store.add("from phone")
    clipboard.text = "local"

    await remote_tick(state, clipboard, store, view)

    assert state.last_id == entry.id
    assert clipboard.writes == ["from phone"]
    assert view.pushes == [["from phone", "older"]]


@pytest.mark.asyncio
async def test_remote_tick_same_id_is_noop(
    clipboard: FakeClipboard, store: FakeStore, view: RecordingView
) -> None:
    """Test a second tick with the same top id writes and pushes nothing."""
    state = RemotePollState()
    store.add("one")
    await remote_tick(state, clipboard, store, view)
    clipboard.writes.clear()
    view.pushes.clear()

    clipboard.text = "user changed it"
    await remote_tick(state, clipboard, store, view)

    assert clipboard.writes == []
    assert view.pushes == []


@pytest.mark.asyncio
async def test_remote_tick_skips_write_when_clipboard_matches(
    clipboard: FakeClipboard, store: FakeStore, view: RecordingView
) -> None:
    """Test our own upload coming back is not written to the clipboard again."""
    state = RemotePollState(last_id=1)
    store.add("first")
    store.add("mine")
    clipboard.text = "mine"

    await remote_tick(state, clipboard, store, view)

    assert state.last_id == 2
    assert clipboard.writes == []
    assert view.pushes == [["mine", "first"]]


@pytest.mark.asyncio
async def test_remote_tick_empty_store(
    clipboard: FakeClipboard, store: FakeStore, view: RecordingView
) -> None:
    """Test an empty table leaves state, clipboard and view untouched."""
    state = RemotePollState()
    await remote_tick(state, clipboard, store, view)
    assert state.last_id is None
    assert clipboard.writes == []
    assert view.pushes == []


@pytest.mark.asyncio
async def test_remote_tick_query_failure(
    clipboard: FakeClipboard,
    store: FakeStore,
    view: RecordingView,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test a failed poll is logged and the next tick still applies the entry."""
    state = RemotePollState()
    store.add("pending")
    store.fail_query = True

    await remote_tick(state, clipboard, store, view)
    assert state.last_id is None
    assert view.pushes == []
    assert "Failed to poll store" in caplog.text

    store.fail_query = False
    await remote_tick(state, clipboard, store, view)
    assert clipboard.writes == ["pending"]


@pytest.mark.asyncio
async def test_remote_tick_polls_single_newest(
    clipboard: FakeClipboard, store: FakeStore, view: RecordingView
) -> None:
    """Test the poll itself asks for one row only."""
    state = RemotePollState()
    await remote_tick(state, clipboard, store, view)
    assert store.queries == [1]


@pytest.mark.asyncio
async def test_prime_clipboard_writes_newest(
    clipboard: FakeClipboard, store: FakeStore
) -> None:
    """Test startup priming copies the newest remote text."""
    store.add("old")
    store.add("newest")
    clipboard.text = "stale"
    await prime_clipboard(clipboard, store)
    assert clipboard.writes == ["newest"]


@pytest.mark.asyncio
async def test_prime_clipboard_skips_matching(
    clipboard: FakeClipboard, store: FakeStore
) -> None:
    """Test priming does not rewrite a clipboard that already matches."""
    store.add("same")
    clipboard.text = "same"
    await prime_clipboard(clipboard, store)
    assert clipboard.writes == []


@pytest.mark.asyncio
async def test_prime_clipboard_no_data(clipboard: FakeClipboard, store: FakeStore) -> None:
    """Test priming with an unreachable store leaves the clipboard alone."""
    store.add("unreachable")
    store.fail_query = True
    clipboard.text = "local"
    await prime_clipboard(clipboard, store)
    assert clipboard.writes == []
