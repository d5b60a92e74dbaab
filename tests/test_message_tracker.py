"""Tests for message tracking and flushing."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from collaborator.context.message_tracker import MessageTracker

from .conftest import FIXED_NOW


def make_tracker(store, indexer=None):
    return MessageTracker(store, clock=lambda: FIXED_NOW, indexer=indexer)


def track_exchange(tracker, key, is_personal):
    event = SimpleNamespace(is_personal=is_personal) if is_personal is not None else None
    tracker.add_message_to_tracking(key, "user", "Can someone send the budget?", source_event=event, name="Alice")
    tracker.add_message_to_tracking(key, "assistant", "Sure, here is a summary.", activity_id="900")
    tracker.add_message_to_tracking(key, "user", "Thanks!", source_event=event, name="Bob")


@pytest.mark.asyncio
async def test_group_flush_keeps_only_user_messages(store):
    tracker = make_tracker(store)
    track_exchange(tracker, "group-1", is_personal=False)

    assert await tracker.save_messages_directly("group-1") == 2
    messages = await store.get_all_messages("group-1")
    assert [message.role for message in messages] == ["user", "user"]
    assert tracker.get_tracked_messages("group-1") == []


@pytest.mark.asyncio
async def test_personal_flush_keeps_every_turn(store):
    tracker = make_tracker(store)
    track_exchange(tracker, "dm-1", is_personal=True)

    assert await tracker.save_messages_directly("dm-1") == 3
    messages = await store.get_all_messages("dm-1")
    assert [message.role for message in messages] == ["user", "assistant", "user"]
    assert messages[1].activity_id == "900"


@pytest.mark.asyncio
async def test_unknown_chat_type_is_treated_as_group(store):
    tracker = make_tracker(store)
    track_exchange(tracker, "chat-x", is_personal=None)

    assert tracker.is_personal_chat("chat-x") is None
    assert await tracker.save_messages_directly("chat-x") == 2


def test_default_names(store):
    tracker = make_tracker(store)
    user = tracker.add_message_to_tracking("chat-1", "user", "hi")
    assistant = tracker.add_message_to_tracking("chat-1", "assistant", "hello")

    assert user.name == "Unknown User"
    assert assistant.name == "Assistant"
    assert user.timestamp == "2025-01-15T17:00:00.000Z"


@pytest.mark.asyncio
async def test_flush_with_nothing_tracked(store):
    assert await make_tracker(store).save_messages_directly("empty") == 0


@pytest.mark.asyncio
async def test_flush_hands_saved_messages_to_indexer(store):
    indexer = SimpleNamespace(index_messages=AsyncMock())
    tracker = make_tracker(store, indexer=indexer)
    track_exchange(tracker, "group-1", is_personal=False)

    await tracker.save_messages_directly("group-1")

    indexer.index_messages.assert_awaited_once()
    key, messages = indexer.index_messages.await_args.args
    assert key == "group-1"
    assert [message.content for message in messages] == ["Can someone send the budget?", "Thanks!"]


@pytest.mark.asyncio
async def test_indexer_failure_does_not_lose_messages(store):
    indexer = SimpleNamespace(index_messages=AsyncMock(side_effect=RuntimeError("index down")))
    tracker = make_tracker(store, indexer=indexer)
    track_exchange(tracker, "dm-1", is_personal=True)

    assert await tracker.save_messages_directly("dm-1") == 3
    assert len(await store.get_all_messages("dm-1")) == 3


@pytest.mark.asyncio
async def test_clear_conversation_drops_stored_and_pending(store):
    tracker = make_tracker(store)
    await store.insert_message("dm-1", "user", "old")
    tracker.add_message_to_tracking("dm-1", "user", "pending", source_event=SimpleNamespace(is_personal=True))

    assert await tracker.clear_conversation("dm-1") == 1
    assert tracker.get_tracked_messages("dm-1") == []
    assert tracker.is_personal_chat("dm-1") is None
