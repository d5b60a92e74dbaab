"""Tests for the conversation store."""

import asyncio
from datetime import datetime, timedelta, timezone

import aiosqlite
import pytest

from collaborator.storage.conversation_store import ConversationStore

from .conftest import FIXED_NOW


def ticking_clock(step=timedelta(seconds=1)):
    """A clock that moves forward by step on every call."""
    current = [FIXED_NOW]

    def clock():
        current[0] += step
        return current[0]

    return clock


async def drop_table(store, table):
    await store.initialize()
    async with aiosqlite.connect(store.db_path) as db:
        await db.execute(f"DROP TABLE {table}")
        await db.commit()


@pytest.mark.asyncio
async def test_insert_and_read_back_message(store):
    row_id = await store.insert_message(
        "chat-1", "user", "Hello team", timestamp="2025-01-15T10:00:00Z", name="Alice", activity_id="101"
    )
    assert row_id is not None

    messages = await store.get_all_messages("chat-1")
    assert len(messages) == 1
    assert messages[0].content == "Hello team"
    assert messages[0].name == "Alice"
    assert messages[0].timestamp == "2025-01-15T10:00:00.000Z"
    assert messages[0].activity_id == "101"


@pytest.mark.asyncio
async def test_missing_name_defaults_to_unknown(store):
    await store.insert_message("chat-1", "user", "hi")
    messages = await store.get_all_messages("chat-1")
    assert messages[0].name == "Unknown"
    assert messages[0].timestamp == "2025-01-15T17:00:00.000Z"


@pytest.mark.asyncio
async def test_time_range_is_inclusive_and_normalized(store):
    await store.insert_message("chat-1", "user", "first", timestamp="2025-01-15T10:00:00Z")
    await store.insert_message("chat-1", "user", "second", timestamp="2025-01-15T10:30:00.123456+00:00")
    await store.insert_message(
        "chat-1", "user", "third", timestamp=datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc)
    )
    await store.insert_message("chat-2", "user", "elsewhere", timestamp="2025-01-15T10:15:00Z")

    messages = await store.get_messages_by_time_range(
        "chat-1", "2025-01-15T05:00:00-05:00", "2025-01-15T10:30:00.123Z"
    )
    assert [message.content for message in messages] == ["first", "second"]


@pytest.mark.asyncio
async def test_time_range_with_invalid_bound_returns_empty(store):
    await store.insert_message("chat-1", "user", "first", timestamp="2025-01-15T10:00:00Z")
    assert await store.get_messages_by_time_range("chat-1", "not a time", None) == []


@pytest.mark.asyncio
async def test_recent_messages_are_oldest_first(store):
    for i in range(5):
        await store.insert_message("chat-1", "user", f"Message {i}", timestamp=f"2025-01-15T10:0{i}:00Z")

    messages = await store.get_recent_messages("chat-1", limit=3)
    assert [message.content for message in messages] == ["Message 2", "Message 3", "Message 4"]


@pytest.mark.asyncio
async def test_clear_conversation_only_touches_one_chat(store):
    await store.insert_message("chat-1", "user", "a")
    await store.insert_message("chat-2", "user", "b")

    assert await store.clear_conversation("chat-1") == 1
    assert await store.get_all_messages("chat-1") == []
    assert len(await store.get_all_messages("chat-2")) == 1


@pytest.mark.asyncio
async def test_debug_snapshot_reports_activity_coverage(store):
    await store.insert_message("chat-1", "user", "with id", activity_id="1")
    await store.insert_message("chat-1", "user", "without id")
    await store.insert_message("chat-2", "user", "other chat")

    snapshot = await store.debug_snapshot("chat-1")
    assert snapshot["total_messages"] == 2
    assert snapshot["messages_with_activity_id"] == 1
    assert snapshot["activity_id_coverage"] == 50.0
    assert snapshot["all_messages"] == 3
    assert snapshot["conversation_count"] == 2
    assert len(snapshot["recent_messages"]) == 2


@pytest.mark.asyncio
async def test_create_and_query_action_items(store):
    item = await store.create_action_item(
        conversation_id="chat-1",
        title="Send budget",
        description="Send the Q1 budget to finance",
        assigned_to="Alice",
        assigned_to_id="u-alice",
        assigned_by="AI Action Items Agent",
        priority="high",
        due_date="2025-01-17T23:59:59.999Z",
    )
    assert item.id is not None
    assert item.status == "pending"

    assert [i.title for i in await store.get_action_items_by_conversation("chat-1")] == ["Send budget"]
    assert len(await store.get_action_items_for_user("Alice")) == 1
    assert len(await store.get_action_items_for_user("u-alice")) == 1
    assert len(await store.get_action_items_by_user_id("u-alice", status="completed")) == 0

    fetched = await store.get_action_item_by_id(item.id)
    assert fetched.priority == "high"
    assert fetched.due_date == "2025-01-17T23:59:59.999Z"


@pytest.mark.asyncio
async def test_create_action_item_rejects_unknown_priority(store):
    with pytest.raises(ValueError):
        await store.create_action_item(
            conversation_id="chat-1",
            title="x",
            description="y",
            assigned_to="Bob",
            assigned_by="AI Action Items Agent",
            priority="whenever",
        )


@pytest.mark.asyncio
async def test_update_status_of_missing_item_returns_false(store):
    assert await store.update_action_item_status(999, "completed") is False
    assert await store.get_all_action_items() == []


@pytest.mark.asyncio
async def test_update_status(store):
    item = await store.create_action_item(
        conversation_id="chat-1", title="x", description="y", assigned_to="Bob", assigned_by="AI Action Items Agent"
    )
    assert await store.update_action_item_status(item.id, "in_progress") is True
    assert await store.update_action_item_status(item.id, "bogus") is False
    assert (await store.get_action_item_by_id(item.id)).status == "in_progress"

    summary = await store.get_action_items_summary()
    assert summary == {"total": 1, "by_status": {"in_progress": 1}, "by_priority": {"medium": 1}}


@pytest.mark.asyncio
async def test_status_update_moves_updated_at(tmp_path):
    store = ConversationStore(str(tmp_path / "ticking.db"), clock=ticking_clock())
    item = await store.create_action_item(
        conversation_id="chat-1", title="x", description="y", assigned_to="Bob", assigned_by="Ada"
    )

    assert await store.update_action_item_status(item.id, "completed") is True

    updated = await store.get_action_item_by_id(item.id)
    assert updated.status == "completed"
    assert updated.created_at == item.created_at
    assert updated.updated_at > item.updated_at


@pytest.mark.asyncio
async def test_feedback_initialization_is_idempotent(store):
    assert await store.initialize_feedback_record("chat-1:42") is True
    assert await store.initialize_feedback_record("chat-1:42") is False

    record = await store.get_feedback_by_message_id("chat-1:42")
    assert record.likes == 0
    assert record.dislikes == 0


@pytest.mark.asyncio
async def test_update_feedback_counts_reactions(store):
    await store.initialize_feedback_record("chat-1:42")

    assert await store.update_feedback("chat-1:42", "like") is True
    assert await store.update_feedback("chat-1:42", "dislike", "too long") is True
    assert await store.update_feedback("chat-1:42", "meh") is False
    assert await store.update_feedback("chat-1:missing", "like") is False

    record = await store.get_feedback_by_message_id("chat-1:42")
    assert (record.likes, record.dislikes) == (1, 1)
    assert record.feedbacks == ["too long"]


@pytest.mark.asyncio
async def test_delegated_capability_survives_initialization(store):
    await store.store_delegated_capability("chat-1:7", "search")
    assert await store.initialize_feedback_record("chat-1:7") is False
    await store.update_feedback("chat-1:7", "like")

    record = await store.get_feedback_by_message_id("chat-1:7")
    assert record.delegated_capability == "search"
    assert record.likes == 1

    summary = await store.get_feedback_summary()
    assert summary["total_feedback_records"] == 1
    assert summary["total_likes"] == 1
    assert summary["like_ratio"] == 1.0
    assert summary["by_capability"] == {"search": {"likes": 1, "dislikes": 0}}

    assert await store.clear_all_feedback() == 1
    assert await store.get_all_feedback() == []


@pytest.mark.asyncio
async def test_concurrent_feedback_entries_are_all_kept(store):
    await store.initialize_feedback_record("chat-1:50")

    results = await asyncio.gather(
        store.update_feedback("chat-1:50", "like", "clear"),
        store.update_feedback("chat-1:50", "like", "useful"),
        store.update_feedback("chat-1:50", "dislike", "too long"),
    )

    assert results == [True, True, True]
    record = await store.get_feedback_by_message_id("chat-1:50")
    assert (record.likes, record.dislikes) == (2, 1)
    assert sorted(record.feedbacks) == ["clear", "too long", "useful"]


@pytest.mark.asyncio
async def test_feedback_writes_report_failure_instead_of_raising(store):
    await drop_table(store, "feedback")

    assert await store.store_delegated_capability("chat-1:1", "search") is False
    assert await store.initialize_feedback_record("chat-1:1") is False
    assert await store.update_feedback("chat-1:1", "like") is False
    assert await store.clear_all_feedback() == 0


@pytest.mark.asyncio
async def test_message_and_action_item_writes_report_failure(store):
    await drop_table(store, "messages")
    await drop_table(store, "action_items")

    assert await store.insert_message("chat-1", "user", "hi") is None
    assert await store.clear_conversation("chat-1") == 0
    assert await store.clear_action_items("chat-1") == 0
    assert await store.clear_all_action_items() == 0
