"""Tests for reaction feedback."""

import pytest

from collaborator.agent.feedback import FeedbackLedger, feedback_key


def test_feedback_key_includes_chat():
    assert feedback_key("-100123", 42) == "-100123:42"


@pytest.mark.asyncio
async def test_delegation_then_reactions(store):
    ledger = FeedbackLedger(store)
    key = feedback_key("chat-1", 10)

    await ledger.record_delegation(key, "search")
    assert await ledger.record_reaction(key, "like")
    assert await ledger.record_reaction(key, "dislike")
    assert await ledger.record_reaction(key, "like")

    record = await store.get_feedback_by_message_id(key)
    assert (record.likes, record.dislikes) == (2, 1)
    assert record.delegated_capability == "search"


@pytest.mark.asyncio
async def test_reaction_on_message_the_assistant_never_sent_is_ignored(store):
    ledger = FeedbackLedger(store)

    assert not await ledger.record_reaction("chat-1:11", "dislike")

    assert await store.get_feedback_by_message_id("chat-1:11") is None
    summary = await ledger.summary()
    assert summary["total_feedback_records"] == 0
    assert summary["by_capability"] == {}


@pytest.mark.asyncio
async def test_direct_answer_reactions_count_as_direct(store):
    ledger = FeedbackLedger(store)
    assert await ledger.record_delegation("chat-1:12", None)

    assert await ledger.record_reaction("chat-1:12", "dislike")

    record = await store.get_feedback_by_message_id("chat-1:12")
    assert record.dislikes == 1
    assert record.delegated_capability is None


@pytest.mark.asyncio
async def test_summary_counts(store):
    ledger = FeedbackLedger(store)
    await ledger.record_delegation("chat-1:1", "summarizer")
    await ledger.record_delegation("chat-1:2", None)
    await ledger.record_reaction("chat-1:1", "like")
    await ledger.record_reaction("chat-1:2", "dislike")
    await ledger.record_reaction("chat-1:3", "dislike")

    summary = await ledger.summary()
    assert summary["total_feedback_records"] == 2
    assert summary["total_likes"] == 1
    assert summary["total_dislikes"] == 1
    assert summary["by_capability"] == {
        "summarizer": {"likes": 1, "dislikes": 0},
        "direct": {"likes": 0, "dislikes": 1},
    }


@pytest.mark.asyncio
async def test_unknown_reaction_is_ignored(store):
    ledger = FeedbackLedger(store)
    await ledger.record_delegation("chat-1:3", "search")
    assert not await ledger.record_reaction("chat-1:3", "shrug")
