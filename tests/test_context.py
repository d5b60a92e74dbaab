"""Tests for conversation context, roster normalization and the registry."""

from types import SimpleNamespace

import pytest

from collaborator.context import ConversationContext, ConversationContextRegistry, Participant, normalize_participants
from collaborator.context.roster import find_participant


def test_normalize_participants_uses_name_and_id_fallbacks():
    raw = [
        {"id": "1", "name": "Alice"},
        {"aadObjectId": "2", "givenName": "Bob"},
        {"user_id": "3", "display_name": "Carol"},
        SimpleNamespace(id="4", first_name="Dan"),
        {"userId": "5", "userPrincipalName": "erin@example.com"},
    ]
    participants = normalize_participants(raw)
    assert [(p.id, p.name) for p in participants] == [
        ("1", "Alice"),
        ("2", "Bob"),
        ("3", "Carol"),
        ("4", "Dan"),
        ("5", "erin@example.com"),
    ]


def test_normalize_participants_drops_nameless_and_duplicates():
    raw = [
        {"id": "1", "name": "Alice"},
        {"id": "1", "name": "Alice (again)"},
        {"id": "2"},
        {"name": "Guest"},
        {"name": "guest"},
    ]
    participants = normalize_participants(raw)
    assert [p.name for p in participants] == ["Alice", "Guest"]
    assert participants[1].id == "unknown"


def test_normalize_participants_passes_participants_through():
    alice = Participant(id="1", name="Alice")
    assert normalize_participants([alice, alice]) == [alice]
    assert normalize_participants(None) == []


def test_find_participant_prefers_exact_match():
    roster = [Participant(id="1", name="alice"), Participant(id="2", name="Alice")]
    assert find_participant(roster, "Alice").id == "2"
    assert find_participant(roster, "ALICE").id == "1"
    assert find_participant(roster, "Zed") is None


@pytest.mark.asyncio
async def test_registry_releases_context_after_block():
    registry = ConversationContextRegistry()
    context = ConversationContext(conversation_id="chat-1")

    async with registry.open(context) as active:
        assert active is context
        assert "chat-1" in registry
        assert registry.get("chat-1") is context

    assert "chat-1" not in registry
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_registry_releases_context_on_error():
    registry = ConversationContextRegistry()

    with pytest.raises(RuntimeError):
        async with registry.open(ConversationContext(conversation_id="chat-1")):
            raise RuntimeError("boom")

    assert registry.get("chat-1") is None


@pytest.mark.asyncio
async def test_overlapping_events_keep_the_newer_context():
    registry = ConversationContextRegistry()
    first = ConversationContext(conversation_id="chat-1", user_id="u1")
    second = ConversationContext(conversation_id="chat-1", user_id="u2")

    first_block = registry.open(first)
    await first_block.__aenter__()
    async with registry.open(second):
        await first_block.__aexit__(None, None, None)
        assert registry.get("chat-1") is second

    assert registry.get("chat-1") is None


def test_personal_context_needs_user_identity():
    assert ConversationContext(conversation_id="dm", is_personal=True, user_id="u1").has_user_identity
    assert not ConversationContext(conversation_id="dm", is_personal=True).has_user_identity
