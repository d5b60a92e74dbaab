"""Tests for the action item tools."""

import json

import pytest

from collaborator.agent.types import CapabilityConfig
from collaborator.context.models import Participant
from collaborator.tools.action_item_tools import (
    ASSIGNED_BY,
    AnalyzeForActionItemsTool,
    CreateActionItemTool,
    GetActionItemsTool,
    GetChatMembersTool,
    UpdateActionItemStatusTool,
    resolve_assignee,
    resolve_due_date,
)

from .conftest import FIXED_NOW

ROSTER = [Participant(id="u-alice", name="Alice Smith"), Participant(id="u-bob", name="Bob")]


def group_config(store, **overrides):
    values = dict(conversation_id="group-1", storage=store, available_members=list(ROSTER), now=FIXED_NOW)
    values.update(overrides)
    return CapabilityConfig(**values)


def personal_config(store):
    return CapabilityConfig(
        conversation_id="dm-1",
        storage=store,
        is_personal_chat=True,
        current_user_id="u-carol",
        current_user_name="Carol",
        now=FIXED_NOW,
    )


def payload(result):
    return json.loads(result.message if result.success else result.error)


def test_resolve_assignee_matches_roster_case_insensitively(store):
    assert resolve_assignee(group_config(store), "alice smith") == ("Alice Smith", "u-alice")
    assert resolve_assignee(group_config(store), "Mallory") == ("Mallory", None)


def test_resolve_assignee_in_personal_chat_is_current_user(store):
    assert resolve_assignee(personal_config(store), "whoever") == ("Carol", "u-carol")


def test_resolve_due_date(store):
    config = group_config(store)
    assert resolve_due_date(config, "2025-02-01T12:00:00Z") == "2025-02-01T12:00:00.000Z"
    assert resolve_due_date(config, "friday") == "2025-01-17T23:59:59.999Z"
    assert resolve_due_date(config, "after the launch") == "after the launch"
    assert resolve_due_date(config, None) is None


@pytest.mark.asyncio
async def test_create_action_item_assigns_roster_member(store):
    result = await CreateActionItemTool().execute(
        group_config(store),
        title="Send budget",
        description="Send the Q1 budget to finance",
        assigned_to="alice smith",
        priority="high",
        due_date="tomorrow",
    )
    body = payload(result)
    assert body["status"] == "success"
    assert body["message"] == 'Action item "Send budget" has been created and assigned to Alice Smith'
    assert body["action_item"]["due_date"] == "2025-01-16T23:59:59.999Z"

    stored = await store.get_action_items_by_user_id("u-alice")
    assert len(stored) == 1
    assert stored[0].assigned_by == ASSIGNED_BY
    assert stored[0].conversation_id == "group-1"


@pytest.mark.asyncio
async def test_personal_items_are_listed_across_conversations(store):
    await store.create_action_item(
        conversation_id="group-9", title="Other chat", description="d",
        assigned_to="Carol", assigned_to_id="u-carol", assigned_by=ASSIGNED_BY,
    )
    await CreateActionItemTool().execute(
        personal_config(store), title="Book flights", description="d", assigned_to="me"
    )

    body = payload(await GetActionItemsTool().execute(personal_config(store)))
    assert body["count"] == 2
    assert {item["title"] for item in body["action_items"]} == {"Other chat", "Book flights"}


@pytest.mark.asyncio
async def test_get_action_items_filters(store):
    config = group_config(store)
    await CreateActionItemTool().execute(config, title="A", description="d", assigned_to="Alice Smith")
    await CreateActionItemTool().execute(config, title="B", description="d", assigned_to="Bob")

    by_person = payload(await GetActionItemsTool().execute(config, assigned_to="bob"))
    assert [item["title"] for item in by_person["action_items"]] == ["B"]

    everyone = payload(await GetActionItemsTool().execute(config, assigned_to="all", status="pending"))
    assert everyone["count"] == 2


@pytest.mark.asyncio
async def test_update_missing_item_reports_error(store):
    result = await UpdateActionItemStatusTool().execute(group_config(store), action_item_id=404, new_status="completed")
    assert not result.success
    assert payload(result) == {
        "status": "error",
        "message": "Failed to update action item #404. Item may not exist.",
    }


@pytest.mark.asyncio
async def test_update_existing_item(store):
    created = payload(
        await CreateActionItemTool().execute(group_config(store), title="A", description="d", assigned_to="Bob")
    )
    item_id = created["action_item"]["id"]

    result = await UpdateActionItemStatusTool().execute(group_config(store), action_item_id=item_id, new_status="completed")
    assert payload(result)["message"] == f"Action item #{item_id} status updated to: completed"


@pytest.mark.asyncio
async def test_analyze_returns_messages_with_members(store):
    await store.insert_message("group-1", "user", "Bob will fix the build", timestamp="2025-01-15T12:00:00Z", name="Alice Smith")
    body = payload(await AnalyzeForActionItemsTool().execute(group_config(store)))
    assert body["count"] == 1
    assert body["messages"][0]["id"] == 1
    assert body["available_members"] == [{"id": "u-alice", "name": "Alice Smith"}, {"id": "u-bob", "name": "Bob"}]


@pytest.mark.asyncio
async def test_chat_members_in_personal_chat_default_to_user(store):
    body = payload(await GetChatMembersTool().execute(personal_config(store)))
    assert body["members"] == [{"id": "u-carol", "name": "Carol"}]
