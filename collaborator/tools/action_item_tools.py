"""Action item tools."""

import logging
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from ..agent.types import CapabilityConfig
from ..context.roster import find_participant
from ..utils.time_resolver import parse_deadline, resolve_relative_range
from ..utils.timestamps import normalize_timestamp
from .base import BaseTool, ToolResult, error_result, success_result

logger = logging.getLogger(__name__)

ASSIGNED_BY = "AI Action Items Agent"

Priority = Literal["low", "medium", "high", "urgent"]
Status = Literal["pending", "in_progress", "completed", "cancelled"]


def resolve_assignee(config: CapabilityConfig, name: str) -> Tuple[str, Optional[str]]:
    """
    Map an assignee name to (display name, user id).

    In personal chats everything is assigned to the current user. In
    groups the roster is matched exactly, then case-insensitively;
    unmatched names keep no id.
    """
    if config.is_personal_chat and config.current_user_id:
        return config.current_user_name or name, config.current_user_id

    participant = find_participant(config.available_members, name)
    if participant is None:
        logger.debug(f"No roster match for assignee '{name}'")
        return name, None
    return participant.name, participant.id


def resolve_due_date(config: CapabilityConfig, due_date: Optional[str]) -> Optional[str]:
    """ISO dates are normalized, phrases parsed, and anything else kept as written."""
    if not due_date:
        return None
    try:
        return normalize_timestamp(due_date)
    except ValueError:
        pass
    return parse_deadline(due_date, config.user_timezone, config.now) or due_date


class AnalyzeRequest(BaseModel):
    """Arguments for analyze_for_action_items."""

    start_time: Optional[str] = Field(default=None, description="Start time in ISO format. Defaults to 24 hours ago.")
    end_time: Optional[str] = Field(default=None, description="End time in ISO format. Defaults to now.")


class CreateActionItemRequest(BaseModel):
    """Arguments for create_action_item."""

    title: str = Field(..., description="Brief title for the action item")
    description: str = Field(..., description="What needs to be done, with context")
    assigned_to: str = Field(..., description="Name of the person the item is assigned to")
    priority: Priority = Field(default="medium", description="Priority level")
    due_date: Optional[str] = Field(
        default=None,
        description="Due date in ISO format or a phrase like 'tomorrow', 'end of week', 'next monday', '3/15'",
    )


class GetActionItemsRequest(BaseModel):
    """Arguments for get_action_items."""

    assigned_to: Optional[str] = Field(default=None, description="Filter by assignee name, or 'all'")
    status: Optional[Status] = Field(default=None, description="Filter by status")


class UpdateStatusRequest(BaseModel):
    """Arguments for update_action_item_status."""

    action_item_id: int = Field(..., description="ID of the action item to update")
    new_status: Status = Field(..., description="New status")


class GetChatMembersRequest(BaseModel):
    """get_chat_members takes no arguments."""


class AnalyzeForActionItemsTool(BaseTool):
    """Fetch messages and members so the model can spot action items."""

    request_model = AnalyzeRequest

    def __init__(self):
        super().__init__(
            name="analyze_for_action_items",
            description=(
                "Retrieve conversation messages in a time range (default: the pre-calculated range "
                "or the last 24 hours) together with the member list, to identify action items."
            ),
        )

    async def execute(
        self,
        context: CapabilityConfig,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        **kwargs,
    ) -> ToolResult:
        if not start_time and not end_time:
            window = context.time_window or resolve_relative_range(
                "last 24 hours", context.user_timezone, context.now
            )
            start_time, end_time = window.start, window.end

        try:
            messages = await context.storage.get_messages_by_time_range(
                context.conversation_id, start_time, end_time
            )
        except Exception as e:
            logger.error(f"analyze_for_action_items failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve messages: {e}")

        return success_result(
            messages=[{"id": message.id, **message.to_dict()} for message in messages],
            count=len(messages),
            available_members=[{"id": m.id, "name": m.name} for m in context.available_members],
            time_range={"start": start_time, "end": end_time},
        )


class CreateActionItemTool(BaseTool):
    """Create and assign an action item."""

    request_model = CreateActionItemRequest

    def __init__(self):
        super().__init__(
            name="create_action_item",
            description="Create a new action item and assign it to a conversation member.",
        )

    async def execute(
        self,
        context: CapabilityConfig,
        title: str = "",
        description: str = "",
        assigned_to: str = "",
        priority: str = "medium",
        due_date: Optional[str] = None,
        **kwargs,
    ) -> ToolResult:
        assignee_name, assignee_id = resolve_assignee(context, assigned_to)
        parsed_due = resolve_due_date(context, due_date)

        try:
            item = await context.storage.create_action_item(
                conversation_id=context.conversation_id,
                title=title,
                description=description,
                assigned_to=assignee_name,
                assigned_to_id=assignee_id,
                assigned_by=ASSIGNED_BY,
                priority=priority,
                due_date=parsed_due,
            )
        except Exception as e:
            logger.error(f"create_action_item failed: {e}", exc_info=True)
            return error_result(f"Failed to create action item: {e}")

        return success_result(
            action_item={
                "id": item.id,
                "title": item.title,
                "description": item.description,
                "assigned_to": item.assigned_to,
                "priority": item.priority,
                "due_date": item.due_date,
                "created_at": item.created_at,
            },
            message=f'Action item "{item.title}" has been created and assigned to {item.assigned_to}',
        )


class GetActionItemsTool(BaseTool):
    """List action items for the conversation or a person."""

    request_model = GetActionItemsRequest

    def __init__(self):
        super().__init__(
            name="get_action_items",
            description="List action items, optionally filtered by assignee and status.",
        )

    async def execute(
        self,
        context: CapabilityConfig,
        assigned_to: Optional[str] = None,
        status: Optional[str] = None,
        **kwargs,
    ) -> ToolResult:
        store = context.storage
        try:
            if context.is_personal_chat and context.current_user_id:
                items = await store.get_action_items_by_user_id(context.current_user_id, status)
            elif assigned_to and assigned_to.lower() != "all":
                name, user_id = resolve_assignee(context, assigned_to)
                items = await store.get_action_items_for_user(user_id or name, status)
            else:
                items = await store.get_action_items_by_conversation(context.conversation_id)
                if status:
                    items = [item for item in items if item.status == status]
        except Exception as e:
            logger.error(f"get_action_items failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve action items: {e}")

        return success_result(action_items=[item.to_dict() for item in items], count=len(items))


class UpdateActionItemStatusTool(BaseTool):
    """Change the status of an action item."""

    request_model = UpdateStatusRequest

    def __init__(self):
        super().__init__(
            name="update_action_item_status",
            description="Update the status of an existing action item by its ID.",
        )

    async def execute(
        self,
        context: CapabilityConfig,
        action_item_id: int = 0,
        new_status: str = "",
        **kwargs,
    ) -> ToolResult:
        try:
            updated = await context.storage.update_action_item_status(
                action_item_id, new_status, updated_by=context.current_user_name
            )
        except Exception as e:
            logger.error(f"update_action_item_status failed: {e}", exc_info=True)
            return error_result(f"Failed to update action item #{action_item_id}: {e}")

        if not updated:
            return error_result(f"Failed to update action item #{action_item_id}. Item may not exist.")
        return success_result(message=f"Action item #{action_item_id} status updated to: {new_status}")


class GetChatMembersTool(BaseTool):
    """List the members of the conversation."""

    request_model = GetChatMembersRequest

    def __init__(self):
        super().__init__(
            name="get_chat_members",
            description="List the members of this conversation, for assigning action items.",
        )

    async def execute(self, context: CapabilityConfig, **kwargs) -> ToolResult:
        members: List[dict] = [{"id": m.id, "name": m.name} for m in context.available_members]
        if context.is_personal_chat and context.current_user_id and not members:
            members = [{"id": context.current_user_id, "name": context.current_user_name or "You"}]
        return success_result(members=members, count=len(members))


def create_action_item_tools():
    """Tools of the action items capability."""
    return [
        AnalyzeForActionItemsTool(),
        CreateActionItemTool(),
        GetActionItemsTool(),
        UpdateActionItemStatusTool(),
        GetChatMembersTool(),
    ]
