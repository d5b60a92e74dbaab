"""Message retrieval tools for the summarizer capability."""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel, Field

from ..agent.types import CapabilityConfig
from ..utils.time_resolver import get_zone, resolve_relative_range
from ..utils.timestamps import parse_timestamp
from .base import BaseTool, ToolResult, error_result, success_result

logger = logging.getLogger(__name__)

MAX_RECENT_MESSAGES = 20


def _clamp_limit(value: Optional[int], default: int = 5) -> int:
    return max(1, min(value or default, MAX_RECENT_MESSAGES))


def _local_time(timestamp: str, timezone: str) -> str:
    try:
        return parse_timestamp(timestamp).astimezone(get_zone(timezone)).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return timestamp


class RecentMessagesRequest(BaseModel):
    """Arguments for get_recent_messages."""

    limit: int = Field(default=5, description="Number of recent messages to retrieve (default 5, max 20)")


class TimeRangeRequest(BaseModel):
    """Arguments for get_messages_by_time_range."""

    start_time: Optional[str] = Field(
        default=None, description="Start time in ISO format, e.g. 2025-01-15T00:00:00.000Z"
    )
    end_time: Optional[str] = Field(
        default=None, description="End time in ISO format, e.g. 2025-01-15T23:59:59.999Z"
    )


class ShowRecentMessagesRequest(BaseModel):
    """Arguments for show_recent_messages."""

    count: int = Field(default=5, description="Number of messages to display (default 5, max 20)")


class SummarizeConversationRequest(BaseModel):
    """summarize_conversation takes no arguments."""


class RelativeTimeRequest(BaseModel):
    """Arguments for get_messages_by_relative_time."""

    time_expression: str = Field(
        ..., description="Relative period such as 'today', 'yesterday', 'this week' or 'last 3 days'"
    )


class GetRecentMessagesTool(BaseTool):
    """Fetch the latest messages of the conversation."""

    request_model = RecentMessagesRequest

    def __init__(self):
        super().__init__(
            name="get_recent_messages",
            description="Get the most recent messages from the conversation (default 5, max 20).",
        )

    async def execute(self, context: CapabilityConfig, limit: int = 5, **kwargs) -> ToolResult:
        try:
            messages = await context.storage.get_recent_messages(context.conversation_id, _clamp_limit(limit))
        except Exception as e:
            logger.error(f"get_recent_messages failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve recent messages: {e}")

        return success_result(
            messages=[message.to_dict() for message in messages],
            count=len(messages),
        )


class GetMessagesByTimeRangeTool(BaseTool):
    """Fetch messages between two timestamps."""

    request_model = TimeRangeRequest

    def __init__(self):
        super().__init__(
            name="get_messages_by_time_range",
            description=(
                "Get messages from a specific time period. Times are ISO-8601 "
                "(YYYY-MM-DDTHH:MM:SS.sssZ). Omitted bounds use the pre-calculated range, "
                "or the last 24 hours when there is none."
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
            logger.error(f"get_messages_by_time_range failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve messages: {e}")

        return success_result(
            messages=[message.to_dict() for message in messages],
            count=len(messages),
            time_range={"start": start_time, "end": end_time},
        )


class ShowRecentMessagesTool(BaseTool):
    """Return recent messages as a readable listing."""

    request_model = ShowRecentMessagesRequest

    def __init__(self):
        super().__init__(
            name="show_recent_messages",
            description="Display recent messages in a readable format with time, sender and role.",
        )

    async def execute(self, context: CapabilityConfig, count: int = 5, **kwargs) -> ToolResult:
        try:
            messages = await context.storage.get_recent_messages(context.conversation_id, _clamp_limit(count))
        except Exception as e:
            logger.error(f"show_recent_messages failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve recent messages: {e}")

        lines = [
            f"[{_local_time(message.timestamp, context.user_timezone)}] "
            f"{message.name} ({message.role}): {message.content}"
            for message in messages
        ]
        display_text = (
            f"📅 Recent messages ({len(lines)}):\n" + "\n".join(lines) if lines else "No messages found"
        )
        return success_result(formatted_messages=lines, count=len(lines), display_text=display_text)


class SummarizeConversationTool(BaseTool):
    """Return statistics and every message of the conversation."""

    request_model = SummarizeConversationRequest

    def __init__(self):
        super().__init__(
            name="summarize_conversation",
            description="Get conversation metadata (participants, counts by role and sender) and all messages.",
        )

    async def execute(self, context: CapabilityConfig, **kwargs) -> ToolResult:
        try:
            messages = await context.storage.get_all_messages(context.conversation_id)
        except Exception as e:
            logger.error(f"summarize_conversation failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve conversation: {e}")

        by_role = Counter(message.role for message in messages)
        by_name = Counter(message.name for message in messages)
        return success_result(
            total_messages=len(messages),
            conversation_id=context.conversation_id,
            oldest_message=messages[0].timestamp if messages else None,
            newest_message=messages[-1].timestamp if messages else None,
            messages_by_role=dict(by_role),
            messages_by_name=dict(by_name),
            participants=sorted(by_name),
            messages=[message.to_dict() for message in messages],
        )


class GetMessagesByRelativeTimeTool(BaseTool):
    """Fetch messages for a relative period in the user's timezone."""

    request_model = RelativeTimeRequest

    def __init__(self):
        super().__init__(
            name="get_messages_by_relative_time",
            description=(
                "Get messages for a relative period such as 'today', 'yesterday', 'this week' "
                "or 'last 3 days', computed in the user's timezone."
            ),
        )

    async def execute(self, context: CapabilityConfig, time_expression: str = "", **kwargs) -> ToolResult:
        window = resolve_relative_range(time_expression, context.user_timezone, context.now)
        try:
            messages = await context.storage.get_messages_by_time_range(
                context.conversation_id, window.start, window.end
            )
        except Exception as e:
            logger.error(f"get_messages_by_relative_time failed: {e}", exc_info=True)
            return error_result(f"Failed to retrieve messages: {e}")

        return success_result(
            messages=[message.to_dict() for message in messages],
            count=len(messages),
            time_range={"start": window.start, "end": window.end, "description": window.description},
        )


def create_summarizer_tools():
    """Tools of the summarizer capability."""
    return [
        GetRecentMessagesTool(),
        GetMessagesByTimeRangeTool(),
        ShowRecentMessagesTool(),
        SummarizeConversationTool(),
        GetMessagesByRelativeTimeTool(),
    ]
