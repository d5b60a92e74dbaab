"""Debug commands answered locally, without the LLM."""

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from ..context.message_tracker import MessageTracker
from ..storage.conversation_store import ConversationStore
from ..storage.models import ActionItem

logger = logging.getLogger(__name__)

STATUS_EMOJI = {"completed": "✅", "in_progress": "🔄", "cancelled": "❌"}
PRIORITY_EMOJI = {"urgent": "🔥", "high": "⚡", "medium": "📍"}

HELP_TEXT = (
    "🛠️ **Debug Commands**\n\n"
    "📊 **`msg.db`** - Message database statistics for this chat\n"
    "🧹 **`clear.convo`** - Delete this chat's message history\n"
    "📋 **`action.items`** - Action items of this chat\n"
    "🗑️ **`clear.actions`** - Delete this chat's action items\n"
    "🗑️ **`clear.all.actions`** - Delete the action items of every chat\n"
    "👤 **`personal.actions`** - Action items across all chats, by user id\n"
    "📈 **`feedback.stats`** - Reaction feedback statistics\n"
    "🧹 **`feedback.clear`** - Delete all feedback records\n"
    "❓ **`help.debug`** - This help\n\n"
    "Send a command as the whole message to run it."
)


@dataclass
class DebugResponse:
    """Outcome of checking a message for a debug command."""

    is_debug_command: bool
    response: Optional[str] = None


def status_emoji(status: str) -> str:
    return STATUS_EMOJI.get(status, "⏳")


def priority_emoji(priority: str) -> str:
    return PRIORITY_EMOJI.get(priority, "🔹")


def _date(timestamp: Optional[str]) -> str:
    return timestamp[:10] if timestamp else "N/A"


def _format_item(item: ActionItem, detailed: bool = False) -> str:
    lines = [
        f"{status_emoji(item.status)} **#{item.id}** {priority_emoji(item.priority)} {item.title}",
        f"   👤 Assigned to: {item.assigned_to}",
    ]
    if detailed:
        lines.append(f"   🆔 User ID: {item.assigned_to_id or 'N/A'}")
    lines.append(f"   📝 {item.description}")
    lines.append(f"   📅 Created: {_date(item.created_at)}")
    if detailed:
        lines.append(f"   💬 Conversation: {item.conversation_id}")
    if item.due_date:
        lines.append(f"   ⏰ Due: {_date(item.due_date)}")
    return "\n".join(lines)


class DebugCommandHandler:
    """Recognizes and runs debug commands.

    A command is only recognized when it is the entire trimmed message.
    """

    def __init__(self, store: ConversationStore, tracker: MessageTracker):
        self.store = store
        self.tracker = tracker
        self._commands: Dict[str, Callable[[str], Awaitable[str]]] = {
            "msg.db": self._message_database,
            "clear.convo": self._clear_conversation,
            "action.items": self._action_items,
            "clear.actions": self._clear_action_items,
            "clear.all.actions": self._clear_all_action_items,
            "personal.actions": self._personal_action_items,
            "feedback.stats": self._feedback_stats,
            "feedback.clear": self._clear_feedback,
            "help.debug": self._help,
        }

    @property
    def commands(self) -> List[str]:
        return list(self._commands)

    def is_debug_command(self, text: Optional[str]) -> bool:
        return bool(text) and text.strip() in self._commands

    async def handle(self, text: Optional[str], conversation_key: str) -> DebugResponse:
        """
        Run text as a debug command if it is one.

        Args:
            text: Inbound message text
            conversation_key: Conversation the message came from

        Returns:
            DebugResponse; is_debug_command is False for ordinary messages
        """
        command = (text or "").strip()
        handler = self._commands.get(command)
        if handler is None:
            return DebugResponse(is_debug_command=False)

        logger.info(f"Debug command '{command}' in {conversation_key}")
        return DebugResponse(is_debug_command=True, response=await handler(conversation_key))

    async def _message_database(self, conversation_key: str) -> str:
        snapshot = await self.store.debug_snapshot(conversation_key)
        if "error" in snapshot:
            return f"❌ Could not read the message database: {snapshot['error']}"

        lines = [
            "🔍 **Database Debug Info:**",
            "",
            "📊 **Activity ID Statistics:**",
            f"- Total messages: {snapshot['total_messages']}",
            f"- Messages with IDs: {snapshot['messages_with_activity_id']}",
            f"- Coverage: {snapshot['activity_id_coverage']}%",
            "",
            f"🗄️ All conversations: {snapshot['conversation_count']} ({snapshot['all_messages']} messages)",
        ]
        recent = snapshot["recent_messages"]
        if recent:
            lines += ["", "🕒 **Recent Messages:**"]
            for message in recent:
                preview = message.content[:30] + ("..." if len(message.content) > 30 else "")
                lines.append(f'- {message.name} ({message.role}): "{preview}" [ID: {message.activity_id or "N/A"}]')
        return "\n".join(lines)

    async def _clear_conversation(self, conversation_key: str) -> str:
        deleted = await self.tracker.clear_conversation(conversation_key)
        return (
            "🧹 **Conversation Cleared!**\n\n"
            f"Deleted {deleted} stored messages and any pending history for this chat."
        )

    async def _action_items(self, conversation_key: str) -> str:
        items = await self.store.get_action_items_by_conversation(conversation_key)
        summary = await self.store.get_action_items_summary()

        lines = ["📋 **Action Items Debug Info:**", ""]
        if items:
            lines.append(f"**Action items for this conversation ({len(items)}):**")
            for item in items:
                lines += ["", _format_item(item)]
        else:
            lines.append("**No action items found for this conversation.**")
        lines += ["", "**Overall Summary:**", "```json", json.dumps(summary, indent=2), "```"]
        return "\n".join(lines)

    async def _clear_action_items(self, conversation_key: str) -> str:
        deleted = await self.store.clear_action_items(conversation_key)
        return f"🧹 **Action Items Cleared!**\n\n{deleted} action items have been removed from this conversation."

    async def _clear_all_action_items(self, conversation_key: str) -> str:
        deleted = await self.store.clear_all_action_items()
        return f"🧹 **All Action Items Cleared!**\n\n{deleted} action items have been removed from all conversations."

    async def _personal_action_items(self, conversation_key: str) -> str:
        items = await self.store.get_all_action_items()
        if not items:
            return "👤 **Personal Action Items Debug:**\n\n**No action items found across all conversations.**"

        lines = ["👤 **Personal Action Items Debug:**", "", f"**All action items ({len(items)}):**"]
        by_user: Dict[str, List[ActionItem]] = defaultdict(list)
        for item in items:
            lines += ["", _format_item(item, detailed=True)]
            by_user[item.assigned_to_id or "NO_ID"].append(item)

        lines += ["", "**Breakdown by User ID:**"]
        for user_id, grouped in by_user.items():
            lines.append(f"- **{user_id}**: {len(grouped)} action items ({grouped[0].assigned_to})")
        return "\n".join(lines)

    async def _feedback_stats(self, conversation_key: str) -> str:
        summary = await self.store.get_feedback_summary()
        records = await self.store.get_all_feedback()

        lines = [
            "📈 **Feedback Statistics**",
            "",
            f"- Total feedback records: {summary['total_feedback_records']}",
            f"- Total likes: {summary['total_likes']}",
            f"- Total dislikes: {summary['total_dislikes']}",
            f"- Like ratio: {summary['like_ratio']}",
        ]
        if summary["by_capability"]:
            lines += ["", "**By capability:**"]
            for capability, counts in summary["by_capability"].items():
                lines.append(f"- {capability}: 👍 {counts['likes']} | 👎 {counts['dislikes']}")

        if not records:
            lines += ["", "**No feedback records found.**"]
            return "\n".join(lines)

        lines += ["", "**Recent feedback (last 5):**"]
        for index, record in enumerate(records[:5], start=1):
            lines.append(f"{index}. Message {record.message_id} ({record.delegated_capability or 'direct'})")
            lines.append(f"   👍 {record.likes} | 👎 {record.dislikes}")
            if record.feedbacks:
                lines.append(f'   Comments: "{", ".join(str(entry) for entry in record.feedbacks)}"')
        return "\n".join(lines)

    async def _clear_feedback(self, conversation_key: str) -> str:
        deleted = await self.store.clear_all_feedback()
        return f"🧹 **Feedback Database Cleared**\n\nDeleted {deleted} feedback records."

    async def _help(self, conversation_key: str) -> str:
        return HELP_TEXT
