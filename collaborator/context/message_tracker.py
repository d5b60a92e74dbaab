"""Per-conversation buffering of messages until the end of an event."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..storage.conversation_store import ConversationStore
from ..utils.timestamps import format_timestamp, utc_now

logger = logging.getLogger(__name__)

PERSONAL_ROLES = ("user", "assistant", "model")
GROUP_ROLES = ("user",)


@dataclass
class TrackedMessage:
    """A message waiting to be flushed to the store."""

    role: str
    content: str
    name: str
    timestamp: str
    activity_id: Optional[str] = None


class MessageTracker:
    """Buffers the messages of each conversation and flushes them in one batch.

    Personal chats keep every turn. Group chats keep only user turns, so
    that the assistant's own replies never show up in group summaries.
    """

    def __init__(
        self,
        store: ConversationStore,
        clock: Optional[Callable[[], datetime]] = None,
        indexer: Optional[Any] = None,
    ):
        """
        Initialize the tracker.

        Args:
            store: Store used for flushing
            clock: Returns the current time for message timestamps
            indexer: Optional search indexer notified of saved messages
        """
        self.store = store
        self.indexer = indexer
        self._clock = clock or utc_now
        self._pending: Dict[str, List[TrackedMessage]] = {}
        self._personal: Dict[str, bool] = {}

    def add_message_to_tracking(
        self,
        conversation_key: str,
        role: str,
        content: str,
        source_event: Optional[Any] = None,
        name: Optional[str] = None,
        activity_id: Optional[str] = None,
    ) -> TrackedMessage:
        """
        Buffer a message for the conversation.

        Args:
            conversation_key: Conversation id
            role: "user", "assistant" or "model"
            content: Message text
            source_event: Inbound event; its is_personal flag records the chat type
            name: Sender display name
            activity_id: External message id

        Returns:
            The buffered message
        """
        if source_event is not None and getattr(source_event, "is_personal", None) is not None:
            self._personal[conversation_key] = bool(source_event.is_personal)

        message = TrackedMessage(
            role=role,
            content=content,
            name=name or ("Unknown User" if role == "user" else "Assistant"),
            timestamp=format_timestamp(self._clock()),
            activity_id=activity_id,
        )
        self._pending.setdefault(conversation_key, []).append(message)
        return message

    def get_tracked_messages(self, conversation_key: str) -> List[TrackedMessage]:
        return list(self._pending.get(conversation_key, []))

    def is_personal_chat(self, conversation_key: str) -> Optional[bool]:
        """Chat type recorded for the conversation, None if never seen."""
        return self._personal.get(conversation_key)

    async def save_messages_directly(self, conversation_key: str) -> int:
        """
        Flush buffered messages to the store and forget them.

        Args:
            conversation_key: Conversation id

        Returns:
            Number of messages written
        """
        pending = self._pending.pop(conversation_key, [])
        is_personal = self._personal.pop(conversation_key, False)
        if not pending:
            return 0

        allowed = PERSONAL_ROLES if is_personal else GROUP_ROLES
        kept = [message for message in pending if message.role in allowed]
        logger.debug(
            f"Flushing {conversation_key} ({'personal' if is_personal else 'group'}): "
            f"kept {len(kept)}/{len(pending)} messages"
        )
        if not kept:
            return 0

        saved = await self.store.insert_messages(conversation_key, kept)
        if self.indexer is not None:
            try:
                await self.indexer.index_messages(conversation_key, kept)
            except Exception as e:
                logger.warning(f"Search indexing failed for {conversation_key}: {e}", exc_info=True)
        return saved

    async def clear_conversation(self, conversation_key: str) -> int:
        """Delete stored messages and drop buffered state for the conversation."""
        self._pending.pop(conversation_key, None)
        self._personal.pop(conversation_key, None)
        return await self.store.clear_conversation(conversation_key)
