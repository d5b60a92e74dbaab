"""Reaction feedback on assistant responses."""

import logging
from typing import Any, Dict, Optional

from ..storage.conversation_store import ConversationStore

logger = logging.getLogger(__name__)


def feedback_key(conversation_id: str, message_id: Any) -> str:
    """Telegram message ids are only unique within a chat, so keys include the chat."""
    return f"{conversation_id}:{message_id}"


class FeedbackLedger:
    """Links sent responses to the capability that produced them and counts reactions."""

    def __init__(self, store: ConversationStore):
        self.store = store

    async def record_delegation(self, message_id: str, capability: Optional[str]) -> bool:
        """
        Remember which capability answered.

        Args:
            message_id: Feedback key of the sent message
            capability: Capability name, or None for a direct answer

        Returns:
            False if the record could not be written
        """
        stored = await self.store.store_delegated_capability(message_id, capability)
        if stored:
            logger.debug(f"Recorded delegation {message_id} -> {capability or 'direct'}")
        else:
            logger.warning(f"Delegation for {message_id} was not recorded; reactions on it will be ignored")
        return stored

    async def record_reaction(
        self,
        message_id: str,
        reaction: str,
        feedback_text: Optional[str] = None,
    ) -> bool:
        """
        Count a like or dislike on a message the assistant sent.

        Reactions arrive for every message in a chat. Only messages with a
        record from ``record_delegation`` are counted.

        Returns:
            True if the reaction was counted
        """
        if await self.store.get_feedback_by_message_id(message_id) is None:
            logger.debug(f"Ignoring {reaction} on {message_id}: not an assistant response")
            return False
        updated = await self.store.update_feedback(message_id, reaction, feedback_text)
        if updated:
            logger.info(f"Recorded {reaction} for {message_id}")
        return updated

    async def summary(self) -> Dict[str, Any]:
        return await self.store.get_feedback_summary()
