"""Inbound event extraction and validation from Telegram updates."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.config_schema import AppConfig

logger = logging.getLogger(__name__)

LIKE_EMOJIS = {"👍", "❤", "❤️", "🔥", "👏"}
DISLIKE_EMOJIS = {"👎"}


@dataclass
class InboundEvent:
    """A text message addressed to the assistant's conversation."""

    conversation_id: str
    is_personal: bool
    user_id: str
    user_name: str
    text: str
    message_id: Optional[int] = None
    is_mentioned: bool = True


@dataclass
class ReactionEvent:
    """A like or dislike placed on a message."""

    conversation_id: str
    message_id: int
    reaction: str
    user_id: Optional[str] = None


def display_name(user: dict) -> str:
    """Full name, then username, of a Telegram user dict."""
    full_name = " ".join(part for part in (user.get("first_name"), user.get("last_name")) if part)
    return full_name or user.get("username") or "Unknown User"


def classify_reaction(emoji: str) -> Optional[str]:
    """Map a reaction emoji to "like" or "dislike"; other emojis are ignored."""
    if emoji in LIKE_EMOJIS:
        return "like"
    if emoji in DISLIKE_EMOJIS:
        return "dislike"
    return None


class MessageExtractor:
    """Turns Telegram update dicts into inbound events."""

    def __init__(self, config: AppConfig):
        """
        Initialize message extractor.

        Args:
            config: Application configuration
        """
        self.config = config
        self.allowed_chat_ids = {conv.chat_id for conv in config.allowed_conversations}
        self.allowed_user_ids = {user.user_id for user in config.allowed_users}
        self.bot_username: Optional[str] = (
            config.telegram.bot_username.lower().lstrip("@") if config.telegram.bot_username else None
        )

    def set_bot_username(self, username: str) -> None:
        self.bot_username = username.lower().lstrip("@")
        logger.info(f"Bot username set to: @{self.bot_username}")

    def is_bot_mentioned(self, message: dict) -> bool:
        """
        Check the message's mention entities for the bot.

        Returns True when mentions are not required or the bot username
        is unknown.
        """
        if not self.config.telegram.require_mention:
            return True
        if not self.bot_username:
            logger.warning("Bot username not set, treating as mentioned")
            return True

        text = message.get("text", "")
        for entity in message.get("entities", []):
            if entity.get("type") != "mention":
                continue
            offset = entity.get("offset", 0)
            mentioned = text[offset : offset + entity.get("length", 0)].lstrip("@").lower()
            if mentioned == self.bot_username:
                return True
        return False

    def extract(self, update: dict) -> Optional[InboundEvent]:
        """
        Extract a text message from an update.

        Args:
            update: Telegram update dictionary

        Returns:
            InboundEvent, or None for non-text, disallowed or incomplete updates
        """
        message = update.get("message")
        if not message:
            return None

        chat = message.get("chat", {})
        sender = message.get("from", {})
        chat_id = chat.get("id")
        user_id = sender.get("id")
        text = message.get("text", "")
        if not text or chat_id is None or user_id is None:
            return None

        if not self.is_allowed_conversation(chat_id):
            logger.debug(f"Ignoring message from chat {chat_id}: not allowed")
            return None
        if not self.is_allowed_user(user_id):
            logger.debug(f"Ignoring message from user {user_id}: not allowed")
            return None

        is_personal = chat.get("type") == "private"
        return InboundEvent(
            conversation_id=str(chat_id),
            is_personal=is_personal,
            user_id=str(user_id),
            user_name=display_name(sender),
            text=text,
            message_id=message.get("message_id"),
            is_mentioned=True if is_personal else self.is_bot_mentioned(message),
        )

    def extract_reaction(self, update: dict) -> Optional[ReactionEvent]:
        """
        Extract a like or dislike from a message_reaction update.

        Only emojis newly added in this update count; removals are ignored.

        Returns:
            ReactionEvent, or None when nothing relevant was added
        """
        reaction = update.get("message_reaction")
        if not reaction:
            return None

        chat_id = reaction.get("chat", {}).get("id")
        message_id = reaction.get("message_id")
        if chat_id is None or message_id is None or not self.is_allowed_conversation(chat_id):
            return None

        previous = {entry.get("emoji") for entry in reaction.get("old_reaction", [])}
        for entry in reaction.get("new_reaction", []):
            emoji = entry.get("emoji")
            if entry.get("type") != "emoji" or emoji in previous:
                continue
            kind = classify_reaction(emoji)
            if kind is not None:
                user_id = reaction.get("user", {}).get("id")
                return ReactionEvent(
                    conversation_id=str(chat_id),
                    message_id=message_id,
                    reaction=kind,
                    user_id=str(user_id) if user_id is not None else None,
                )
        return None

    def is_allowed_conversation(self, chat_id: int) -> bool:
        """An empty allow-list allows every chat."""
        return not self.allowed_chat_ids or chat_id in self.allowed_chat_ids

    def is_allowed_user(self, user_id: int) -> bool:
        """An empty allow-list allows every user."""
        return not self.allowed_user_ids or user_id in self.allowed_user_ids
