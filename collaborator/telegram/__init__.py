"""Telegram transport."""

from .client import TelegramClient, format_citations
from .message_extractor import InboundEvent, MessageExtractor, ReactionEvent
from .roster import TelegramRosterProvider

__all__ = [
    "InboundEvent",
    "MessageExtractor",
    "ReactionEvent",
    "TelegramClient",
    "TelegramRosterProvider",
    "format_citations",
]
