"""Conversation context, message tracking and roster handling."""

from .context_registry import ConversationContextRegistry
from .models import ConversationContext, Participant, TimeWindow
from .roster import RosterProvider, normalize_participants

__all__ = [
    "ConversationContext",
    "ConversationContextRegistry",
    "Participant",
    "RosterProvider",
    "TimeWindow",
    "normalize_participants",
]
