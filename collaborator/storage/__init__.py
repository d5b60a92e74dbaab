"""Durable storage for messages, action items and feedback."""

from .conversation_store import ConversationStore
from .models import ActionItem, FeedbackRecord, StoredMessage

__all__ = ["ConversationStore", "ActionItem", "FeedbackRecord", "StoredMessage"]
