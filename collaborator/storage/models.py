"""Persisted record types."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

MESSAGE_ROLES = ("user", "assistant", "model")
ACTION_ITEM_STATUSES = ("pending", "in_progress", "completed", "cancelled")
ACTION_ITEM_PRIORITIES = ("low", "medium", "high", "urgent")
REACTIONS = ("like", "dislike")


@dataclass
class StoredMessage:
    """A conversation message as persisted in the store."""

    id: int
    conversation_id: str
    role: str
    content: str
    name: str
    timestamp: str
    activity_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "StoredMessage":
        return cls(
            id=row["id"],
            conversation_id=row["conversation_id"],
            role=row["role"],
            content=row["content"],
            name=row["name"],
            timestamp=row["timestamp"],
            activity_id=row["activity_id"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Shape used in tool payloads."""
        return {
            "timestamp": self.timestamp,
            "role": self.role,
            "name": self.name,
            "content": self.content,
        }


@dataclass
class ActionItem:
    """A tracked task assigned to a conversation member."""

    id: int
    conversation_id: str
    title: str
    description: str
    assigned_to: str
    assigned_by: str
    status: str
    priority: str
    created_at: str
    updated_at: str
    assigned_to_id: Optional[str] = None
    assigned_by_id: Optional[str] = None
    due_date: Optional[str] = None
    source_message_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Any) -> "ActionItem":
        source_ids = json.loads(row["source_message_ids"]) if row["source_message_ids"] else []
        return cls(
            id=row["id"],
            conversation_id=row["conversation_id"],
            title=row["title"],
            description=row["description"],
            assigned_to=row["assigned_to"],
            assigned_to_id=row["assigned_to_id"],
            assigned_by=row["assigned_by"],
            assigned_by_id=row["assigned_by_id"],
            status=row["status"],
            priority=row["priority"],
            due_date=row["due_date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            source_message_ids=source_ids,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "conversation_id": self.conversation_id,
            "title": self.title,
            "description": self.description,
            "assigned_to": self.assigned_to,
            "assigned_to_id": self.assigned_to_id,
            "assigned_by": self.assigned_by,
            "status": self.status,
            "priority": self.priority,
            "due_date": self.due_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class FeedbackRecord:
    """Reaction counters for one sent assistant message."""

    id: int
    message_id: str
    likes: int
    dislikes: int
    created_at: str
    updated_at: str
    feedbacks: List[Any] = field(default_factory=list)
    delegated_capability: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "FeedbackRecord":
        return cls(
            id=row["id"],
            message_id=row["message_id"],
            likes=row["likes"],
            dislikes=row["dislikes"],
            feedbacks=json.loads(row["feedbacks"]) if row["feedbacks"] else [],
            delegated_capability=row["delegated_capability"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
