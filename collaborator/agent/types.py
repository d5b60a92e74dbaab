"""Shared types for the manager, capabilities and their tools."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel

from ..context.models import ConversationContext, Participant, TimeWindow

if TYPE_CHECKING:
    from ..storage.conversation_store import ConversationStore
    from .capabilities.registry import CapabilityRegistry


class CapabilityKind(str, Enum):
    """The closed set of capabilities the manager can delegate to."""

    SUMMARIZER = "summarizer"
    ACTION_ITEMS = "action_items"
    SEARCH = "search"

    @property
    def label(self) -> str:
        return {
            CapabilityKind.SUMMARIZER: "Summarizer Capability",
            CapabilityKind.ACTION_ITEMS: "Action Items Capability",
            CapabilityKind.SEARCH: "Search Capability",
        }[self]


class Citation(BaseModel):
    """A quoted link back to an original message."""

    position: int
    name: str
    url: str
    abstract: str
    keywords: List[str] = []


@dataclass
class CapabilityConfig:
    """Everything a capability run needs to know about the conversation.

    ``citations`` is a side channel: tools append to it and the manager
    collects the entries after the run.
    """

    conversation_id: str
    storage: Optional["ConversationStore"] = None
    user_timezone: str = "UTC"
    available_members: List[Participant] = field(default_factory=list)
    is_personal_chat: bool = False
    current_user_id: Optional[str] = None
    current_user_name: Optional[str] = None
    citations: List[Citation] = field(default_factory=list)
    time_window: Optional[TimeWindow] = None
    now: Optional[datetime] = None


class CapabilityResult(BaseModel):
    """Outcome of a capability run. ``error`` is set instead of raising."""

    response: str = ""
    citations: List[Citation] = []
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class ManagerTurn:
    """Per-request state shared by the manager and its delegation tools."""

    context: ConversationContext
    request_text: str
    now: datetime
    store: Optional["ConversationStore"] = None
    capabilities: Optional["CapabilityRegistry"] = None
    delegated_capability: Optional[str] = None
    citations: List[Citation] = field(default_factory=list)

    @property
    def mode(self) -> str:
        return "personal" if self.context.is_personal and self.context.has_user_identity else "group"
