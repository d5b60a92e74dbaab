"""Per-request conversation models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class TimeWindow(BaseModel):
    """An absolute time range with a human-readable label."""

    start: str
    end: str
    description: str

    def to_instruction(self) -> str:
        """Render the window as explicit instruction text for a capability."""
        return (
            "Pre-calculated time range:\n"
            f"- Start: {self.start}\n"
            f"- End: {self.end}\n"
            f"- Description: {self.description}\n\n"
            "Use these exact timestamps when calling time-based tools. "
            "Do not recalculate them."
        )


class Participant(BaseModel):
    """A known member of a conversation."""

    id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = None


@dataclass
class ConversationContext:
    """Transient state for one inbound event.

    Created when an event arrives and released once it has been handled.
    """

    conversation_id: str
    is_personal: bool = False
    timezone: str = "UTC"
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    participants: List[Participant] = field(default_factory=list)
    time_window: Optional[TimeWindow] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_user_identity(self) -> bool:
        """True when the acting user is known."""
        return bool(self.user_id)
