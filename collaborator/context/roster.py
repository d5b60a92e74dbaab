"""Conversation roster lookup and normalization."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from .models import Participant

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER = "Unknown Member"
UNKNOWN_ID = "unknown"

_NAME_FIELDS = (
    "name",
    "given_name",
    "givenName",
    "display_name",
    "displayName",
    "full_name",
    "first_name",
    "username",
    "user_principal_name",
    "userPrincipalName",
)
_ID_FIELDS = ("id", "aad_object_id", "aadObjectId", "user_id", "userId")


class RosterProvider(ABC):
    """Source of the participants of a group conversation."""

    @abstractmethod
    async def list_participants(self, conversation_id: str) -> List[Participant]:
        """
        Fetch the members of a conversation.

        Args:
            conversation_id: Conversation to look up

        Returns:
            Normalized participants
        """
        pass


def _first_value(member: Any, fields: Iterable[str]) -> Optional[str]:
    for field_name in fields:
        if isinstance(member, dict):
            value = member.get(field_name)
        else:
            value = getattr(member, field_name, None)
        if value not in (None, ""):
            return str(value)
    return None


def normalize_participants(raw_members: Iterable[Any]) -> List[Participant]:
    """
    Turn raw roster entries into participants.

    Names fall back through the usual display fields and ids through the
    usual identifier fields. Entries with no usable name are dropped and
    duplicates (same id, or same name when the id is unknown) are removed.

    Args:
        raw_members: Dicts or objects from the chat platform

    Returns:
        Participants in roster order
    """
    participants: List[Participant] = []
    seen = set()

    for member in raw_members or []:
        if isinstance(member, Participant):
            participant = member
        else:
            participant = Participant(
                id=_first_value(member, _ID_FIELDS) or UNKNOWN_ID,
                name=_first_value(member, _NAME_FIELDS) or UNKNOWN_MEMBER,
                email=_first_value(member, ("email", "mail")),
                role=_first_value(member, ("role", "user_role", "userRole")),
            )

        if participant.name == UNKNOWN_MEMBER:
            continue
        key = participant.id if participant.id != UNKNOWN_ID else f"name:{participant.name.lower()}"
        if key in seen:
            continue
        seen.add(key)
        participants.append(participant)

    logger.debug(f"Normalized roster: {len(participants)} participants")
    return participants


def find_participant(participants: List[Participant], name: str) -> Optional[Participant]:
    """Match a name against the roster, exactly first, then case-insensitively."""
    for participant in participants:
        if participant.name == name:
            return participant
    lowered = name.lower()
    for participant in participants:
        if participant.name.lower() == lowered:
            return participant
    return None
