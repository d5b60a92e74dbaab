"""Chat roster from the Telegram Bot API."""

import logging
from typing import List, Union

from telegram import Bot

from ..context.models import Participant
from ..context.roster import RosterProvider, normalize_participants

logger = logging.getLogger(__name__)


class TelegramRosterProvider(RosterProvider):
    """Lists a chat's administrators.

    Bots cannot enumerate ordinary group members, so the roster is the
    administrator list.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def list_participants(self, conversation_id: Union[int, str]) -> List[Participant]:
        members = await self.bot.get_chat_administrators(chat_id=conversation_id)
        raw = []
        for member in members:
            user = member.user
            if user.is_bot:
                continue
            raw.append({"id": str(user.id), "name": user.full_name, "username": user.username})
        participants = normalize_participants(raw)
        logger.debug(f"Loaded {len(participants)} roster entries for {conversation_id}")
        return participants
