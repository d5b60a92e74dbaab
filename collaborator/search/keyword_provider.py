"""Substring search over stored messages."""

import logging
from typing import List

from ..storage.conversation_store import ConversationStore
from ..storage.models import StoredMessage
from .base import MessageSearchProvider, SearchParams, SearchResult

logger = logging.getLogger(__name__)


def matches_keywords(message: StoredMessage, keywords: List[str]) -> bool:
    """True if any keyword occurs in the content, ignoring case. No keywords match everything."""
    terms = [keyword.lower() for keyword in keywords if keyword and keyword.strip()]
    if not terms:
        return True
    content = message.content.lower()
    return any(term in content for term in terms)


def matches_participants(message: StoredMessage, participants: List[str]) -> bool:
    """True if the sender name and any participant contain one another, ignoring case."""
    names = [name.lower() for name in participants if name and name.strip()]
    if not names:
        return True
    sender = (message.name or "").lower()
    if not sender:
        return False
    return any(name in sender or sender in name for name in names)


class KeywordSearchProvider(MessageSearchProvider):
    """Scans the conversation's messages in the requested time range."""

    name = "keyword"

    def __init__(self, store: ConversationStore):
        self.store = store

    async def search_messages(self, conversation_id: str, params: SearchParams) -> SearchResult:
        candidates = await self.store.get_messages_by_time_range(
            conversation_id, params.start_time, params.end_time
        )
        matches = [
            message
            for message in candidates
            if matches_keywords(message, params.keywords) and matches_participants(message, params.participants)
        ]
        matches.sort(key=lambda message: (message.timestamp, message.id), reverse=True)

        logger.debug(
            f"Keyword search in {conversation_id}: {len(matches)}/{len(candidates)} messages matched "
            f"{params.keywords} / {params.participants}"
        )
        return SearchResult(
            messages=matches[: params.max_results],
            total_found=len(matches),
            search_method=self.name,
            debug_info={"scanned": len(candidates)},
        )
