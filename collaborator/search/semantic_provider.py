"""Embedding search over indexed messages."""

import asyncio
import logging
from typing import Any, List, Optional

from ..memory.embeddings import EmbeddingGenerator
from ..memory.vector_store import VectorStore
from ..storage.models import StoredMessage
from ..utils.timestamps import format_timestamp, normalize_timestamp, utc_now
from .base import MessageSearchProvider, SearchParams, SearchResult
from .keyword_provider import KeywordSearchProvider, matches_participants

logger = logging.getLogger(__name__)

# Candidates fetched per requested result, before time and participant filters.
OVERFETCH = 3


class SemanticSearchProvider(MessageSearchProvider):
    """Ranks messages by embedding similarity to the keywords.

    Messages are embedded when the tracker flushes them. Searches without
    keywords, and searches that fail, are answered by the keyword provider.
    """

    name = "semantic"

    def __init__(
        self,
        vector_store: VectorStore,
        embedder: EmbeddingGenerator,
        fallback: KeywordSearchProvider,
    ):
        self.vector_store = vector_store
        self.embedder = embedder
        self.fallback = fallback

    async def index_messages(self, conversation_id: str, messages: List[Any]) -> None:
        """
        Embed and store flushed messages.

        Args:
            conversation_id: Conversation the messages belong to
            messages: Tracked messages (role, content, name, timestamp, activity_id)
        """
        messages = [message for message in messages if message.content and message.content.strip()]
        if not messages:
            return

        texts = [message.content for message in messages]
        embeddings = await asyncio.to_thread(self.embedder.embed_many, texts)

        ids, metadatas = [], []
        for i, message in enumerate(messages):
            timestamp = normalize_timestamp(message.timestamp) if message.timestamp else format_timestamp(utc_now())
            ids.append(f"{conversation_id}:{message.activity_id or timestamp}:{i}")
            metadatas.append(
                {
                    "conversation_id": conversation_id,
                    "role": message.role,
                    "name": message.name or "Unknown",
                    "timestamp": timestamp,
                    "activity_id": message.activity_id or "",
                }
            )

        await asyncio.to_thread(self.vector_store.upsert, ids, texts, embeddings, metadatas)
        logger.debug(f"Indexed {len(ids)} messages for {conversation_id}")

    async def search_messages(self, conversation_id: str, params: SearchParams) -> SearchResult:
        query = " ".join(keyword for keyword in params.keywords if keyword and keyword.strip())
        if not query:
            return await self.fallback.search_messages(conversation_id, params)

        try:
            embedding = await asyncio.to_thread(self.embedder.embed, query)
            hits = await asyncio.to_thread(
                self.vector_store.search,
                embedding,
                params.max_results * OVERFETCH,
                {"conversation_id": conversation_id},
            )
        except Exception as e:
            logger.warning(f"Semantic search failed, using keyword search: {e}", exc_info=True)
            return await self.fallback.search_messages(conversation_id, params)

        start = _bound(params.start_time)
        end = _bound(params.end_time)
        matches: List[StoredMessage] = []
        for hit in hits:
            message = _to_message(conversation_id, hit)
            if start and message.timestamp < start:
                continue
            if end and message.timestamp > end:
                continue
            if not matches_participants(message, params.participants):
                continue
            matches.append(message)

        shown = sorted(matches[: params.max_results], key=lambda message: message.timestamp, reverse=True)
        return SearchResult(
            messages=shown,
            total_found=len(matches),
            search_method=self.name,
            debug_info={"candidates": len(hits), "query": query},
        )


def _bound(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return normalize_timestamp(value)
    except ValueError:
        logger.warning(f"Ignoring invalid time bound: {value}")
        return None


def _to_message(conversation_id: str, hit: dict) -> StoredMessage:
    metadata = hit.get("metadata") or {}
    return StoredMessage(
        id=-1,
        conversation_id=metadata.get("conversation_id", conversation_id),
        role=metadata.get("role", "user"),
        content=hit.get("text") or "",
        name=metadata.get("name", "Unknown"),
        timestamp=metadata.get("timestamp", ""),
        activity_id=metadata.get("activity_id") or None,
    )
