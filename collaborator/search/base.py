"""Search provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..storage.models import StoredMessage


@dataclass
class SearchParams:
    """Criteria for a message search."""

    keywords: List[str] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_results: int = 10


@dataclass
class SearchResult:
    """Messages found by a provider, newest first."""

    messages: List[StoredMessage]
    total_found: int
    search_method: str
    debug_info: Dict[str, Any] = field(default_factory=dict)


class MessageSearchProvider(ABC):
    """A strategy for finding messages in a conversation."""

    name: str = "base"

    @abstractmethod
    async def search_messages(self, conversation_id: str, params: SearchParams) -> SearchResult:
        """
        Search one conversation.

        Args:
            conversation_id: Conversation to search
            params: Search criteria

        Returns:
            SearchResult capped at params.max_results
        """
        pass

    async def index_messages(self, conversation_id: str, messages: List[Any]) -> None:
        """Make newly saved messages searchable. Providers that read the store directly do nothing."""
        return None
