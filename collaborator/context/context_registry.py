"""Registry of conversation contexts for events being handled."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from .models import ConversationContext

logger = logging.getLogger(__name__)


class ConversationContextRegistry:
    """Holds the context of every in-flight event, keyed by conversation id.

    Contexts are only reachable through ``open``, which removes them again
    however the block exits.
    """

    def __init__(self):
        self._active: Dict[str, ConversationContext] = {}

    @asynccontextmanager
    async def open(self, context: ConversationContext) -> AsyncIterator[ConversationContext]:
        """Register a context for the duration of the block."""
        self._active[context.conversation_id] = context
        try:
            yield context
        finally:
            # A later event for the same conversation may have replaced this one.
            if self._active.get(context.conversation_id) is context:
                del self._active[context.conversation_id]
            logger.debug(f"Released context for {context.conversation_id}")

    def get(self, conversation_id: str) -> Optional[ConversationContext]:
        return self._active.get(conversation_id)

    def __len__(self) -> int:
        return len(self._active)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._active
