"""Message search tool."""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from ..agent.types import CapabilityConfig
from ..search.base import MessageSearchProvider, SearchParams
from ..search.formatting import build_citations, format_search_summary
from .base import BaseTool, ToolResult, error_result, success_result

logger = logging.getLogger(__name__)


class SearchMessagesRequest(BaseModel):
    """Arguments for search_messages."""

    keywords: List[str] = Field(..., description="Keywords to look for; a message matching any keyword is a hit")
    participants: Optional[List[str]] = Field(default=None, description="Only messages sent by these people")
    start_time: Optional[str] = Field(default=None, description="Start time in ISO format")
    end_time: Optional[str] = Field(default=None, description="End time in ISO format")
    max_results: int = Field(default=10, ge=1, le=50, description="Maximum number of messages to return")


class SearchMessagesTool(BaseTool):
    """Find messages and attach citations linking to them."""

    request_model = SearchMessagesRequest

    def __init__(self, provider: MessageSearchProvider, deep_link_template: str):
        super().__init__(
            name="search_messages",
            description=(
                "Search conversation history by keywords, sender and time range. "
                "Returns a grouped summary; links to the top messages are attached automatically."
            ),
        )
        self.provider = provider
        self.deep_link_template = deep_link_template

    async def execute(
        self,
        context: CapabilityConfig,
        keywords: Optional[List[str]] = None,
        participants: Optional[List[str]] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        max_results: int = 10,
        **kwargs,
    ) -> ToolResult:
        if not start_time and not end_time and context.time_window is not None:
            start_time, end_time = context.time_window.start, context.time_window.end

        params = SearchParams(
            keywords=list(keywords or []),
            participants=list(participants or []),
            start_time=start_time,
            end_time=end_time,
            max_results=max_results,
        )
        try:
            result = await self.provider.search_messages(context.conversation_id, params)
        except Exception as e:
            logger.error(f"search_messages failed: {e}", exc_info=True)
            return error_result(f"Search failed: {e}")

        citations = build_citations(
            result.messages,
            self.deep_link_template,
            timezone=context.user_timezone,
            start_position=len(context.citations) + 1,
        )
        context.citations.extend(citations)
        logger.info(
            f"search_messages ({result.search_method}): {result.total_found} found, "
            f"{len(result.messages)} shown, {len(citations)} citations"
        )

        return success_result(
            total_found=result.total_found,
            shown=len(result.messages),
            summary=format_search_summary(result.messages, result.total_found, now=context.now),
            search_method=result.search_method,
            citations=[citation.model_dump() for citation in citations],
        )


def create_search_tools(provider: MessageSearchProvider, deep_link_template: str):
    """Tools of the search capability."""
    return [SearchMessagesTool(provider, deep_link_template)]
