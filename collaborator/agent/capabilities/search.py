"""Search capability."""

from ...llm.base import BaseLLM
from ...search.base import MessageSearchProvider
from ...tools.search_tools import create_search_tools
from ..capability_prompts.search_prompt import SEARCH_PROMPT
from ..types import CapabilityConfig, CapabilityKind
from .base import BaseCapability, prompt_clock


class SearchCapability(BaseCapability):
    """Finds specific messages and cites them."""

    kind = CapabilityKind.SEARCH
    description = (
        "Finds specific past messages by keyword, sender or time and returns links to them. "
        "Use for 'find', 'search', 'when did X mention Y' requests."
    )

    def __init__(self, llm: BaseLLM, provider: MessageSearchProvider, deep_link_template: str):
        super().__init__(llm, create_search_tools(provider, deep_link_template))
        self.provider = provider

    def get_instructions(self, config: CapabilityConfig) -> str:
        return SEARCH_PROMPT.format(**prompt_clock(config))
