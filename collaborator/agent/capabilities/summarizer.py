"""Summarizer capability."""

from ...llm.base import BaseLLM
from ...tools.summarizer_tools import create_summarizer_tools
from ..capability_prompts.summarizer_prompt import SUMMARIZER_PROMPT
from ..types import CapabilityConfig, CapabilityKind
from .base import BaseCapability, prompt_clock


class SummarizerCapability(BaseCapability):
    """Summaries, recaps and message listings."""

    kind = CapabilityKind.SUMMARIZER
    description = (
        "Summarizes conversation history: recaps, key points, recent messages, "
        "and what was discussed in a given period."
    )

    def __init__(self, llm: BaseLLM):
        super().__init__(llm, create_summarizer_tools())

    def get_instructions(self, config: CapabilityConfig) -> str:
        return SUMMARIZER_PROMPT.format(**prompt_clock(config))
