"""Action items capability."""

from ...llm.base import BaseLLM
from ...tools.action_item_tools import create_action_item_tools
from ..capability_prompts.action_items_prompt import ACTION_ITEMS_PROMPT, PERSONAL_ACTION_ITEMS_PROMPT
from ..types import CapabilityConfig, CapabilityKind
from .base import BaseCapability, describe_members, prompt_clock


class ActionItemsCapability(BaseCapability):
    """Finds, creates, lists and updates action items."""

    kind = CapabilityKind.ACTION_ITEMS
    description = (
        "Identifies, creates, assigns, lists and updates action items, tasks and to-dos, "
        "including due dates and status changes."
    )

    def __init__(self, llm: BaseLLM):
        super().__init__(llm, create_action_item_tools())

    def get_instructions(self, config: CapabilityConfig) -> str:
        """Personal chats get the single-user prompt; groups get the roster."""
        if config.is_personal_chat:
            return PERSONAL_ACTION_ITEMS_PROMPT.format(
                user_name=config.current_user_name or "the user",
                **prompt_clock(config),
            )
        return ACTION_ITEMS_PROMPT.format(members=describe_members(config), **prompt_clock(config))
