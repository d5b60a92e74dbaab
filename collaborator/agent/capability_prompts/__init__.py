"""System prompts for the manager and its capabilities."""

from .action_items_prompt import ACTION_ITEMS_PROMPT, PERSONAL_ACTION_ITEMS_PROMPT
from .manager_prompt import MANAGER_PROMPT
from .search_prompt import SEARCH_PROMPT
from .summarizer_prompt import SUMMARIZER_PROMPT

__all__ = [
    "ACTION_ITEMS_PROMPT",
    "MANAGER_PROMPT",
    "PERSONAL_ACTION_ITEMS_PROMPT",
    "SEARCH_PROMPT",
    "SUMMARIZER_PROMPT",
]
