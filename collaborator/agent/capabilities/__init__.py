"""Capabilities: summarizer, action items and search."""

from .action_items import ActionItemsCapability
from .base import BaseCapability, CapabilityPrompt
from .registry import CapabilityRegistry
from .search import SearchCapability
from .summarizer import SummarizerCapability

__all__ = [
    "ActionItemsCapability",
    "BaseCapability",
    "CapabilityPrompt",
    "CapabilityRegistry",
    "SearchCapability",
    "SummarizerCapability",
]
