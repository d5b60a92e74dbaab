"""LLM providers."""

from .base import BaseLLM, LLMResponse, ToolCall
from .factory import create_llm

__all__ = ["BaseLLM", "LLMResponse", "ToolCall", "create_llm"]
