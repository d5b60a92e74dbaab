"""Base LLM interface."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ToolCall:
    """A function call requested by the model."""

    id: str
    name: str
    arguments: Dict[str, Any]


@dataclass
class LLMResponse:
    """Response from an LLM: text, tool calls, or both."""

    text: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)


class BaseLLM(ABC):
    """Abstract base class for LLM providers.

    ``generate`` is the public entry point; providers implement
    ``_generate_impl``. The role label identifies which part of the
    assistant (manager or a capability) is calling, for logging.
    """

    def __init__(self, role: str = "llm"):
        self.role = role

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        """
        Generate a response from the model.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            tools: Optional tool definitions ({"name", "description", "parameters"})
            **kwargs: Provider-specific overrides

        Returns:
            LLMResponse with text and/or tool calls
        """
        logger.debug(
            f"[{self.role}] LLM request to {self.get_model_name()} "
            f"(prompt length: {len(prompt)}, tools: {len(tools) if tools else 0})"
        )
        response = await self._generate_impl(prompt, system_prompt, tools, **kwargs)
        logger.debug(
            f"[{self.role}] LLM response: {len(response.text or '')} chars, "
            f"{len(response.tool_calls)} tool calls"
        )
        return response

    @abstractmethod
    async def _generate_impl(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        """Provider implementation of generate."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the model name being used."""
        pass

    async def validate(self) -> None:
        """
        Check that the model is reachable with a trivial request.

        Raises:
            Exception: If the provider call fails
        """
        await self.generate("Hello", system_prompt="Respond with just 'Hi'.")
