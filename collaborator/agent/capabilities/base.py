"""Base class for capabilities."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from pydantic_ai import Agent

from ...errors import CapabilityConfigError
from ...llm.base import BaseLLM
from ...tools.base import BaseTool
from ...utils.time_resolver import get_zone
from ...utils.timestamps import utc_now
from ..model_adapter import PydanticAIModelAdapter, bind_tool, run_agent
from ..types import CapabilityConfig, CapabilityKind, CapabilityResult

logger = logging.getLogger(__name__)


@dataclass
class CapabilityPrompt:
    """A capability bound to one conversation, ready to receive text."""

    agent: Agent
    model: PydanticAIModelAdapter
    config: CapabilityConfig
    instructions: str

    async def send(self, text: str) -> str:
        """Run the capability on text and return its answer."""
        return await run_agent(self.agent, self.model, text, self.config)


class BaseCapability(ABC):
    """A specialized unit the manager can delegate to.

    Each capability owns a pydantic_ai agent with only its own tools.
    ``create_prompt`` binds it to a conversation; ``process_request``
    runs it and reports failures in the result instead of raising.
    """

    kind: CapabilityKind
    description: str = ""

    def __init__(self, llm: BaseLLM, tools: List[BaseTool]):
        """
        Initialize capability.

        Args:
            llm: LLM used by this capability
            tools: The capability's tools
        """
        self.llm = llm
        self._tools = list(tools)
        self._agent: Agent = Agent(deps_type=CapabilityConfig, name=self.kind.value)
        for tool in self._tools:
            bind_tool(self._agent, tool, owner=self.kind.value)

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def label(self) -> str:
        return self.kind.label

    @property
    def tools(self) -> List[BaseTool]:
        return list(self._tools)

    def validate_config(self, config: CapabilityConfig) -> None:
        """
        Check that config carries what this capability needs.

        Raises:
            CapabilityConfigError: If the store is missing
        """
        if config.storage is None:
            raise CapabilityConfigError(f"{self.label} requires a conversation store")
        if not config.conversation_id:
            raise CapabilityConfigError(f"{self.label} requires a conversation id")

    @abstractmethod
    def get_instructions(self, config: CapabilityConfig) -> str:
        """
        Build the system prompt for one conversation.

        Args:
            config: Capability configuration

        Returns:
            Complete system prompt
        """
        pass

    def create_prompt(self, config: CapabilityConfig) -> CapabilityPrompt:
        """
        Bind the capability to a conversation.

        Args:
            config: Capability configuration

        Returns:
            A prompt whose tools act on config's conversation

        Raises:
            CapabilityConfigError: If required configuration is missing
        """
        self.validate_config(config)
        instructions = self.get_instructions(config)
        model = PydanticAIModelAdapter(self.llm, system_prompt=instructions, agent_name=self.name)
        return CapabilityPrompt(agent=self._agent, model=model, config=config, instructions=instructions)

    async def process_request(self, user_text: str, config: CapabilityConfig) -> CapabilityResult:
        """
        Answer a delegated request.

        A pre-resolved time window in config is appended to the request as
        explicit timestamps.

        Args:
            user_text: The request to answer
            config: Capability configuration

        Returns:
            CapabilityResult with the response, collected citations or an error
        """
        start_time = time.time()
        try:
            prompt = self.create_prompt(config)
            text = user_text
            if config.time_window is not None:
                text = f"{user_text}\n\n{config.time_window.to_instruction()}"
            response = await prompt.send(text)
        except Exception as e:
            logger.error(f"[{self.name}] Processing failed: {e}", exc_info=True)
            return CapabilityResult(response="", citations=list(config.citations), error=str(e))

        logger.debug(f"[{self.name}] Processed in {(time.time() - start_time) * 1000:.2f}ms")
        return CapabilityResult(response=response, citations=list(config.citations))

    def get_function_schemas(self) -> List[Dict[str, Any]]:
        """Name and JSON schema of every tool of this capability."""
        return [{"name": tool.get_name(), "schema": tool.get_schema()} for tool in self._tools]


def prompt_clock(config: CapabilityConfig) -> Dict[str, str]:
    """Current datetime and timezone for prompt templates."""
    zone = get_zone(config.user_timezone)
    now: datetime = config.now or utc_now()
    return {
        "current_datetime": now.astimezone(zone).strftime("%Y-%m-%d %H:%M:%S (%A)"),
        "timezone": str(zone.key),
    }


def describe_members(config: CapabilityConfig) -> str:
    """Roster lines for prompt templates."""
    if not config.available_members:
        return "No member list is available; use the names that appear in the conversation."
    return "\n".join(f"- {member.name} (id: {member.id})" for member in config.available_members)
