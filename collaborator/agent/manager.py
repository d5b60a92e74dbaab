"""Manager agent: routes each request to a capability or answers directly."""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import BaseModel
from pydantic_ai import Agent

from ..context.models import ConversationContext, Participant
from ..context.roster import RosterProvider, normalize_participants
from ..llm.base import BaseLLM
from ..storage.conversation_store import ConversationStore
from ..tools.delegation_tools import create_delegation_tools
from ..utils.time_resolver import get_zone, resolve_request_window
from ..utils.timestamps import utc_now
from .capabilities.registry import CapabilityRegistry
from .capability_prompts.manager_prompt import MANAGER_PROMPT
from .model_adapter import PydanticAIModelAdapter, bind_tool, run_agent
from .types import Citation, ManagerTurn

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Sorry, I encountered an error processing your request: "


class ManagerResult(BaseModel):
    """What the manager produced for one request."""

    response: str = ""
    delegated_capability: Optional[str] = None
    citations: List[Citation] = []


class DelegationDecider(ABC):
    """Decides how a turn is answered."""

    @abstractmethod
    async def decide(self, turn: ManagerTurn) -> str:
        """
        Answer the turn.

        Delegations must go through the turn's delegation tools so that
        the delegated capability and citations are recorded on the turn.

        Args:
            turn: Per-request state

        Returns:
            Final response text, possibly empty
        """
        pass


class ModelDelegationDecider(DelegationDecider):
    """Lets the manager model pick a delegation tool, or answer directly."""

    def __init__(self, llm: BaseLLM, capabilities: CapabilityRegistry):
        """
        Initialize decider.

        Args:
            llm: LLM for routing decisions
            capabilities: Capabilities exposed as delegate_to_* tools
        """
        self.llm = llm
        self.capabilities = capabilities
        self._agent: Agent = Agent(deps_type=ManagerTurn, name="manager")
        for tool in create_delegation_tools(capabilities):
            bind_tool(self._agent, tool, owner="manager", result_source="capability")

    def get_instructions(self, turn: ManagerTurn) -> str:
        zone = get_zone(turn.context.timezone)
        return MANAGER_PROMPT.format(
            current_datetime=turn.now.astimezone(zone).strftime("%Y-%m-%d %H:%M:%S (%A)"),
            timezone=str(zone.key),
            mode=turn.mode,
            capability_descriptions=self.capabilities.get_descriptions(),
        )

    async def decide(self, turn: ManagerTurn) -> str:
        model = PydanticAIModelAdapter(self.llm, system_prompt=self.get_instructions(turn), agent_name="manager")
        prompt = turn.request_text
        if turn.context.time_window is not None:
            prompt = f"{prompt}\n\n{turn.context.time_window.to_instruction()}"
        return await run_agent(self._agent, model, prompt, turn)


class ManagerAgent:
    """Entry point for every request the assistant answers."""

    def __init__(
        self,
        capabilities: CapabilityRegistry,
        store: ConversationStore,
        decider: DelegationDecider,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize manager.

        Args:
            capabilities: Registered capabilities
            store: Conversation store handed to capabilities
            decider: Routing strategy
            clock: Returns the current aware UTC time
        """
        self.capabilities = capabilities
        self.store = store
        self.decider = decider
        self._clock = clock or utc_now

    async def _load_participants(
        self, context: ConversationContext, roster: Optional[RosterProvider]
    ) -> List[Participant]:
        if context.is_personal and context.has_user_identity:
            return []
        if roster is None:
            return list(context.participants)
        try:
            raw = await roster.list_participants(context.conversation_id)
        except Exception as e:
            logger.warning(f"Could not load roster for {context.conversation_id}: {e}")
            return []
        return normalize_participants(raw)

    async def process_request(
        self,
        request_text: str,
        context: ConversationContext,
        roster: Optional[RosterProvider] = None,
    ) -> ManagerResult:
        """
        Answer one request.

        Time language in the request is resolved once here, and the same
        window is handed to whichever capability is delegated to.

        Args:
            request_text: The user's message
            context: Conversation context
            roster: Member source for group chats

        Returns:
            ManagerResult; errors are reported in the response text
        """
        start_time = time.time()
        try:
            now = self._clock()
            context.participants = await self._load_participants(context, roster)
            if context.time_window is None:
                context.time_window = resolve_request_window(request_text, context.timezone, now)

            turn = ManagerTurn(
                context=context,
                request_text=request_text,
                now=now,
                store=self.store,
                capabilities=self.capabilities,
            )
            logger.info(
                f"Manager processing ({turn.mode}, {len(context.participants)} members) "
                f"for {context.conversation_id}"
            )
            response = await self.decider.decide(turn)
        except Exception as e:
            logger.error(f"Manager failed: {e}", exc_info=True)
            return ManagerResult(response=f"{ERROR_PREFIX}{e}")

        logger.debug(
            f"Manager finished in {(time.time() - start_time) * 1000:.2f}ms, "
            f"delegated to {turn.delegated_capability or 'none'}"
        )
        return ManagerResult(
            response=response or "",
            delegated_capability=turn.delegated_capability,
            citations=list(turn.citations),
        )
