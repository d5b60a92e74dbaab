"""Capabilities exposed to the manager as tools."""

import logging
import time
from typing import Optional

from pydantic import BaseModel, Field

from ..agent.capabilities.base import BaseCapability
from ..agent.types import CapabilityConfig, ManagerTurn
from ..utils.time_resolver import resolve_request_window
from .base import BaseTool, ToolResult, error_result

logger = logging.getLogger(__name__)


class DelegationRequest(BaseModel):
    """Hand-off from the manager to a capability."""

    user_request: str = Field(..., description="The user's request, with any details the capability needs")
    conversation_id: Optional[str] = Field(
        default=None, description="Not needed; the current conversation is always used"
    )


class DelegateToCapabilityTool(BaseTool):
    """Runs one capability on behalf of the manager.

    The manager's model only sees the capability's final answer; the
    capability's own tool calls stay inside its run.
    """

    request_model = DelegationRequest

    def __init__(self, capability: BaseCapability):
        super().__init__(
            name=f"delegate_to_{capability.name}",
            description=f"Delegate this request to the {capability.label}. {capability.description}",
        )
        self.capability = capability

    def build_config(self, turn: ManagerTurn, user_request: str) -> CapabilityConfig:
        """
        Describe the turn's conversation to the capability.

        The time window comes from the literal request when it has time
        language; the manager's restatement is only consulted otherwise.
        """
        context = turn.context
        window = context.time_window or resolve_request_window(user_request, context.timezone, turn.now)
        return CapabilityConfig(
            conversation_id=context.conversation_id,
            storage=turn.store,
            user_timezone=context.timezone,
            available_members=list(context.participants),
            is_personal_chat=context.is_personal,
            current_user_id=context.user_id,
            current_user_name=context.user_name,
            time_window=window,
            now=turn.now,
        )

    async def execute(self, context: ManagerTurn, user_request: str = "", **kwargs) -> ToolResult:
        turn = context
        if kwargs.get("conversation_id") not in (None, turn.context.conversation_id):
            logger.debug(f"Ignoring conversation id {kwargs['conversation_id']} from the model")

        request_text = user_request or turn.request_text
        turn.delegated_capability = self.capability.name
        config = self.build_config(turn, request_text)
        logger.info(f"Delegating to {self.capability.name}: {request_text[:100]}")

        start_time = time.time()
        result = await self.capability.process_request(request_text, config)
        turn.citations.extend(result.citations)
        logger.debug(
            f"{self.capability.name} responded in {(time.time() - start_time) * 1000:.2f}ms "
            f"with {len(result.citations)} citations"
        )

        if not result.success:
            return error_result(f"Error in {self.capability.label}: {result.error}")
        return ToolResult(success=True, data={"citations": len(result.citations)}, message=result.response)


def create_delegation_tools(capabilities) -> list:
    """One delegation tool per registered capability."""
    return [DelegateToCapabilityTool(capability) for capability in capabilities.get_all()]
