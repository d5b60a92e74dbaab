"""Bridge between BaseLLM providers and pydantic_ai agents."""

import json
import logging
from typing import Any, List, Optional

from pydantic_ai import Agent, RunContext
from pydantic_ai.messages import ModelRequest, ModelResponse, RetryPromptPart, TextPart, ToolCallPart
from pydantic_ai.models import Model, ModelMessage, ModelRequestParameters, ModelSettings
from pydantic_ai.usage import RequestUsage

from ..llm.base import BaseLLM
from ..tools.base import BaseTool

logger = logging.getLogger(__name__)


class PydanticAIModelAdapter(Model):
    """Adapter to use our BaseLLM with pydantic_ai.

    One adapter is created per prompt so the system prompt never leaks
    between concurrent conversations.
    """

    def __init__(self, llm: BaseLLM, system_prompt: Optional[str] = None, agent_name: str = "agent"):
        """
        Initialize adapter.

        Args:
            llm: BaseLLM instance
            system_prompt: System prompt for the model
            agent_name: Name of the calling agent, for logs
        """
        self.llm = llm
        self._system_prompt = system_prompt or ""
        self.agent_name = agent_name
        super().__init__()

    @property
    def system(self) -> str:
        return self._system_prompt

    @property
    def model_name(self) -> str:
        return self.llm.get_model_name()

    def _flatten(self, messages: List[ModelMessage]) -> str:
        """Render the run's message history as a single prompt."""
        lines: List[str] = []
        for msg in messages:
            if isinstance(msg, ModelRequest):
                for part in msg.parts:
                    if isinstance(part, RetryPromptPart):
                        lines.append(part.model_response())
                    elif hasattr(part, "content"):
                        content = part.content
                        lines.append(content if isinstance(content, str) else str(content))
            elif isinstance(msg, ModelResponse):
                for part in msg.parts:
                    if isinstance(part, ToolCallPart):
                        lines.append(f"(called tool '{part.tool_name}' with {json.dumps(part.args_as_dict())})")
                    elif isinstance(part, TextPart) and part.content:
                        lines.append(part.content)
        return "\n".join(lines)

    async def request(
        self,
        messages: List[ModelMessage],
        model_settings: Optional[ModelSettings] = None,
        model_request_parameters: Optional[ModelRequestParameters] = None,
    ) -> ModelResponse:
        """
        Make a request to the LLM.

        Args:
            messages: Message history of the current run
            model_settings: Optional model settings
            model_request_parameters: Tool definitions for this step

        Returns:
            ModelResponse with the generated text and/or tool calls
        """
        user_prompt = self._flatten(messages)

        tools = None
        if model_request_parameters and model_request_parameters.function_tools:
            tools = [
                {
                    "name": tool.name,
                    "description": tool.description or "",
                    "parameters": tool.parameters_json_schema,
                }
                for tool in model_request_parameters.function_tools
            ]

        logger.debug(f"[{self.agent_name}] Prompt sent to {self.model_name}:\n{user_prompt}")

        response = await self.llm.generate(
            user_prompt,
            system_prompt=self._system_prompt,
            tools=tools,
        )

        response_parts = [
            ToolCallPart(tool_name=tc.name, args=tc.arguments, tool_call_id=tc.id)
            for tc in response.tool_calls
        ]
        if response.text:
            response_parts.append(TextPart(content=response.text))
        if not response_parts:
            response_parts.append(TextPart(content=""))

        return ModelResponse(
            parts=response_parts,
            usage=RequestUsage(input_tokens=0, output_tokens=0),
            model_name=self.model_name,
        )


def bind_tool(agent: Agent, tool: BaseTool, owner: str, result_source: str = "tool") -> None:
    """
    Register a BaseTool on a pydantic_ai agent.

    The tool's request_model becomes the single typed argument, so the
    model sees the request model's fields as the tool parameters.

    Args:
        agent: Agent to register on
        tool: Tool to expose
        owner: Name of the owning agent, for logs
        result_source: Word used in the result heading ("tool" or "capability")
    """
    schema = tool.get_schema()
    tool_name = schema["name"]
    tool_description = schema["description"]
    request_model = tool.request_model

    async def run_tool(ctx: RunContext[Any], params: dict) -> str:
        logger.debug(f"[{owner}] Calling {tool_name} with {params}")
        result = await tool.execute(ctx.deps, **params)
        if result.success:
            return f"Result from {result_source} '{tool_name}':\n" + (
                result.message or str(result.data) or "Success (no output)"
            )
        return f"Error from {result_source} '{tool_name}':\n" + (result.error or "Unknown error")

    if request_model is not None:
        async def typed_wrapper(ctx: RunContext[Any], request: request_model) -> str:
            return await run_tool(ctx, request.model_dump())

        wrapper = typed_wrapper
    else:
        async def plain_wrapper(ctx: RunContext[Any]) -> str:
            return await run_tool(ctx, {})

        wrapper = plain_wrapper

    wrapper.__name__ = tool_name
    wrapper.__doc__ = tool_description
    agent.tool(wrapper)
    logger.debug(f"[{owner}] Registered tool: {tool_name}")


async def run_agent(agent: Agent, model: PydanticAIModelAdapter, user_prompt: str, deps: Any) -> str:
    """Run an agent with a per-call model and return its text output."""
    result = await agent.run(user_prompt, deps=deps, model=model)
    return result.output or ""
