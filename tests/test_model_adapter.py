"""Tests for the pydantic_ai model adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic_ai.messages import ModelRequest, TextPart, ToolCallPart, UserPromptPart
from pydantic_ai.models import ModelRequestParameters

from collaborator.agent.model_adapter import PydanticAIModelAdapter
from collaborator.llm.base import BaseLLM, LLMResponse, ToolCall


@pytest.fixture
def mock_llm():
    llm = MagicMock(spec=BaseLLM)
    llm.generate = AsyncMock(return_value=LLMResponse(text="test response"))
    llm.get_model_name = MagicMock(return_value="test-model")
    return llm


@pytest.mark.asyncio
async def test_request_passes_prompt_and_system_prompt(mock_llm):
    adapter = PydanticAIModelAdapter(mock_llm, system_prompt="Be brief.")

    response = await adapter.request(
        [ModelRequest(parts=[UserPromptPart(content="Hello")])], None, ModelRequestParameters()
    )

    mock_llm.generate.assert_awaited_once_with("Hello", system_prompt="Be brief.", tools=None)
    assert isinstance(response.parts[0], TextPart)
    assert response.parts[0].content == "test response"
    assert response.model_name == "test-model"


@pytest.mark.asyncio
async def test_tool_calls_become_tool_call_parts(mock_llm):
    mock_llm.generate.return_value = LLMResponse(
        tool_calls=[ToolCall(id="c1", name="get_recent_messages", arguments={"limit": 3})]
    )
    adapter = PydanticAIModelAdapter(mock_llm)

    response = await adapter.request([], None, ModelRequestParameters())

    part = response.parts[0]
    assert isinstance(part, ToolCallPart)
    assert part.tool_name == "get_recent_messages"
    assert part.args_as_dict() == {"limit": 3}
    assert part.tool_call_id == "c1"


@pytest.mark.asyncio
async def test_empty_response_still_has_a_part(mock_llm):
    mock_llm.generate.return_value = LLMResponse()
    response = await PydanticAIModelAdapter(mock_llm).request([], None, ModelRequestParameters())
    assert [part.content for part in response.parts] == [""]


def test_names(mock_llm):
    adapter = PydanticAIModelAdapter(mock_llm, system_prompt="sys")
    assert adapter.model_name == "test-model"
    assert adapter.system == "sys"
