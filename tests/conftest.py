"""Shared fixtures."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from collaborator.llm.base import BaseLLM, LLMResponse, ToolCall
from collaborator.storage.conversation_store import ConversationStore

# A Wednesday
FIXED_NOW = datetime(2025, 1, 15, 17, 0, tzinfo=timezone.utc)


class ScriptedLLM(BaseLLM):
    """LLM that replays canned responses and records every request."""

    def __init__(self, responses: List[LLMResponse], model_name: str = "scripted-model"):
        super().__init__(role="test")
        self.responses = list(responses)
        self.model_name = model_name
        self.calls: List[Dict[str, Any]] = []

    async def _generate_impl(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "tools": tools})
        if not self.responses:
            return LLMResponse(text="")
        return self.responses.pop(0)

    def get_model_name(self) -> str:
        return self.model_name


def tool_call(name: str, call_id: str = "call_1", **arguments: Any) -> LLMResponse:
    """A response asking for one tool; arguments are the fields of its request model."""
    return LLMResponse(tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments)])


@pytest.fixture
def store(tmp_path):
    return ConversationStore(str(tmp_path / "collaborator.db"), clock=lambda: FIXED_NOW)
