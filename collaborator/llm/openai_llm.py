"""OpenAI and Azure OpenAI chat completion provider."""

import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from openai import AsyncAzureOpenAI, AsyncOpenAI

from .base import BaseLLM, LLMResponse, ToolCall

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """Chat completions against OpenAI or an Azure OpenAI deployment."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        organization_id: Optional[str] = None,
        azure_endpoint: Optional[str] = None,
        api_version: Optional[str] = None,
        role: str = "llm",
    ):
        """
        Initialize the provider.

        Args:
            api_key: API key
            model: Model name, or deployment name on Azure
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            organization_id: Optional OpenAI organization
            azure_endpoint: Azure resource endpoint; selects the Azure client when set
            api_version: Azure API version
            role: Caller label for logging
        """
        super().__init__(role=role)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        if azure_endpoint:
            self.client = AsyncAzureOpenAI(
                api_key=api_key,
                azure_endpoint=azure_endpoint,
                api_version=api_version,
            )
        else:
            self.client = AsyncOpenAI(api_key=api_key, organization=organization_id)

    async def _generate_impl(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        api_params: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": messages,
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if tools:
            api_params["tools"] = [{"type": "function", "function": tool} for tool in tools]

        response = await self.client.chat.completions.create(**api_params)
        message = response.choices[0].message

        tool_calls = []
        for tc in message.tool_calls or []:
            try:
                arguments = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                logger.warning(f"Model sent malformed arguments for {tc.function.name}")
                arguments = {}
            tool_calls.append(
                ToolCall(id=tc.id or str(uuid.uuid4()), name=tc.function.name, arguments=arguments)
            )

        return LLMResponse(text=message.content, tool_calls=tool_calls)

    def get_model_name(self) -> str:
        return self.model
