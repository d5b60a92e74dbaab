"""Ollama provider for locally hosted models."""

import logging
import uuid
from typing import Any, Dict, List, Optional

import ollama

from .base import BaseLLM, LLMResponse, ToolCall

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Chat against an Ollama server."""

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        context_window: Optional[int] = None,
        role: str = "llm",
    ):
        """
        Initialize the provider.

        Args:
            model: Model name (e.g., "llama3.1", "qwen2.5")
            base_url: Ollama server URL
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            context_window: Optional context window size (num_ctx)
            role: Caller label for logging
        """
        super().__init__(role=role)
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.context_window = context_window
        self.client = ollama.AsyncClient(host=base_url)

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

        options: Dict[str, Any] = {
            "temperature": kwargs.get("temperature", self.temperature),
            "num_predict": kwargs.get("max_tokens", self.max_tokens),
        }
        if self.context_window:
            options["num_ctx"] = self.context_window

        api_params: Dict[str, Any] = {"model": self.model, "messages": messages, "options": options}
        if tools:
            api_params["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": tool["name"],
                        "description": tool.get("description", ""),
                        "parameters": tool.get("parameters", {}),
                    },
                }
                for tool in tools
            ]

        try:
            response = await self.client.chat(**api_params)
        except Exception as e:
            logger.error(
                f"Ollama generation failed - Model: {self.model}, Base URL: {self.base_url}, Error: {e}",
                exc_info=True,
            )
            raise

        message = response.message
        tool_calls = [
            ToolCall(
                id=str(uuid.uuid4()),
                name=tc.function.name,
                arguments=dict(tc.function.arguments or {}),
            )
            for tc in (message.tool_calls or [])
        ]
        return LLMResponse(text=message.content, tool_calls=tool_calls)

    def get_model_name(self) -> str:
        return self.model
