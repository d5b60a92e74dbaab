"""Google Gemini provider."""

import json
import logging
import re
import uuid
from typing import Any, Dict, List, Optional

import google.genai as genai

from .base import BaseLLM, LLMResponse, ToolCall

logger = logging.getLogger(__name__)

_INLINE_TOOL_CALL = re.compile(r'\{[^{}]*"name"[^{}]*"(?:parameters|arguments)"\s*:\s*\{.*\}\s*\}', re.DOTALL)


class GeminiLLM(BaseLLM):
    """Gemini models through the google-genai async client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        safety_settings: Optional[list] = None,
        role: str = "llm",
    ):
        """
        Initialize the provider.

        Args:
            api_key: Gemini API key
            model: Model name
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            safety_settings: Optional safety settings
            role: Caller label for logging
        """
        super().__init__(role=role)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.safety_settings = safety_settings
        self.client = genai.Client(api_key=api_key)

    async def _generate_impl(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        config: Dict[str, Any] = {
            "temperature": kwargs.get("temperature", self.temperature),
            "max_output_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if system_prompt:
            config["system_instruction"] = system_prompt
        if self.safety_settings:
            config["safety_settings"] = self.safety_settings
        if tools:
            config["tools"] = [
                {
                    "function_declarations": [
                        {
                            "name": tool["name"],
                            "description": tool.get("description", ""),
                            "parameters": tool.get("parameters", {}),
                        }
                        for tool in tools
                    ]
                }
            ]

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=config,
        )

        tool_calls: List[ToolCall] = []
        texts: List[str] = []
        for candidate in (response.candidates or [])[:1]:
            parts = candidate.content.parts if candidate.content and candidate.content.parts else []
            for part in parts:
                if part.function_call:
                    tool_calls.append(
                        ToolCall(
                            id=str(uuid.uuid4()),
                            name=part.function_call.name,
                            arguments=dict(part.function_call.args or {}),
                        )
                    )
                elif part.text:
                    texts.append(part.text)

        text = "".join(texts) or None
        if not tool_calls and text:
            inline = self._parse_inline_tool_call(text)
            if inline:
                return LLMResponse(text=None, tool_calls=[inline])

        return LLMResponse(text=text, tool_calls=tool_calls)

    def _parse_inline_tool_call(self, text: str) -> Optional[ToolCall]:
        """
        Recover a tool call the model wrote out as JSON text.

        Args:
            text: Model output

        Returns:
            ToolCall if the text is a {"name", "parameters"} object, else None
        """
        match = _INLINE_TOOL_CALL.search(text.strip())
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
        if not isinstance(data, dict) or "name" not in data:
            return None

        arguments = data.get("parameters", data.get("arguments", {}))
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError:
                arguments = {"query": arguments}
        logger.debug(f"Parsed inline tool call: {data['name']}")
        return ToolCall(id=str(uuid.uuid4()), name=data["name"], arguments=arguments if isinstance(arguments, dict) else {})

    def get_model_name(self) -> str:
        return self.model
