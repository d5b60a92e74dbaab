"""Base tool interface."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    data: Any
    error: Optional[str] = None
    message: Optional[str] = None


def success_result(**payload: Any) -> ToolResult:
    """Wrap a payload as a successful JSON tool result."""
    body = {"status": "success", **payload}
    return ToolResult(success=True, data=body, message=json.dumps(body, default=str, ensure_ascii=False))


def error_result(message: str) -> ToolResult:
    """Wrap an error message as a JSON tool result."""
    body = {"status": "error", "message": message}
    return ToolResult(success=False, data=body, error=json.dumps(body, ensure_ascii=False))


class BaseTool(ABC):
    """Abstract base class for all tools.

    Tools declare their arguments as a pydantic ``request_model``; the
    model's JSON schema is what the LLM sees.
    """

    request_model: Optional[Type[BaseModel]] = None

    def __init__(self, name: str, description: str):
        """
        Initialize tool.

        Args:
            name: Tool name (used for registration)
            description: Tool description shown to the model
        """
        self.name = name
        self.description = description

    @abstractmethod
    async def execute(self, context: Any, **kwargs) -> ToolResult:
        """
        Execute the tool.

        Args:
            context: Run dependencies (a CapabilityConfig or the manager's turn state)
            **kwargs: Fields of request_model

        Returns:
            ToolResult with execution result
        """
        pass

    def get_schema(self) -> Dict[str, Any]:
        """
        Get the tool schema derived from request_model.

        Returns:
            Dictionary with name, description and JSON-schema parameters
        """
        parameters: Dict[str, Any] = {"type": "object", "properties": {}, "required": []}
        if self.request_model is not None:
            json_schema = self.request_model.model_json_schema()
            parameters["properties"] = json_schema.get("properties", {})
            parameters["required"] = json_schema.get("required", [])

        return {
            "name": self.name,
            "description": self.description,
            "parameters": parameters,
        }

    def get_name(self) -> str:
        """Get tool name."""
        return self.name

    def get_description(self) -> str:
        """Get tool description."""
        return self.description
