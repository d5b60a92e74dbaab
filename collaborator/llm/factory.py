"""Construction of LLM providers from configuration."""

import logging

from ..config.config_schema import AppConfig
from .base import BaseLLM

logger = logging.getLogger(__name__)


def create_llm(config: AppConfig, role: str = "manager") -> BaseLLM:
    """
    Create the LLM used by one part of the assistant.

    A per-role model override in ``llm.models`` replaces the provider's
    default model for that role.

    Args:
        config: Application configuration
        role: "manager", "summarizer", "action_items" or "search"

    Returns:
        BaseLLM instance

    Raises:
        ValueError: If the provider is unknown or its configuration is missing
    """
    provider = config.llm.provider
    override = config.llm.model_for_role(role)

    if provider == "ollama":
        if not config.llm.ollama:
            raise ValueError("Ollama configuration is required")
        from .ollama_llm import OllamaLLM

        settings = config.llm.ollama
        return OllamaLLM(
            model=override or settings.model,
            base_url=settings.base_url,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            context_window=settings.context_window,
            role=role,
        )

    if provider in ("openai", "azure_openai"):
        if not config.llm.openai:
            raise ValueError("OpenAI configuration is required")
        from .openai_llm import OpenAILLM

        settings = config.llm.openai
        return OpenAILLM(
            api_key=settings.api_key,
            model=override or settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            organization_id=settings.organization_id,
            azure_endpoint=settings.azure_endpoint if provider == "azure_openai" else None,
            api_version=settings.api_version,
            role=role,
        )

    if provider == "gemini":
        if not config.llm.gemini:
            raise ValueError("Gemini configuration is required")
        from .gemini_llm import GeminiLLM

        settings = config.llm.gemini
        return GeminiLLM(
            api_key=settings.api_key,
            model=override or settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            safety_settings=settings.safety_settings,
            role=role,
        )

    raise ValueError(f"Unknown LLM provider: {provider}")
