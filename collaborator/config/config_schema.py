"""Pydantic models for configuration validation."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

LLM_ROLES = ("manager", "summarizer", "action_items", "search")


class TelegramConfig(BaseModel):
    """Telegram bot configuration."""

    bot_token: str = Field(..., description="Telegram bot token")
    mode: Literal["poll", "webhook"] = Field(default="poll", description="Mode: 'poll' or 'webhook'")
    webhook_url: Optional[str] = Field(default=None, description="Webhook URL (required if mode is webhook)")
    webhook_port: int = Field(default=8000, gt=0, description="Local port for the webhook server")
    poll_interval: float = Field(default=1.0, gt=0, description="Polling interval in seconds")
    require_mention: bool = Field(default=True, description="In groups, only respond when the bot is @mentioned")
    bot_username: Optional[str] = Field(default=None, description="Bot username (auto-detected if not provided)")


class AllowedConversation(BaseModel):
    """Allowed conversation configuration."""

    chat_id: int = Field(..., description="Telegram chat ID")


class AllowedUser(BaseModel):
    """Allowed user configuration."""

    user_id: int = Field(..., description="Telegram user ID")


class OllamaConfig(BaseModel):
    """Ollama LLM configuration."""

    base_url: str = Field(default="http://localhost:11434", description="Ollama base URL")
    model: str = Field(..., description="Model name")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Temperature")
    max_tokens: int = Field(default=2048, gt=0, description="Maximum tokens")
    context_window: Optional[int] = Field(default=None, description="Context window size")


class OpenAIConfig(BaseModel):
    """OpenAI or Azure OpenAI configuration."""

    api_key: str = Field(..., description="API key")
    model: str = Field(default="gpt-4o", description="Model or Azure deployment name")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Temperature")
    max_tokens: int = Field(default=2048, gt=0, description="Maximum tokens")
    organization_id: Optional[str] = Field(default=None, description="Organization ID")
    azure_endpoint: Optional[str] = Field(default=None, description="Azure OpenAI resource endpoint")
    api_version: Optional[str] = Field(default=None, description="Azure OpenAI API version")


class GeminiConfig(BaseModel):
    """Gemini LLM configuration."""

    api_key: str = Field(..., description="Gemini API key")
    model: str = Field(default="gemini-2.0-flash", description="Model name")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Temperature")
    max_tokens: int = Field(default=2048, gt=0, description="Maximum tokens")
    safety_settings: Optional[list] = Field(default=None, description="Safety settings")


class RoleModelsConfig(BaseModel):
    """Per-role model overrides. Unset roles use the provider's model."""

    manager: Optional[str] = Field(default=None, description="Model for routing decisions")
    summarizer: Optional[str] = Field(default=None, description="Model for the summarizer capability")
    action_items: Optional[str] = Field(default=None, description="Model for the action items capability")
    search: Optional[str] = Field(default=None, description="Model for the search capability")


class LLMConfig(BaseModel):
    """LLM configuration."""

    provider: Literal["ollama", "openai", "azure_openai", "gemini"] = Field(
        ..., description="Provider: 'ollama', 'openai', 'azure_openai' or 'gemini'"
    )
    ollama: Optional[OllamaConfig] = Field(default=None, description="Ollama configuration")
    openai: Optional[OpenAIConfig] = Field(default=None, description="OpenAI / Azure OpenAI configuration")
    gemini: Optional[GeminiConfig] = Field(default=None, description="Gemini configuration")
    models: RoleModelsConfig = Field(default_factory=RoleModelsConfig, description="Per-role model overrides")

    def model_for_role(self, role: str) -> Optional[str]:
        """Configured override for a role, or None."""
        return getattr(self.models, role, None)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = Field(default="data/collaborator.db", description="SQLite database path")


class SearchConfig(BaseModel):
    """Message search configuration."""

    provider: Literal["keyword", "semantic"] = Field(default="keyword", description="Search provider")
    deep_link_template: str = Field(
        default="https://t.me/c/{conversation_ref}/{activity_id}",
        description="Template for message links; fields: conversation_id, conversation_ref, activity_id",
    )
    max_results: int = Field(default=10, ge=1, le=100, description="Default result cap")
    vector_db_path: str = Field(default="data/vector_db", description="Vector store path (semantic provider)")
    embedding_model: str = Field(default="all-MiniLM-L6-v2", description="Sentence transformer model")


class AgentConfig(BaseModel):
    """Assistant behaviour configuration."""

    timezone: str = Field(
        default="UTC",
        description="Default timezone (e.g., 'America/New_York', 'UTC', 'Asia/Tokyo')",
    )
    enable_debug_commands: bool = Field(default=True, description="Handle msg.db, clear.convo and friends")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone string using zoneinfo."""
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"Invalid timezone: '{v}'. "
                f"Must be a valid IANA timezone (e.g., 'America/New_York', 'UTC', 'Asia/Tokyo')"
            )
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    telegram: TelegramConfig = Field(..., description="Telegram configuration")
    allowed_conversations: List[AllowedConversation] = Field(
        default_factory=list, description="Allowed conversation IDs"
    )
    allowed_users: List[AllowedUser] = Field(default_factory=list, description="Allowed user IDs")
    llm: LLMConfig = Field(..., description="LLM configuration")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig, description="Database configuration")
    search: SearchConfig = Field(default_factory=SearchConfig, description="Search configuration")
    agent: AgentConfig = Field(default_factory=AgentConfig, description="Assistant configuration")

    def validate(self) -> None:
        """Validate configuration consistency."""
        if self.telegram.mode == "webhook" and not self.telegram.webhook_url:
            raise ValueError("webhook_url is required when mode is 'webhook'")

        provider_configs = {
            "ollama": self.llm.ollama,
            "openai": self.llm.openai,
            "azure_openai": self.llm.openai,
            "gemini": self.llm.gemini,
        }
        if not provider_configs[self.llm.provider]:
            block = "openai" if self.llm.provider == "azure_openai" else self.llm.provider
            raise ValueError(f"{block} configuration is required when provider is '{self.llm.provider}'")

        if self.llm.provider == "azure_openai":
            if not self.llm.openai.azure_endpoint or not self.llm.openai.api_version:
                raise ValueError("azure_endpoint and api_version are required when provider is 'azure_openai'")
