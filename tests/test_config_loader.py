"""Tests for configuration loader."""

from pathlib import Path

import pytest
import yaml

from collaborator.config.config_loader import ConfigLoader, load_config
from collaborator.config.config_schema import AppConfig
from collaborator.llm.factory import create_llm


def base_config(**overrides):
    config = {
        "telegram": {"bot_token": "test_token", "mode": "poll"},
        "llm": {"provider": "ollama", "ollama": {"model": "llama3"}},
    }
    config.update(overrides)
    return config


def write_config(tmp_path: Path, config: dict) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return str(path)


def test_load_config_valid(tmp_path):
    config = load_config(write_config(tmp_path, base_config()))

    assert isinstance(config, AppConfig)
    assert config.telegram.bot_token == "test_token"
    assert config.telegram.require_mention is True
    assert config.llm.provider == "ollama"
    assert config.database.path == "data/collaborator.db"
    assert config.search.provider == "keyword"
    assert config.search.deep_link_template == "https://t.me/c/{conversation_ref}/{activity_id}"
    assert config.agent.timezone == "UTC"
    assert config.agent.enable_debug_commands is True


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config("nonexistent.yaml")


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="empty"):
        load_config(str(path))


def test_environment_variables_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("COLLABORATOR_TEST_TOKEN", "from-env")
    config = base_config(telegram={"bot_token": "${COLLABORATOR_TEST_TOKEN}"})

    assert load_config(write_config(tmp_path, config)).telegram.bot_token == "from-env"


def test_missing_provider_block_is_rejected():
    with pytest.raises(ValueError, match="ollama configuration is required"):
        ConfigLoader.from_dict(base_config(llm={"provider": "ollama"}))


def test_webhook_requires_url():
    with pytest.raises(ValueError, match="webhook_url"):
        ConfigLoader.from_dict(base_config(telegram={"bot_token": "t", "mode": "webhook"}))


def test_azure_requires_endpoint_and_version():
    config = base_config(llm={"provider": "azure_openai", "openai": {"api_key": "k"}})
    with pytest.raises(ValueError, match="azure_endpoint and api_version"):
        ConfigLoader.from_dict(config)


def test_invalid_timezone_is_rejected():
    with pytest.raises(ValueError, match="Invalid timezone"):
        ConfigLoader.from_dict(base_config(agent={"timezone": "Mars/Olympus"}))


def test_allow_lists():
    config = ConfigLoader.from_dict(
        base_config(allowed_conversations=[{"chat_id": -100123}], allowed_users=[{"user_id": 42}])
    )
    assert [c.chat_id for c in config.allowed_conversations] == [-100123]
    assert [u.user_id for u in config.allowed_users] == [42]


def test_role_model_overrides():
    config = ConfigLoader.from_dict(
        base_config(
            llm={
                "provider": "openai",
                "openai": {"api_key": "sk-test", "model": "gpt-4o"},
                "models": {"manager": "gpt-4o-mini"},
            }
        )
    )

    assert config.llm.model_for_role("manager") == "gpt-4o-mini"
    assert config.llm.model_for_role("search") is None
    assert create_llm(config, role="manager").get_model_name() == "gpt-4o-mini"
    assert create_llm(config, role="search").get_model_name() == "gpt-4o"
    assert create_llm(config, role="search").role == "search"
