"""Configuration loader for YAML files."""

import os
from pathlib import Path
from typing import Any

import yaml

from .config_schema import AppConfig


def _expand_env(value: Any) -> Any:
    """Expand ${VAR} references in every string of a loaded YAML tree."""
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


class ConfigLoader:
    """Load and validate configuration from YAML files."""

    @staticmethod
    def load_config(path: str = "config.yaml") -> AppConfig:
        """
        Load configuration from a YAML file.

        String values may reference environment variables as ${NAME}, which
        keeps API keys and bot tokens out of the file.

        Args:
            path: Path to configuration file

        Returns:
            Validated AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is empty or invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)

        if not config_dict:
            raise ValueError("Configuration file is empty")

        return ConfigLoader.from_dict(config_dict)

    @staticmethod
    def from_dict(config: dict) -> AppConfig:
        """
        Build and validate configuration from a dictionary.

        Raises:
            ValueError: If config is invalid
        """
        app_config = AppConfig(**_expand_env(config))
        app_config.validate()
        return app_config


def load_config(path: str = "config.yaml") -> AppConfig:
    """Convenience wrapper around ConfigLoader.load_config."""
    return ConfigLoader.load_config(path)
