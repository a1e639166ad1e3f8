"""Configuration service for managing STRIDE CLI configuration.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and saving config.json
- Dotted-key get/set of individual settings
- Resolving the data directory used by the local storage adapter
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from stride_cli.models.config_models import AppConfig
from stride_cli.utils.logger import get_component_logger

_APP_NAME = "stride_cli"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._log = get_component_logger("config")

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage.

        A missing file is created with defaults; a corrupt one is replaced by
        defaults in memory (the file itself is left for inspection).
        """
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            self._log.warning("Invalid config at %s, using defaults: %s", self.config_path, e)
            self._config = AppConfig()

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> None:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (e.g., "sync.rollback")."""
        value: Any = self.config
        for part in key.split("."):
            if isinstance(value, BaseModel) and part in type(value).model_fields:
                value = getattr(value, part)
            else:
                raise KeyError(f"Unknown config key: {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value fails validation
        """
        self.get(key)

        config_dict = self.config.model_dump()
        parts = key.split(".")
        current = config_dict
        for part in parts[:-1]:
            current = current[part]
        current[parts[-1]] = value

        try:
            self._config = AppConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {key}: {e}") from e
        self.save_config()

    def get_data_dir(self) -> Path:
        """Directory used by the file storage backend."""
        override = self.config.storage.data_dir
        return Path(override).expanduser() if override else self.data_dir


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
