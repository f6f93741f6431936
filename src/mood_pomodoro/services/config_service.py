"""Configuration service for Mood Pomodoro.

Single source of truth for configuration. It handles:

- Loading and saving ``config.json`` in the platform config directory
- Creating a default config on first run
- Overlaying ``LLM_API_KEY``, ``LLM_API_URL`` and ``LLM_MODEL`` from the
  environment (a ``.env`` file in the working directory is loaded first)
- Dot-separated key access for the ``config`` commands
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from mood_pomodoro.models.config_models import AppConfig

APP_NAME = "mood_pomodoro"

# Environment variable -> attribute of LLMConfig
ENV_OVERRIDES = {
    "LLM_API_KEY": "api_key",
    "LLM_API_URL": "api_url",
    "LLM_MODEL": "model",
}


class ConfigService:
    """Service for managing application configuration.

    ``file_config`` is what lives on disk and is what ``save_config`` writes.
    ``config`` is the effective configuration: the file values with any
    environment overrides applied on top. Secrets coming from the
    environment are therefore never persisted.
    """

    def __init__(self, env: Mapping[str, str] | None = None):
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._env = env if env is not None else os.environ
        self._file_config: AppConfig | None = None
        self._config: AppConfig | None = None

    @property
    def file_config(self) -> AppConfig:
        """Configuration as stored on disk."""
        if self._file_config is None:
            self._file_config = self.load_config()
        return self._file_config

    @property
    def config(self) -> AppConfig:
        """Effective configuration (file values plus environment overrides)."""
        if self._config is None:
            self._config = self.apply_env_overrides(self.file_config)
        return self._config

    @property
    def preferences_dir(self) -> Path:
        """Directory holding the preference store."""
        override = self.config.storage.data_dir
        return Path(override).expanduser() if override else self.data_dir

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._file_config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._file_config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        self._config = None
        return self._file_config

    def save_config(self) -> None:
        """Save the file configuration to storage."""
        if self._file_config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._file_config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def apply_env_overrides(self, config: AppConfig) -> AppConfig:
        """Return a copy of *config* with environment LLM settings applied."""
        overrides = {}
        for env_name, field in ENV_OVERRIDES.items():
            value = self._env.get(env_name)
            if value and value.strip():
                overrides[field] = value.strip()

        if not overrides:
            return config

        llm = config.llm.model_copy(update=overrides)
        return config.model_copy(update={"llm": llm})

    def env_overridden(self, key: str) -> bool:
        """Whether a dot-separated key currently comes from the environment."""
        section, _, field = key.partition(".")
        if section != "llm":
            return False
        for env_name, attr in ENV_OVERRIDES.items():
            if attr == field and (self._env.get(env_name) or "").strip():
                return True
        return False

    def get(self, key: str) -> Any:
        """Get an effective configuration value by dot-separated key."""
        return self.get_from_config(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save it."""
        keys = key.split(".")
        config_dict = self.file_config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                raise KeyError(f"Unknown configuration key '{key}'")
            current = current[k]

        if keys[-1] not in current:
            raise KeyError(f"Unknown configuration key '{key}'")
        current[keys[-1]] = value

        try:
            self._file_config = AppConfig(**config_dict)
        except ValidationError as e:
            raise ValueError(f"Invalid value for '{key}': {e.errors()[0]['msg']}") from e
        self._config = None
        self.save_config()

    def reset(self, key: str | None = None) -> None:
        """Reset configuration (or a single key) to defaults."""
        if key is None:
            self._file_config = AppConfig()
            self._config = None
            self.save_config()
            return

        default_config = AppConfig()
        self.set(key, self.get_from_config(default_config, key))

    @staticmethod
    def get_from_config(config: AppConfig, key: str) -> Any:
        """Get value from a config object using dot notation."""
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                raise KeyError(f"Unknown configuration key '{key}'")
        return value

    def flatten(self) -> dict[str, Any]:
        """Effective configuration as ``{"section.key": value}``."""
        flat = {}
        for section, values in self.config.model_dump().items():
            for k, v in values.items():
                flat[f"{section}.{k}"] = v
        return flat


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    load_dotenv(Path.cwd() / ".env")
    config_service = ConfigService()
    config_service.load_config()
    return config_service
