"""Configuration models for Mood Pomodoro.

The on-disk ``config.json`` is validated into :class:`AppConfig`. LLM
settings can additionally be overridden from the environment (see
:mod:`mood_pomodoro.services.config_service`).
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_LLM_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_LLM_MODEL = "gpt-4o-mini"


class LLMConfig(BaseModel):
    """Chat-completion API configuration."""

    api_key: str | None = Field(default=None, description="Bearer token; unset disables AI feedback")
    api_url: str = Field(default=DEFAULT_LLM_API_URL)
    model: str = Field(default=DEFAULT_LLM_MODEL)
    max_tokens: int = Field(default=150, gt=0)
    timeout: int = Field(default=30, gt=0)

    @field_validator("api_url", "model")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty URL or model names."""
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()

    @property
    def enabled(self) -> bool:
        """Whether an API key is configured."""
        return bool(self.api_key and self.api_key.strip())


class StorageConfig(BaseModel):
    """Local storage configuration."""

    log_key: str = Field(default="logs", description="Preference key holding the session log")
    data_dir: str | None = Field(default=None, description="Override for the preferences directory")


class AppConfig(BaseModel):
    """Main Mood Pomodoro configuration"""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
