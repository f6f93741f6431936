"""Chat-completion client that turns mood and recent sessions into coaching text.

Every outcome, including failures, is mapped to a display string. Requests
are sent once and never retried.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from mood_pomodoro.models.config_models import LLMConfig
from mood_pomodoro.models.focus.history import LogEntry

logger = logging.getLogger(__name__)

FEEDBACK_DISABLED = "⚠️ AI disabled: set LLM_API_KEY in your .env file to get feedback."
FEEDBACK_EMPTY = "AI response was empty."
FEEDBACK_RATE_LIMITED = "⚠️ Too many requests, please try again shortly. (429 Too Many Requests)"

SYSTEM_PROMPT = "You are a coach who helps students study with focus."

PROMPT_TEMPLATE = """You are a "personalized focus coach for students".
- mood: {mood} (1=very tired, 10=full of energy)
- recent focus records: {records}

Suggest a focus/break plan for the student's first set today and give one line of motivational feedback.
Keep the output short (2-3 lines).
"""


def build_prompt(mood: int, entries: list[LogEntry]) -> str:
    """User prompt embedding the mood and the serialized recent entries."""
    records = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)
    return PROMPT_TEMPLATE.format(mood=mood, records=records)


def extract_message(data: Any) -> str | None:
    """Pull ``choices[0].message.content`` out of a completion, if present."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


class AIFeedbackClient:
    """Sends one chat-completion request per feedback call."""

    def __init__(self, config: LLMConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.api_url = config.api_url
        self.model = config.model
        self.timeout = config.timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers with bearer authentication."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def build_payload(self, mood: int, entries: list[LogEntry]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(mood, entries)},
            ],
            "max_tokens": self.config.max_tokens,
        }

    async def request_feedback(self, mood: int, entries: list[LogEntry]) -> str:
        """Return coaching text, or a message describing why there is none."""
        if not self.enabled:
            logger.info("AI feedback skipped: no API key configured")
            return FEEDBACK_DISABLED

        payload = self.build_payload(mood, entries)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.api_url, headers=self._get_headers(), json=payload
                )

            if response.status_code == 200:
                text = extract_message(response.json())
                if text and text.strip():
                    logger.info("AI feedback received (%d chars)", len(text.strip()))
                    return text.strip()
                logger.warning("AI feedback response had no message content")
                return FEEDBACK_EMPTY

            if response.status_code == 429:
                logger.warning("AI feedback rate limited")
                return FEEDBACK_RATE_LIMITED

            logger.warning(
                "AI feedback failed: %d %s", response.status_code, response.reason_phrase
            )
            return f"⚠️ Error: {response.status_code} {response.reason_phrase}"

        except (httpx.HTTPError, ValueError) as e:
            logger.warning("AI feedback request error: %s", e)
            return f"⚠️ Network error: {e}"


def get_feedback_client(config: LLMConfig | None = None) -> AIFeedbackClient:
    """Get an AI feedback client for the effective configuration."""
    if config is None:
        from mood_pomodoro.services.config_service import get_config_service

        config = get_config_service().config.llm
    return AIFeedbackClient(config)
