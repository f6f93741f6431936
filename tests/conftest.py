"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem, environment
and network state.
"""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pytest

from mood_pomodoro.models.focus.controller import SessionController, SessionObserver
from mood_pomodoro.models.focus.history import LogEntry, SessionLog
from mood_pomodoro.services.preferences import PreferenceStore

LLM_ENV_VARS = ("LLM_API_KEY", "LLM_API_URL", "LLM_MODEL")


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path, monkeypatch):
    """Keep platform dirs, .env files, LLM variables and logging inside tmp_path."""
    import mood_pomodoro.utils.logger as logger_mod
    from mood_pomodoro.services.config_service import get_config_service

    for name in LLM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    original_logger = logger_mod._logger
    logger_mod._logger = None
    _drop_file_handlers()
    get_config_service.cache_clear()

    with patch(
        "mood_pomodoro.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ), patch(
        "mood_pomodoro.services.config_service.user_data_dir",
        return_value=str(tmp_path / "data"),
    ), patch(
        "mood_pomodoro.utils.logger.user_log_dir",
        return_value=str(tmp_path / "logs"),
    ):
        yield

    get_config_service.cache_clear()
    _drop_file_handlers()
    logger_mod._logger = original_logger


def _drop_file_handlers() -> None:
    """Detach file handlers from the app logger, leaving pytest capture alone."""
    app_logger = logging.getLogger("mood_pomodoro")
    for handler in list(app_logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            handler.close()
            app_logger.removeHandler(handler)


# ---------------------------------------------------------------------------
# Timer doubles
# ---------------------------------------------------------------------------


class FakeTicker:
    """Manual ticker: tests call fire() instead of waiting for real seconds."""

    def __init__(self):
        self.callback = None
        self.starts = 0
        self.cancels = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, callback) -> None:
        self.callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self.callback = None
        self.cancels += 1

    def fire(self, times: int = 1) -> int:
        """Deliver up to *times* ticks; stops early once cancelled."""
        fired = 0
        for _ in range(times):
            if self.callback is None:
                break
            self.callback()
            fired += 1
        return fired


class FakeFeedbackClient:
    """Records feedback requests and answers with a fixed text."""

    def __init__(self, text: str = "Great focus today. Keep it up!"):
        self.text = text
        self.calls: list[tuple[int, list[LogEntry]]] = []

    async def request_feedback(self, mood: int, entries: list[LogEntry]) -> str:
        self.calls.append((mood, list(entries)))
        return self.text


class RecordingObserver(SessionObserver):
    def __init__(self):
        self.states = []
        self.notices = []
        self.feedback = []

    def on_state_changed(self, state):
        self.states.append(state)

    def on_notice(self, message):
        self.notices.append(message)

    def on_feedback(self, text):
        self.feedback.append(text)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store(tmp_path) -> PreferenceStore:
    """Preference store in an isolated directory."""
    return PreferenceStore(tmp_path / "prefs")


@pytest.fixture()
def session_log(store) -> SessionLog:
    log = SessionLog(store)
    log.load()
    return log


@pytest.fixture()
def ticker() -> FakeTicker:
    return FakeTicker()


@pytest.fixture()
def feedback_client() -> FakeFeedbackClient:
    return FakeFeedbackClient()


@pytest.fixture()
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def make_controller(session_log, ticker, observer):
    """Factory building a SessionController wired to the fakes above."""

    def _make(mood: int = 7, feedback_client=None) -> SessionController:
        controller = SessionController(
            log=session_log,
            ticker=ticker,
            feedback_client=feedback_client,
            mood=mood,
        )
        controller.subscribe(observer)
        return controller

    return _make
