"""Shared helpers for building services inside commands."""

import typer

from mood_pomodoro.models.focus.history import SessionLog
from mood_pomodoro.models.focus.state import MAX_MOOD, MIN_MOOD
from mood_pomodoro.services.config_service import get_config_service
from mood_pomodoro.services.preferences import PreferenceStore


def get_session_log() -> SessionLog:
    """SessionLog bound to the configured preference store, already loaded."""
    svc = get_config_service()
    store = PreferenceStore(svc.preferences_dir)
    log = SessionLog(store, key=svc.config.storage.log_key)
    log.load()
    return log


def mood_option(default: int | None = None, help_text: str = "Mood from 1 (tired) to 10 (energetic)"):
    """A --mood/-m option constrained to 1..10."""
    return typer.Option(
        default,
        "--mood",
        "-m",
        min=MIN_MOOD,
        max=MAX_MOOD,
        help=help_text,
    )
