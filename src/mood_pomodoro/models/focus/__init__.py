"""Focus mode - mood-driven Pomodoro timer."""

from .controller import SessionController, SessionObserver
from .history import LogEntry, SessionLog, WeeklyAggregate
from .state import (
    BREAK_SECONDS,
    SessionState,
    focus_minutes_for_mood,
    focus_seconds_for_mood,
)
from .ticker import AsyncioTicker, Ticker

__all__ = [
    "AsyncioTicker",
    "BREAK_SECONDS",
    "LogEntry",
    "SessionController",
    "SessionLog",
    "SessionObserver",
    "SessionState",
    "Ticker",
    "WeeklyAggregate",
    "focus_minutes_for_mood",
    "focus_seconds_for_mood",
]
