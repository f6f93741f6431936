"""Mood Pomodoro - mood-driven focus timer with AI coaching."""

__version__ = "0.1.0"
