"""Tests for the application logger utility."""

from __future__ import annotations

import logging

from mood_pomodoro.utils.logger import get_logger


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    logger = get_logger()

    assert (tmp_path / "logs" / "mood_pomodoro.log").exists()
    assert isinstance(logger, logging.Logger)
    assert logger.name == "mood_pomodoro"


def test_get_logger_returns_singleton():
    assert get_logger() is get_logger()


def test_get_logger_writes_message(tmp_path):
    logger = get_logger()
    logger.info("hello from test")
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / "logs" / "mood_pomodoro.log").read_text(encoding="utf-8")
    assert "hello from test" in content


def test_child_loggers_share_file(tmp_path):
    child = get_logger("commands")
    assert child.name == "mood_pomodoro.commands"
    child.warning("child message")

    module_logger = logging.getLogger("mood_pomodoro.services.preferences")
    module_logger.warning("module message")

    for handler in get_logger().handlers:
        handler.flush()
    content = (tmp_path / "logs" / "mood_pomodoro.log").read_text(encoding="utf-8")
    assert "[mood_pomodoro.commands] child message" in content
    assert "module message" in content


def test_get_logger_does_not_propagate():
    assert get_logger().propagate is False


def test_file_handler_added_next_to_existing_handlers(tmp_path):
    app_logger = logging.getLogger("mood_pomodoro")
    other = logging.NullHandler()
    app_logger.addHandler(other)
    try:
        get_logger().info("still written")
        for handler in app_logger.handlers:
            handler.flush()
        content = (tmp_path / "logs" / "mood_pomodoro.log").read_text(encoding="utf-8")
        assert "still written" in content
    finally:
        app_logger.removeHandler(other)
