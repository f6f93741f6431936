"""Tests for the top-level CLI wiring."""

from __future__ import annotations

import re

from typer.testing import CliRunner

from mood_pomodoro import __version__
from mood_pomodoro.main import app

runner = CliRunner()


def strip_ansi(text: str) -> str:
    ansi = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi.sub("", text)


def test_version_without_key():
    result = runner.invoke(app, ["version"])
    out = strip_ansi(result.stdout)
    assert result.exit_code == 0
    assert __version__ in out
    assert "AI feedback disabled" in out


def test_version_with_key(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "sk-test")
    monkeypatch.setenv("LLM_MODEL", "tiny-model")
    result = runner.invoke(app, ["version"])
    out = strip_ansi(result.stdout)
    assert "AI feedback enabled" in out
    assert "tiny-model" in out


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])
    out = strip_ansi(result.stdout)
    assert result.exit_code == 0
    for name in ("start", "feedback", "history", "stats", "config", "version"):
        assert name in out


def test_typo_suggests_command():
    result = runner.invoke(app, ["stat"])
    out = strip_ansi(result.output)
    assert result.exit_code == 2
    assert "No such command" in out
    assert "stats" in out


def test_unknown_command_without_match():
    result = runner.invoke(app, ["zzzzzz"])
    assert result.exit_code == 2
