"""Unit tests for the dashboard (mood_pomodoro.models.focus.ui)."""

from __future__ import annotations

from datetime import datetime
from io import StringIO
from unittest.mock import MagicMock

import pytest
from rich.console import Console
from rich.layout import Layout

from mood_pomodoro.models.focus.history import LogEntry
from mood_pomodoro.models.focus.ui import DashboardDisplay, handle_key


def _string_console() -> tuple[Console, StringIO]:
    """Return a Console that writes to a StringIO buffer."""
    buf = StringIO()
    con = Console(file=buf, force_terminal=False, no_color=True, width=100, height=50)
    return con, buf


def _render(display: DashboardDisplay, now: datetime | None = None) -> str:
    con, buf = _string_console()
    con.print(display.create_layout(now))
    return buf.getvalue()


class FakeKeyboard:
    def __init__(self, keys):
        self.keys = list(keys)
        self.stopped = False

    def get_key(self):
        return self.keys.pop(0) if self.keys else "q"

    def stop(self):
        self.stopped = True


# ---------------------------------------------------------------------------
# handle_key
# ---------------------------------------------------------------------------


class TestHandleKey:
    def test_none_is_ignored(self, make_controller):
        controller = make_controller()
        assert handle_key(None, controller) is True
        assert controller.state.status == "idle"

    def test_quit(self, make_controller):
        assert handle_key("q", make_controller()) is False

    def test_start_pause_reset(self, make_controller, ticker):
        controller = make_controller()
        handle_key("s", controller)
        assert controller.state.status == "running"
        ticker.fire(5)
        handle_key("p", controller)
        assert controller.state.status == "paused"
        assert controller.state.seconds_left == 1495
        handle_key("r", controller)
        assert controller.state.seconds_left == 1500

    def test_mood_keys(self, make_controller):
        controller = make_controller(mood=7)
        handle_key("+", controller)
        assert controller.state.mood == 8
        assert controller.state.seconds_left == 30 * 60
        handle_key("-", controller)
        handle_key("-", controller)
        assert controller.state.mood == 6

    def test_mood_keys_clamp(self, make_controller):
        controller = make_controller(mood=10)
        handle_key("+", controller)
        assert controller.state.mood == 10
        controller.set_mood(1)
        handle_key("-", controller)
        assert controller.state.mood == 1

    def test_feedback_key(self, make_controller):
        controller = make_controller()
        controller.request_feedback = MagicMock()
        handle_key("f", controller)
        controller.request_feedback.assert_called_once()

    def test_unknown_key(self, make_controller):
        assert handle_key("x", make_controller()) is True


# ---------------------------------------------------------------------------
# DashboardDisplay
# ---------------------------------------------------------------------------


class TestDashboardDisplay:
    def test_create_layout_returns_layout(self, make_controller):
        display = DashboardDisplay(make_controller())
        assert isinstance(display.create_layout(), Layout)

    def test_idle_render(self, make_controller):
        out = _render(DashboardDisplay(make_controller()))
        assert "Focus" in out
        assert "25:00" in out
        assert "Mood 7/10" in out
        assert "No records yet" in out
        assert "'s' start" in out

    def test_observer_hooks_update_render(self, make_controller):
        display = DashboardDisplay(make_controller())
        display.console = MagicMock()
        display.dirty = False

        display.on_notice("Focus completed! Break started ☕")
        display.on_feedback("Nice work")
        assert display.dirty
        display.console.bell.assert_called_once()

        out = _render(display)
        assert "Focus completed! Break started" in out
        assert "AI: Nice work" in out

    def test_break_render_shows_dots_and_history(self, make_controller, ticker):
        controller = make_controller(mood=9)
        display = DashboardDisplay(controller)
        display.console = MagicMock()
        controller.subscribe(display)
        controller.start()
        ticker.fire(1800)

        out = _render(display, now=datetime.now())
        assert "Break" in out
        assert "05:00" in out
        assert "●" in out
        assert "Total focus this week: 30 minutes" in out
        assert "Mood 9" in out
        assert "30m" in out

    def test_paused_footer(self, make_controller, ticker):
        controller = make_controller()
        display = DashboardDisplay(controller)
        controller.subscribe(display)
        controller.start()
        controller.pause()
        out = _render(display)
        assert "paused" in out
        assert "'s' resume" in out

    def test_history_panel_lists_entries(self, make_controller, session_log):
        session_log.append(LogEntry(date="2026-10-19T09:00:00", mood=4, focus_minutes=25))
        out = _render(DashboardDisplay(make_controller()))
        assert "2026-10-19 09:00" in out
        assert "4/10" in out


class TestDashboardRun:
    @pytest.mark.asyncio
    async def test_run_processes_keys_until_quit(self, make_controller, ticker):
        controller = make_controller()
        con, _ = _string_console()
        display = DashboardDisplay(controller, console=con)
        keyboard = FakeKeyboard(["s", None, "p"])

        await display.run(keyboard=keyboard)

        assert keyboard.stopped
        assert controller.state.status == "paused"
        # The display unsubscribes on exit
        display.dirty = False
        controller.reset()
        assert display.dirty is False
