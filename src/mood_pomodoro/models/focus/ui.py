"""Full-screen dashboard for the mood Pomodoro timer."""

from __future__ import annotations

import asyncio
from datetime import datetime

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from mood_pomodoro.utils.ui.formatters import (
    build_history_table,
    format_set_dots,
    format_weekly_aggregate,
)

from .controller import SessionController, SessionObserver
from .state import BREAK_SECONDS, MAX_MOOD, MIN_MOOD, SETS_PER_CYCLE, SessionState, focus_seconds_for_mood

HISTORY_ROWS = 8
POLL_INTERVAL = 0.1

KEY_HINTS = {
    "idle": "'s' start  •  '+'/'-' mood  •  'f' AI feedback  •  'q' quit",
    "running": "'p' pause  •  'r' reset  •  'f' AI feedback  •  'q' quit",
    "paused": "'s' resume  •  'r' reset  •  'f' AI feedback  •  'q' quit",
}


def handle_key(key: str | None, controller: SessionController) -> bool:
    """Apply one keypress to the controller. Returns False to quit."""
    if key is None:
        return True

    state = controller.state
    if key == "q":
        return False
    if key == "s":
        controller.start()
    elif key == "p":
        controller.pause()
    elif key == "r":
        controller.reset()
    elif key in ("+", "="):
        if state.mood < MAX_MOOD:
            controller.set_mood(state.mood + 1)
    elif key in ("-", "_"):
        if state.mood > MIN_MOOD:
            controller.set_mood(state.mood - 1)
    elif key == "f":
        controller.request_feedback()
    return True


class DashboardDisplay(SessionObserver):
    """Renders controller state and keeps the latest notice and feedback."""

    def __init__(self, controller: SessionController, console: Console | None = None):
        self.controller = controller
        self.console = console or Console()
        self.state = controller.state
        self.notice: str | None = None
        self.feedback: str | None = None
        self.dirty = True

    def on_state_changed(self, state: SessionState) -> None:
        self.state = state
        self.dirty = True

    def on_notice(self, message: str) -> None:
        self.notice = message
        self.dirty = True
        self.console.bell()

    def on_feedback(self, text: str) -> None:
        self.feedback = text
        self.dirty = True

    def create_layout(self, now: datetime | None = None) -> Layout:
        """Create the dashboard layout with all components."""
        state = self.state
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body", ratio=2),
            Layout(name="history", ratio=2),
            Layout(name="footer", size=3),
        )

        label = "☕ Break" if state.is_break else "🍅 Focus"
        color = "green" if state.is_break else "cyan"
        if state.status == "paused":
            label += " (paused)"
            color = "yellow"
        header = Text(f"{label}    {format_set_dots(state.completed_sets, SETS_PER_CYCLE)}",
                      style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header, vertical="middle"))

        layout["body"].update(
            Panel(self._create_body_content(state, now), title="Mood Pomodoro (AI)")
        )
        layout["history"].update(self._create_history_panel())

        footer = Text(KEY_HINTS[state.status], style="dim", justify="center")
        layout["footer"].update(Align.center(footer, vertical="middle"))
        return layout

    def _create_body_content(self, state: SessionState, now: datetime | None) -> Group:
        components = []

        mood_style = "bold" if state.mood_editable else "dim"
        components.append(
            Text(f"Mood {state.mood}/10", style=mood_style, justify="center")
        )
        components.append(Text(""))

        if state.status == "paused":
            timer_color = "yellow"
        elif state.is_break:
            timer_color = "green"
        elif state.seconds_left < 60:
            timer_color = "red"
        else:
            timer_color = "cyan"
        components.append(Text(state.mmss, style=f"bold {timer_color}", justify="center"))

        total = BREAK_SECONDS if state.is_break else focus_seconds_for_mood(state.mood)
        elapsed = max(0, total - state.seconds_left)
        progress_pct = min(100, int(elapsed / total * 100)) if total > 0 else 0
        bar_width = 40
        filled = int(bar_width * progress_pct / 100)
        components.append(
            Text("▓" * filled + "░" * (bar_width - filled) + f"  {progress_pct}%",
                 style="dim", justify="center")
        )
        components.append(Text(""))

        aggregate = self.controller.log.weekly_aggregate(now)
        if len(self.controller.log):
            for line in format_weekly_aggregate(aggregate):
                components.append(Text(line, justify="center"))
        else:
            components.append(Text("No records yet", style="dim", justify="center"))

        if self.notice:
            components.append(Text(""))
            components.append(Text(self.notice, style="bold magenta", justify="center"))
        if self.feedback:
            components.append(Text(""))
            components.append(Text(f"AI: {self.feedback}", style="italic", justify="center"))

        return Group(*components)

    def _create_history_panel(self) -> Panel:
        entries = self.controller.log.recent(HISTORY_ROWS)
        if not entries:
            return Panel(Text("No focus sessions logged yet", style="dim"), title="History")
        return Panel(build_history_table(entries), title=f"History ({len(self.controller.log)})")

    async def run(self, keyboard=None) -> None:
        """Drive the dashboard until the user quits."""
        from .keyboard import KeyboardHandler

        keyboard = keyboard or KeyboardHandler()
        unsubscribe = self.controller.subscribe(self)
        try:
            with Live(
                self.create_layout(),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    if not handle_key(keyboard.get_key(), self.controller):
                        break
                    if self.dirty:
                        live.update(self.create_layout())
                        self.dirty = False
                    await asyncio.sleep(POLL_INTERVAL)
        finally:
            unsubscribe()
            keyboard.stop()
