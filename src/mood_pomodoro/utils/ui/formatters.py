"""Output formatters for Mood Pomodoro."""

from datetime import datetime
from typing import Any

from rich.table import Table

from mood_pomodoro.models.focus.history import LogEntry, WeeklyAggregate

from .console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_set_dots(completed: int, total: int = 4) -> str:
    """Filled circles for completed sets, hollow for the rest."""
    return " ".join("●" if i < completed else "○" for i in range(total))


def format_entry_date(date: str) -> str:
    """Shorten an ISO timestamp for display, falling back to the raw text."""
    try:
        return datetime.fromisoformat(date.replace("Z", "+00:00")).strftime(
            "%Y-%m-%d %H:%M"
        )
    except ValueError:
        return date


def build_history_table(entries: list[LogEntry], title: str | None = None) -> Table:
    """Build a table of log entries, newest first."""
    table = Table(title=title, show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Mood", justify="right")
    table.add_column("Focus", justify="right")
    table.add_column("Result", justify="center")

    for entry in entries:
        table.add_row(
            format_entry_date(entry.date),
            f"{entry.mood}/10",
            f"{entry.focus_minutes}m",
            "[green]✓[/green]" if entry.result == "focus_done" else entry.result,
        )
    return table


def format_weekly_aggregate(aggregate: WeeklyAggregate) -> list[str]:
    """Lines describing this week's focus totals."""
    return [
        f"Total focus this week: {aggregate.total_minutes} minutes",
        f"Average mood score: {aggregate.average_mood}/10",
        f"Completed sets: {aggregate.count} reps",
    ]


def format_config_value(key: str, value: Any) -> str:
    """Render a config value, masking the API key."""
    if value is None or value == "":
        return "[dim]unset[/dim]"
    if key.endswith("api_key"):
        text = str(value)
        return f"{text[:4]}…{text[-2:]}" if len(text) > 8 else "****"
    return str(value)
