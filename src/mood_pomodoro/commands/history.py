"""Session history and weekly statistics commands."""

import typer

from mood_pomodoro.utils.ui.console import get_console
from mood_pomodoro.utils.ui.formatters import (
    build_history_table,
    format_success,
    format_weekly_aggregate,
)

from .decorators import AppError, command_wrapper
from .utils import get_session_log

console = get_console()
app = typer.Typer(help="Completed focus sessions")


@app.callback(invoke_without_command=True)
def show_history(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of sessions to show"),
):
    """Show completed focus sessions, newest first."""
    if ctx.invoked_subcommand is not None:
        return
    _show_history(limit)


@command_wrapper
def _show_history(limit: int):
    log = get_session_log()
    if not len(log):
        console.print("[yellow]No focus sessions logged yet[/yellow]")
        return

    entries = log.recent(limit)
    console.print(
        build_history_table(entries, title=f"Focus Sessions ({len(entries)} of {len(log)})")
    )


@app.command("clear")
@command_wrapper
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete every logged focus session."""
    log = get_session_log()
    if not yes and not typer.confirm(f"Delete {len(log)} logged sessions?", default=False):
        console.print("[yellow]Cancelled.[/yellow]")
        raise typer.Exit(0)

    if not log.clear():
        raise AppError("Could not update the preference store")
    format_success("Session history cleared")


@command_wrapper
def weekly_stats():
    """Show this week's focus total, average mood and completed sets."""
    log = get_session_log()
    if not len(log):
        console.print("No records yet")
        return

    console.print("\n[bold]This Week[/bold]\n")
    for line in format_weekly_aggregate(log.weekly_aggregate()):
        console.print(line)
    console.print()
