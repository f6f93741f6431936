"""Main entry point for Mood Pomodoro."""

import typer

from mood_pomodoro import __version__
from mood_pomodoro.commands import config, focus, history
from mood_pomodoro.services.config_service import get_config_service
from mood_pomodoro.utils.ui.console import get_console

app = typer.Typer(
    name="mood-pomodoro",
    help="Pomodoro timer that sizes focus sessions by mood, with AI coaching",
    no_args_is_help=True,
)

console = get_console()

# Focus commands sit at the top level: `mood-pomodoro start`
app.command("start")(focus.start_focus)
app.command("feedback")(focus.feedback)
app.add_typer(history.app, name="history", help="Completed focus sessions")
app.add_typer(config.app, name="config", help="Configuration management")
app.command("stats")(history.weekly_stats)


@app.command()
def version() -> None:
    """Show version information and AI feedback status."""
    console.print(f"[bold]Mood Pomodoro[/bold] version [cyan]{__version__}[/cyan]")

    llm = get_config_service().config.llm
    if llm.enabled:
        console.print(f"[green]✓ AI feedback enabled[/green] ({llm.model})")
    else:
        console.print("[yellow]AI feedback disabled: LLM_API_KEY is not set[/yellow]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
