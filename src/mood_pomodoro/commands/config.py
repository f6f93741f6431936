"""Configuration management commands."""

import json

import typer

from mood_pomodoro.services.config_service import get_config_service
from mood_pomodoro.utils.ui.console import get_console
from mood_pomodoro.utils.ui.formatters import format_config_value, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def parse_value(value: str):
    """Interpret CLI text as bool, int, null or plain string."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("null", "none"):
        return None
    if value.isdigit():
        return int(value)
    return value


def _error_message(e: Exception) -> str:
    """KeyError wraps its message in quotes; unwrap it."""
    return e.args[0] if isinstance(e, KeyError) and e.args else str(e)


@app.command("show")
@command_wrapper
def show_config(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON (API key masked)"),
):
    """Show the effective configuration."""
    svc = get_config_service()
    flat = svc.flatten()

    if as_json:
        masked = {
            k: format_config_value(k, v) if k.endswith("api_key") and v else v
            for k, v in flat.items()
        }
        console.print_json(json.dumps(masked))
        return

    console.print(f"[dim]{svc.config_path}[/dim]\n")
    for key, value in flat.items():
        source = " [dim](env)[/dim]" if svc.env_overridden(key) else ""
        console.print(f"[cyan]{key}[/cyan] = {format_config_value(key, value)}{source}")


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., llm.model)"),
    value: str = typer.Argument(..., help="Configuration value"),
):
    """Set a configuration value."""
    svc = get_config_service()
    parsed = parse_value(value)
    try:
        svc.set(key, parsed)
    except (KeyError, ValueError) as e:
        raise AppError(_error_message(e)) from e
    format_success(f"Configuration '{key}' set to '{format_config_value(key, parsed)}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Exit(0)

    svc = get_config_service()
    try:
        svc.reset(key)
    except KeyError as e:
        raise AppError(_error_message(e)) from e

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
