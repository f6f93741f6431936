"""Focus timer commands: the interactive dashboard and one-shot AI feedback."""

from mood_pomodoro.models.focus.controller import SessionController
from mood_pomodoro.models.focus.history import RECENT_LIMIT
from mood_pomodoro.models.focus.state import DEFAULT_MOOD, focus_minutes_for_mood
from mood_pomodoro.models.focus.ticker import AsyncioTicker
from mood_pomodoro.models.focus.ui import DashboardDisplay
from mood_pomodoro.services.ai_feedback import get_feedback_client
from mood_pomodoro.utils.ui.console import get_console
from mood_pomodoro.utils.ui.formatters import format_warning

from .decorators import command_wrapper
from .utils import get_session_log, mood_option

console = get_console()


@command_wrapper
async def start_focus(
    mood: int = mood_option(DEFAULT_MOOD, "Starting mood (1-10), adjustable with +/-"),
):
    """Open the full-screen focus dashboard."""
    log = get_session_log()
    feedback_client = get_feedback_client()
    if not feedback_client.enabled:
        format_warning("LLM_API_KEY is not set; AI feedback is disabled.")

    controller = SessionController(
        log=log,
        ticker=AsyncioTicker(),
        feedback_client=feedback_client,
        mood=mood,
    )
    display = DashboardDisplay(controller, console)

    try:
        await display.run()
    finally:
        state = controller.state
        controller.close()

    console.print(
        f"\n[bold]Session closed[/bold] ({len(log)} focus sessions logged, "
        f"{state.completed_sets}/4 sets in this cycle)"
    )


@command_wrapper
async def feedback(
    mood: int = mood_option(DEFAULT_MOOD, "Current mood (1-10)"),
):
    """Ask the AI coach for a plan based on mood and recent sessions."""
    log = get_session_log()
    client = get_feedback_client()

    console.print(
        f"[dim]Mood {mood}/10 → {focus_minutes_for_mood(mood)} min focus. "
        "Generating AI feedback...[/dim]"
    )
    text = await client.request_feedback(mood, log.recent(RECENT_LIMIT))
    console.print(text)
