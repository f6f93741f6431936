"""Focus/break state machine driven by a one-second ticker."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from .history import RECENT_LIMIT, LogEntry, SessionLog
from .state import (
    BREAK_SECONDS,
    DEFAULT_MOOD,
    SETS_PER_CYCLE,
    SessionState,
    focus_minutes_for_mood,
    focus_seconds_for_mood,
    validate_mood,
)
from .ticker import Ticker

logger = logging.getLogger(__name__)

FOCUS_COMPLETED_NOTICE = "Focus completed! Break started ☕"
CYCLE_COMPLETED_NOTICE = "4 sets completed! Check your weekly achievements 🎉"
FEEDBACK_PENDING = "Generating AI feedback..."


class FeedbackClient(Protocol):
    async def request_feedback(self, mood: int, entries: list[LogEntry]) -> str: ...


class SessionObserver:
    """Receives controller updates. Override the hooks you need."""

    def on_state_changed(self, state: SessionState) -> None:
        pass

    def on_notice(self, message: str) -> None:
        pass

    def on_feedback(self, text: str) -> None:
        pass


class SessionController:
    """Owns the SessionState and applies every transition.

    Transitions happen on ticker callbacks and user actions, all on one
    event loop. AI feedback requests run as separate tasks and only ever
    reach observers.
    """

    def __init__(
        self,
        log: SessionLog,
        ticker: Ticker,
        feedback_client: FeedbackClient | None = None,
        mood: int = DEFAULT_MOOD,
        clock: Callable[[], datetime] | None = None,
    ):
        self.log = log
        self.ticker = ticker
        self.feedback_client = feedback_client
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._state = SessionState.initial(validate_mood(mood))
        self._observers: list[SessionObserver] = []
        self._feedback_tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def state(self) -> SessionState:
        """Read-only copy of the current state."""
        return self._state.snapshot()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register *observer*; returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _emit_state(self) -> None:
        snapshot = self._state.snapshot()
        for observer in list(self._observers):
            observer.on_state_changed(snapshot)

    def _emit_notice(self, message: str) -> None:
        logger.info("notice: %s", message)
        for observer in list(self._observers):
            observer.on_notice(message)

    def _emit_feedback(self, text: str) -> None:
        for observer in list(self._observers):
            observer.on_feedback(text)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start or resume the current phase. No-op when already running."""
        state = self._state
        if state.is_running:
            return
        state.is_running = True
        state.is_paused = False
        self.ticker.start(self.tick)
        logger.debug("%s started with %ds left", state.phase, state.seconds_left)
        self._emit_state()

    def pause(self) -> None:
        """Stop ticking and keep the remaining time. No-op when not running."""
        state = self._state
        if not state.is_running:
            return
        self.ticker.cancel()
        state.is_running = False
        state.is_paused = True
        logger.debug("%s paused with %ds left", state.phase, state.seconds_left)
        self._emit_state()

    def reset(self) -> None:
        """Back to an idle focus phase sized from the current mood."""
        self.ticker.cancel()
        state = self._state
        state.is_running = False
        state.is_paused = False
        state.is_break = False
        state.seconds_left = focus_seconds_for_mood(state.mood)
        logger.debug("reset to focus, %ds", state.seconds_left)
        self._emit_state()

    def set_mood(self, mood: int) -> bool:
        """Change mood before a focus phase starts.

        Raises ValueError for moods outside 1..10. Returns False (and
        changes nothing) while running or on break.
        """
        validate_mood(mood)
        state = self._state
        if not state.mood_editable:
            return False
        state.mood = mood
        state.seconds_left = focus_seconds_for_mood(mood)
        self._emit_state()
        return True

    def request_feedback(self) -> asyncio.Task | None:
        """Ask for AI feedback on the current mood and recent sessions."""
        return self._spawn_feedback(self._state.mood, self.log.recent(RECENT_LIMIT))

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Advance one second."""
        state = self._state
        if state.seconds_left > 1:
            state.seconds_left -= 1
            self._emit_state()
            return

        self.ticker.cancel()
        state.is_running = False

        if not state.is_break:
            self._finish_focus()
            state.is_break = True
            state.seconds_left = BREAK_SECONDS
            self.start()
            return

        state.is_break = False
        if state.completed_sets >= SETS_PER_CYCLE:
            state.completed_sets = 0
            self._emit_notice(CYCLE_COMPLETED_NOTICE)
        state.seconds_left = focus_seconds_for_mood(state.mood)
        logger.info("break finished, next focus %ds", state.seconds_left)
        self._emit_state()

    def _finish_focus(self) -> None:
        state = self._state
        if state.completed_sets < SETS_PER_CYCLE:
            state.completed_sets += 1

        entry = LogEntry.create(
            mood=state.mood,
            focus_minutes=focus_minutes_for_mood(state.mood),
            now=self._clock(),
        )
        # Write failures are already logged by the session log.
        self.log.append(entry)
        logger.info(
            "focus finished: mood=%d minutes=%d sets=%d",
            entry.mood,
            entry.focus_minutes,
            state.completed_sets,
        )

        self._emit_notice(FOCUS_COMPLETED_NOTICE)
        self._spawn_feedback(state.mood, self.log.recent(RECENT_LIMIT))

    # ------------------------------------------------------------------
    # AI feedback
    # ------------------------------------------------------------------

    def _spawn_feedback(self, mood: int, entries: list[LogEntry]) -> asyncio.Task | None:
        if self.feedback_client is None or self._closed:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; skipping AI feedback request")
            return None

        self._emit_feedback(FEEDBACK_PENDING)
        task = loop.create_task(self._deliver_feedback(mood, entries))
        self._feedback_tasks.add(task)
        task.add_done_callback(self._feedback_tasks.discard)
        return task

    async def _deliver_feedback(self, mood: int, entries: list[LogEntry]) -> str:
        assert self.feedback_client is not None
        try:
            text = await self.feedback_client.request_feedback(mood, entries)
        except Exception as e:
            logger.exception("AI feedback request raised")
            text = f"⚠️ AI feedback failed: {e}"
        if self._closed:
            logger.debug("controller closed; dropping AI feedback")
        else:
            self._emit_feedback(text)
        return text

    async def wait_for_feedback(self) -> None:
        """Wait for every in-flight feedback request to finish."""
        if not self._feedback_tasks:
            return
        results = await asyncio.gather(*self._feedback_tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("AI feedback task failed: %r", result)

    def close(self) -> None:
        """Stop ticking and detach. Late feedback results are dropped."""
        self.ticker.cancel()
        self._state.is_running = False
        self._closed = True
        self._observers.clear()
