"""In-memory session state and mood-based durations."""

from dataclasses import asdict, dataclass
from typing import Literal

Phase = Literal["focus", "break"]
SessionStatus = Literal["idle", "running", "paused"]

MIN_MOOD = 1
MAX_MOOD = 10
DEFAULT_MOOD = 7

BREAK_SECONDS = 5 * 60
SETS_PER_CYCLE = 4


def validate_mood(mood: int) -> int:
    """Return *mood* unchanged, or raise ValueError if it is not 1..10."""
    if isinstance(mood, bool) or not isinstance(mood, int):
        raise ValueError(f"Mood must be an integer, got {mood!r}")
    if not MIN_MOOD <= mood <= MAX_MOOD:
        raise ValueError(f"Mood must be between {MIN_MOOD} and {MAX_MOOD}, got {mood}")
    return mood


def focus_seconds_for_mood(mood: int) -> int:
    """Focus length: 30 minutes when energetic, 15 when tired, else 25."""
    validate_mood(mood)
    if mood >= 8:
        return 30 * 60
    if mood <= 3:
        return 15 * 60
    return 25 * 60


def focus_minutes_for_mood(mood: int) -> int:
    return focus_seconds_for_mood(mood) // 60


@dataclass
class SessionState:
    """Current timer state. Owned and mutated by SessionController only."""

    mood: int = DEFAULT_MOOD
    is_running: bool = False
    is_break: bool = False
    seconds_left: int = 25 * 60
    completed_sets: int = 0
    is_paused: bool = False

    @classmethod
    def initial(cls, mood: int = DEFAULT_MOOD) -> "SessionState":
        """Fresh idle state at the start of a focus phase."""
        return cls(mood=mood, seconds_left=focus_seconds_for_mood(mood))

    @property
    def phase(self) -> Phase:
        return "break" if self.is_break else "focus"

    @property
    def status(self) -> SessionStatus:
        if self.is_running:
            return "running"
        if self.is_paused:
            return "paused"
        return "idle"

    @property
    def mood_editable(self) -> bool:
        """Mood can only change before a focus phase has started."""
        return not self.is_running and not self.is_break

    @property
    def mmss(self) -> str:
        remaining = max(0, self.seconds_left)
        return f"{remaining // 60:02d}:{remaining % 60:02d}"

    def snapshot(self) -> "SessionState":
        """Copy handed to observers so they cannot mutate the live state."""
        return SessionState(**asdict(self))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = asdict(self)
        data["phase"] = self.phase
        data["status"] = self.status
        return data
