"""Focus session history stored as a JSON array in the preference store."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from mood_pomodoro.services.preferences import PreferenceStore

from .state import validate_mood

logger = logging.getLogger(__name__)

FOCUS_DONE = "focus_done"
DEFAULT_LOG_KEY = "logs"
RECENT_LIMIT = 5


@dataclass(frozen=True)
class LogEntry:
    """One completed focus interval."""

    date: str  # ISO 8601
    mood: int
    focus_minutes: int
    result: Literal["focus_done"] = FOCUS_DONE

    @classmethod
    def create(cls, mood: int, focus_minutes: int, now: datetime | None = None) -> "LogEntry":
        """Create a completion entry stamped with the current local time."""
        now = now or datetime.now().astimezone()
        return cls(
            date=now.isoformat(),
            mood=validate_mood(mood),
            focus_minutes=focus_minutes,
        )

    @property
    def parsed_date(self) -> datetime | None:
        """Parse date as datetime, or None when it is not valid ISO 8601."""
        try:
            return datetime.fromisoformat(self.date.replace("Z", "+00:00"))
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted record shape."""
        return {
            "date": self.date,
            "mood": self.mood,
            "focusMinutes": self.focus_minutes,
            "result": self.result,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEntry":
        """Create from a persisted record. Raises ValueError if malformed."""
        if not isinstance(data, dict):
            raise ValueError(f"Log record must be an object, got {type(data).__name__}")
        try:
            date, mood = data["date"], data["mood"]
            focus_minutes, result = data["focusMinutes"], data["result"]
        except KeyError as e:
            raise ValueError(f"Log record is missing {e}") from e

        if not isinstance(date, str) or not isinstance(result, str):
            raise ValueError("Log record date and result must be strings")
        for name, value in (("mood", mood), ("focusMinutes", focus_minutes)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Log record {name} must be an integer")

        return cls(date=date, mood=mood, focus_minutes=focus_minutes, result=result)


@dataclass(frozen=True)
class WeeklyAggregate:
    """Totals over the entries that fall in "this week"."""

    total_minutes: int = 0
    average_mood: int = 0
    count: int = 0


def in_approximate_week(entry_date: datetime, now: datetime) -> bool:
    """Same year and month as *now*, and day of month less than 7 apart.

    Entries from the previous month never match, even a day ago.
    """
    return (
        entry_date.year == now.year
        and entry_date.month == now.month
        and abs(now.day - entry_date.day) < 7
    )


class SessionLog:
    """Newest-first list of completed focus sessions.

    The whole list is re-serialized to the store after every append.
    """

    def __init__(self, store: PreferenceStore, key: str = DEFAULT_LOG_KEY):
        self.store = store
        self.key = key
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> list[LogEntry]:
        """Load entries from the store, treating malformed data as empty."""
        raw = self.store.read_raw(self.key)
        self._entries = self.decode(raw) if raw is not None else []
        return self.entries

    @staticmethod
    def decode(raw: str) -> list[LogEntry]:
        """Decode a stored JSON array. Returns [] for anything malformed."""
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("stored log is not a JSON array")
            return [LogEntry.from_dict(record) for record in records]
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            logger.warning("Discarding malformed session log: %s", e)
            return []

    def encode(self) -> str:
        return json.dumps([entry.to_dict() for entry in self._entries])

    def append(self, entry: LogEntry) -> bool:
        """Insert *entry* at the front and persist the full list.

        Returns whether the store write succeeded.
        """
        self._entries.insert(0, entry)
        saved = self.store.write_raw(self.key, self.encode())
        if not saved:
            logger.warning("Session log write failed; %d entries kept in memory", len(self))
        return saved

    def recent(self, n: int = RECENT_LIMIT) -> list[LogEntry]:
        """The *n* newest entries."""
        return self._entries[: max(0, n)]

    def weekly_aggregate(self, now: datetime | None = None) -> WeeklyAggregate:
        """Total minutes, floor-average mood and count for this week."""
        now = now or datetime.now()
        this_week = []
        for entry in self._entries:
            parsed = entry.parsed_date
            if parsed is not None and in_approximate_week(parsed, now):
                this_week.append(entry)

        if not this_week:
            return WeeklyAggregate()

        return WeeklyAggregate(
            total_minutes=sum(e.focus_minutes for e in this_week),
            average_mood=sum(e.mood for e in this_week) // len(this_week),
            count=len(this_week),
        )

    def clear(self) -> bool:
        """Drop every entry, in memory and in the store."""
        self._entries = []
        return self.store.delete(self.key)
