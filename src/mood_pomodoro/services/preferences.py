"""String key-value preference store backed by a JSON file.

Mirrors a mobile preference store: every key maps to one string value and
the store never interprets the content. Read failures look the same as a
missing key and write failures are reported through the return value only.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PREFERENCES_FILE = "preferences.json"


class PreferenceStore:
    """Persists string values under string keys in ``preferences.json``."""

    def __init__(self, data_dir: Path | None = None):
        if data_dir is None:
            from platformdirs import user_data_dir

            data_dir = Path(user_data_dir("mood_pomodoro"))

        self.data_dir = data_dir
        self.path = data_dir / PREFERENCES_FILE

    def _read_all(self) -> dict[str, str]:
        """Load the whole map. Any failure yields an empty map."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read preferences from %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not a JSON object", self.path)
            return {}
        return data

    def read_raw(self, key: str) -> str | None:
        """Return the string stored under *key*, or None."""
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            logger.warning("Ignoring non-string preference value for %r", key)
            return None
        return value

    def write_raw(self, key: str, value: str) -> bool:
        """Store *value* under *key*. Returns False if the write failed."""
        data = self._read_all()
        data[key] = value
        return self._write_all(data)

    def delete(self, key: str) -> bool:
        """Remove *key* from the store. Missing keys are not an error."""
        data = self._read_all()
        if key not in data:
            return True
        del data[key]
        return self._write_all(data)

    def _write_all(self, data: dict[str, str]) -> bool:
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=".preferences.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
            tmp_name = None

            self.path.chmod(0o600)
        except OSError as e:
            logger.warning("Could not write preferences to %s: %s", self.path, e)
            return False
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        return True
