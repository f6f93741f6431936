"""Non-blocking keyboard input for the dashboard controls."""

import select
import sys
import termios
import tty
from typing import Optional


class KeyboardHandler:
    """Reads single keypresses from a cbreak-mode terminal without blocking."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.old_settings = None
        self._setup()

    def _setup(self):
        """Put the terminal in cbreak mode when stdin is a TTY."""
        try:
            fd = self.stream.fileno()
            if not self.stream.isatty():
                return
            self.old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (OSError, ValueError, termios.error):
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """
        Get a single keypress without blocking.

        Returns the key character or None if no key pressed.
        """
        try:
            if select.select([self.stream], [], [], 0)[0]:
                key = self.stream.read(1)
                return key.lower() if key else None
        except (OSError, ValueError):
            return None
        return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            try:
                termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self.old_settings)
            except (OSError, termios.error):
                pass
            self.old_settings = None
