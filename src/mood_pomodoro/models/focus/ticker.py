"""Repeating one-second schedule used to drive the session controller."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol


class Ticker(Protocol):
    """Scheduling capability injected into SessionController."""

    @property
    def active(self) -> bool: ...

    def start(self, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class AsyncioTicker:
    """Calls ``callback`` every ``interval`` seconds on the running event loop.

    Must be started from inside a running loop. Starting while active
    replaces the previous schedule.
    """

    def __init__(self, interval: float = 1.0, loop: asyncio.AbstractEventLoop | None = None):
        self.interval = interval
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.cancel()
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._callback = callback
        self._schedule()

    def _schedule(self) -> None:
        assert self._loop is not None
        self._handle = self._loop.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        callback = self._callback
        # The callback may cancel or restart the ticker.
        self._schedule()
        if callback is not None:
            callback()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None
