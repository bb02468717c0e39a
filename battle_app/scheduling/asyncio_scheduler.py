"""Scheduler backed by an asyncio event loop."""

import asyncio
from typing import Callable, Optional

from .base import Scheduler, TimerHandle


class _AsyncioTimerHandle(TimerHandle):
    """Wraps asyncio.TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """Bound loop, resolved lazily to the running loop."""
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioTimerHandle(self.loop.call_later(max(0.0, delay_seconds), callback))

    def time(self) -> float:
        return self.loop.time()
