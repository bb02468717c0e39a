"""
Virtual-clock scheduler for headless simulation and tests.

Time only moves when advance() is called. Due callbacks run in order of
due time, then scheduling order, so a whole match replays identically.
"""

import heapq
import itertools
from typing import Callable

from ..logging.config import get_logger
from .base import Scheduler, TimerHandle

logger = get_logger(__name__)


class _ManualTimerHandle(TimerHandle):
    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Scheduler whose clock is advanced explicitly."""

    def __init__(self, start_time: float = 0.0):
        self._now = start_time
        self._queue: list[tuple[float, int, _ManualTimerHandle, Callable[[], None]]] = []
        self._sequence = itertools.count()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualTimerHandle()
        due = self._now + max(0.0, delay_seconds)
        heapq.heappush(self._queue, (due, next(self._sequence), handle, callback))
        return handle

    def time(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due.

        Callbacks scheduled while advancing run in the same call if they
        fall due before the target time.

        Args:
            seconds: Amount of virtual time to advance

        Returns:
            Number of callbacks executed
        """
        if seconds < 0:
            raise ValueError("Cannot advance a scheduler backwards")

        target = self._now + seconds
        executed = 0

        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if handle.cancelled:
                continue
            callback()
            executed += 1

        self._now = target
        return executed

    def run_until_idle(self, max_seconds: float = 3600.0) -> float:
        """
        Run callbacks until nothing is pending or max_seconds elapse.

        Returns:
            Virtual seconds elapsed
        """
        start = self._now
        limit = start + max_seconds

        while self._queue:
            due, _, handle, _ = self._queue[0]
            if handle.cancelled:
                heapq.heappop(self._queue)
                continue
            if due > limit:
                logger.warning(
                    "Manual scheduler stopped with callbacks still pending",
                    pending=self.pending,
                    max_seconds=max_seconds
                )
                self._now = limit
                break
            self.advance(due - self._now)

        return self._now - start
