"""
Cancellable countdown and periodic task primitives.

Both primitives keep a generation counter. Every start() or cancel()
bumps it, and a fired callback whose generation no longer matches is
dropped, so a callback that was already queued when its timer was
cancelled or restarted can never act on the new phase.
"""

from typing import Callable, Optional

from .base import Scheduler, TimerHandle

TickCallback = Callable[[int], None]
ExpireCallback = Callable[[], None]


class RoundTimer:
    """
    Countdown that fires on_tick once per tick unit, then on_expire once.

    A duration of N ticks produces N on_tick calls with remaining counts
    N-1 .. 0, followed by a single on_expire call.
    """

    def __init__(self, scheduler: Scheduler, tick_seconds: float = 1.0):
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self._scheduler = scheduler
        self._tick_seconds = tick_seconds
        self._handle: Optional[TimerHandle] = None
        self._generation = 0
        self._remaining = 0
        self._running = False
        self._on_tick: Optional[TickCallback] = None
        self._on_expire: Optional[ExpireCallback] = None

    @property
    def remaining(self) -> int:
        """Tick units left before expiry."""
        return self._remaining

    def is_running(self) -> bool:
        return self._running

    def start(
        self,
        duration_ticks: int,
        on_tick: Optional[TickCallback] = None,
        on_expire: Optional[ExpireCallback] = None
    ) -> None:
        """Start a countdown, cancelling any countdown already running."""
        if duration_ticks <= 0:
            raise ValueError("duration_ticks must be positive")

        self.cancel()
        self._remaining = duration_ticks
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._running = True
        self._schedule_next()

    def cancel(self) -> None:
        """Stop the countdown; no further callbacks fire."""
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._running = False

    def _schedule_next(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(
            self._tick_seconds,
            lambda: self._fire(generation)
        )

    def _fire(self, generation: int) -> None:
        if generation != self._generation or not self._running:
            return

        self._handle = None
        self._remaining -= 1

        if self._on_tick is not None:
            self._on_tick(self._remaining)
            # on_tick may have cancelled or restarted this timer
            if generation != self._generation:
                return

        if self._remaining > 0:
            self._schedule_next()
            return

        self._running = False
        self._generation += 1
        if self._on_expire is not None:
            self._on_expire()


class PeriodicTask:
    """Runs a callback every interval_seconds until cancelled."""

    def __init__(
        self,
        scheduler: Scheduler,
        interval_seconds: float,
        callback: Callable[[], None],
        name: str = "periodic"
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self._scheduler = scheduler
        self._interval = interval_seconds
        self._callback = callback
        self._handle: Optional[TimerHandle] = None
        self._generation = 0
        self._running = False
        self.runs = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start firing; restarting resets the period."""
        self.cancel()
        self._running = True
        self._schedule_next()

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._running = False

    def _schedule_next(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(
            self._interval,
            lambda: self._fire(generation)
        )

    def _fire(self, generation: int) -> None:
        if generation != self._generation or not self._running:
            return

        self._handle = None
        self.runs += 1
        self._callback()

        if generation == self._generation and self._running:
            self._schedule_next()
