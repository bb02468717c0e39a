"""
Cooperative scheduling module.

All timed activity in a match (countdowns, market ticks, AI polling)
runs through a single-threaded Scheduler. The asyncio implementation
drives live matches; the manual implementation advances a virtual clock
for headless simulation and tests.
"""
from .base import Scheduler, TimerHandle
from .asyncio_scheduler import AsyncioScheduler
from .manual import ManualScheduler
from .timer import PeriodicTask, RoundTimer

__all__ = [
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "ManualScheduler",
    "PeriodicTask",
    "RoundTimer",
]
