"""Base classes for schedulers."""

from abc import ABC, abstractmethod
from typing import Callable


class TimerHandle(ABC):
    """Handle to a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        pass


class Scheduler(ABC):
    """Single-threaded deferred callback scheduler."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Run callback once after delay_seconds.

        Args:
            delay_seconds: Delay before running, clamped to zero
            callback: Zero-argument callable

        Returns:
            Handle that cancels the pending call
        """
        pass

    @abstractmethod
    def time(self) -> float:
        """Monotonic scheduler time in seconds."""
        pass
