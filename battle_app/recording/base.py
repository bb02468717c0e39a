"""Base class for session sinks."""

from abc import ABC, abstractmethod
from typing import Any

from ..logging.config import get_logger
from .models import SessionRecord


class SessionSink(ABC):
    """One-way recipient of finished match sessions."""

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"battle.recording.{name}")
        self._record_count = 0
        self._error_count = 0

    @abstractmethod
    def record(self, session: SessionRecord) -> None:
        """
        Record a finished session.

        Raises:
            PersistenceError: the session could not be stored
        """
        pass

    def health_check(self) -> bool:
        """Check if the sink can accept records."""
        return True

    def get_stats(self) -> dict[str, Any]:
        """Get recording statistics."""
        return {
            "name": self.name,
            "record_count": self._record_count,
            "error_count": self._error_count,
            "success_rate": (
                self._record_count / (self._record_count + self._error_count)
                if (self._record_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self) -> None:
        self._record_count = 0
        self._error_count = 0
