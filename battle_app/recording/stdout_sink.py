"""Standard output session sink."""

import json
import sys
from typing import TextIO

from ..errors import PersistenceError
from .base import SessionSink
from .models import SessionRecord


class StdoutSessionSink(SessionSink):
    """Prints each session as JSON or a one-line summary."""

    def __init__(self, name: str = "stdout", format: str = "json", stream: TextIO = None):
        super().__init__(name)
        if format not in ("json", "pretty"):
            raise ValueError(f"Unsupported format: {format}")
        self.format = format
        self.stream = stream

    def record(self, session: SessionRecord) -> None:
        stream = self.stream or sys.stdout
        try:
            print(self._format_session(session), file=stream, flush=True)
        except (OSError, ValueError) as e:
            self._error_count += 1
            raise PersistenceError(
                f"Failed to print session: {e}",
                operation="print",
                target=self.name
            ) from e

        self._record_count += 1
        self.logger.info(
            "Session printed",
            sink=self.name,
            session_id=session.session_id
        )

    def _format_session(self, session: SessionRecord) -> str:
        if self.format == "pretty":
            return (
                f"[{session.completed_at.isoformat()}] MATCH {session.session_id}: "
                f"{session.outcome.value.upper()} "
                f"({session.final_human_score}-{session.final_ai_score} "
                f"over {len(session.round_results)} rounds)"
            )
        return json.dumps(session.to_dict())

    def health_check(self) -> bool:
        try:
            return (self.stream or sys.stdout).writable()
        except (OSError, ValueError):
            return False
