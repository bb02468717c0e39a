"""In-memory and fan-out session sinks."""

from typing import Iterable

from ..errors import PersistenceError
from .base import SessionSink
from .models import PlayerStats, SessionRecord


class InMemorySessionSink(SessionSink):
    """Keeps records in a list and maintains aggregate player stats."""

    def __init__(self, name: str = "memory"):
        super().__init__(name)
        self.records: list[SessionRecord] = []
        self.player_stats = PlayerStats()

    def record(self, session: SessionRecord) -> None:
        self.records.append(session)
        self.player_stats.update(session)
        self._record_count += 1
        self.logger.debug(
            "Session stored in memory",
            sink=self.name,
            session_id=session.session_id,
            games_played=self.player_stats.games_played
        )


class CompositeSessionSink(SessionSink):
    """Records to every child sink; one failure does not stop the others."""

    def __init__(self, sinks: Iterable[SessionSink], name: str = "composite"):
        super().__init__(name)
        self.sinks = list(sinks)

    def record(self, session: SessionRecord) -> None:
        failures = []
        for sink in self.sinks:
            try:
                sink.record(session)
            except Exception as e:
                failures.append((sink.name, e))
                self.logger.error(
                    "Child sink failed",
                    sink=sink.name,
                    session_id=session.session_id,
                    error=str(e)
                )

        if failures:
            self._error_count += 1
            raise PersistenceError(
                f"{len(failures)} of {len(self.sinks)} sinks failed",
                operation="record",
                target=",".join(name for name, _ in failures),
                context={"errors": {name: str(e) for name, e in failures}}
            )
        self._record_count += 1

    def health_check(self) -> bool:
        return all(sink.health_check() for sink in self.sinks)
