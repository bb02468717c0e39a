"""Session record emitted after MATCH_COMPLETE."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from ..battle.models import MatchResult, RoundResult, Winner
from ..utils.time import format_timestamp


@dataclass(frozen=True)
class SessionRecord:
    """One finished match as handed to the session sink."""
    session_id: str
    round_results: tuple[RoundResult, ...]
    final_human_score: int          # rounds won by the human
    final_ai_score: int             # rounds won by the AI
    human_won: bool
    outcome: Winner
    duration_ms: int
    completed_at: datetime

    @classmethod
    def from_match(cls, result: MatchResult) -> "SessionRecord":
        return cls(
            session_id=result.session_id,
            round_results=result.rounds,
            final_human_score=result.human_wins,
            final_ai_score=result.ai_wins,
            human_won=result.human_won,
            outcome=result.outcome,
            duration_ms=result.duration_ms,
            completed_at=result.completed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form; decimals become strings."""
        return {
            "session_id": self.session_id,
            "round_results": [r.to_dict() for r in self.round_results],
            "final_human_score": self.final_human_score,
            "final_ai_score": self.final_ai_score,
            "human_won": self.human_won,
            "outcome": self.outcome.value,
            "duration_ms": self.duration_ms,
            "completed_at": format_timestamp(self.completed_at),
        }


@dataclass
class PlayerStats:
    """Running totals across recorded matches, from the human's side."""
    games_played: int = 0
    games_won: int = 0
    games_tied: int = 0
    best_round_value: Decimal = Decimal("0.00")
    total_final_value: Decimal = Decimal("0.00")
    rounds_played: int = 0

    @property
    def games_lost(self) -> int:
        return self.games_played - self.games_won - self.games_tied

    @property
    def win_rate(self) -> float:
        """Percentage of matches won."""
        if self.games_played == 0:
            return 0.0
        return self.games_won / self.games_played * 100

    @property
    def average_round_value(self) -> Decimal:
        if self.rounds_played == 0:
            return Decimal("0.00")
        return (self.total_final_value / self.rounds_played).quantize(Decimal("0.01"))

    def update(self, record: SessionRecord) -> None:
        self.games_played += 1
        if record.outcome == Winner.HUMAN:
            self.games_won += 1
        elif record.outcome == Winner.TIE:
            self.games_tied += 1

        for result in record.round_results:
            self.rounds_played += 1
            self.total_final_value += result.human_final_value
            if result.human_final_value > self.best_round_value:
                self.best_round_value = result.human_final_value
