"""
Battle data models.

Phases, scoring results and the session aggregate. RoundResult and
MatchResult are immutable once created; BattleSession is owned and
mutated only by the orchestrator.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..portfolio.models import Trade


class BattlePhase(str, Enum):
    """Orchestrator state machine phases."""
    SETUP = "setup"
    HUMAN_TURN = "human_turn"
    TRANSITION = "transition"
    AI_TURN = "ai_turn"
    ROUND_RESOLVED = "round_resolved"
    MATCH_COMPLETE = "match_complete"


ALLOWED_TRANSITIONS: dict[BattlePhase, frozenset[BattlePhase]] = {
    BattlePhase.SETUP: frozenset({BattlePhase.HUMAN_TURN}),
    BattlePhase.HUMAN_TURN: frozenset({BattlePhase.TRANSITION}),
    BattlePhase.TRANSITION: frozenset({BattlePhase.AI_TURN}),
    BattlePhase.AI_TURN: frozenset({BattlePhase.ROUND_RESOLVED}),
    BattlePhase.ROUND_RESOLVED: frozenset({BattlePhase.SETUP, BattlePhase.MATCH_COMPLETE}),
    BattlePhase.MATCH_COMPLETE: frozenset(),
}


class Winner(str, Enum):
    """Winner of a round or of the whole match."""
    HUMAN = "human"
    AI = "ai"
    TIE = "tie"


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one human-then-AI round."""
    round_number: int
    human_final_value: Decimal
    ai_final_value: Decimal
    winner: Winner
    human_trade_count: int = 0
    ai_trade_count: int = 0
    human_return_pct: float = 0.0
    ai_return_pct: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "round_number": self.round_number,
            "human_final_value": str(self.human_final_value),
            "ai_final_value": str(self.ai_final_value),
            "winner": self.winner.value,
            "human_trade_count": self.human_trade_count,
            "ai_trade_count": self.ai_trade_count,
            "human_return_pct": round(self.human_return_pct, 4),
            "ai_return_pct": round(self.ai_return_pct, 4),
        }


@dataclass
class BattleSession:
    """Match aggregate owned by the orchestrator."""
    session_id: str
    max_rounds: int
    current_round: int = 1
    phase: BattlePhase = BattlePhase.SETUP
    human_wins: int = 0
    ai_wins: int = 0
    results: list[RoundResult] = field(default_factory=list)
    started_at: Optional[datetime] = None

    @property
    def completed_rounds(self) -> int:
        return len(self.results)

    @property
    def ties(self) -> int:
        return self.completed_rounds - self.human_wins - self.ai_wins

    def copy(self) -> "BattleSession":
        """Detached copy safe to hand to callers."""
        return replace(self, results=list(self.results))


@dataclass(frozen=True)
class MatchResult:
    """Final outcome returned to the caller at MATCH_COMPLETE."""
    session_id: str
    outcome: Winner
    human_wins: int
    ai_wins: int
    rounds: tuple[RoundResult, ...]
    duration_ms: int
    completed_at: datetime

    @property
    def human_won(self) -> bool:
        return self.outcome == Winner.HUMAN


@dataclass(frozen=True)
class TradeOutcome:
    """Result of executing one proposed trade."""
    accepted: bool
    trade: Optional[Trade] = None
    reason: str = "executed"
    message: str = ""


@dataclass(frozen=True)
class BattleEvent:
    """Notification delivered to orchestrator listeners."""
    kind: str
    phase: BattlePhase
    round_number: int
    payload: dict[str, Any] = field(default_factory=dict)
