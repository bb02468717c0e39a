"""Proposed actions and trade requests."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..portfolio.models import TradeKind


class ActionKind(str, Enum):
    """What a decision source wants to do this poll."""
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass(frozen=True)
class ProposedAction:
    """A buy, sell or hold proposal."""
    kind: ActionKind
    symbol: Optional[str] = None
    shares: int = 0
    reasoning: str = ""

    @classmethod
    def buy(cls, symbol: str, shares: int, reasoning: str = "") -> "ProposedAction":
        return cls(ActionKind.BUY, symbol, shares, reasoning)

    @classmethod
    def sell(cls, symbol: str, shares: int, reasoning: str = "") -> "ProposedAction":
        return cls(ActionKind.SELL, symbol, shares, reasoning)

    @property
    def is_hold(self) -> bool:
        return self.kind == ActionKind.HOLD

    @property
    def trade_kind(self) -> Optional[TradeKind]:
        """Matching TradeKind, None for a hold."""
        if self.kind == ActionKind.BUY:
            return TradeKind.BUY
        if self.kind == ActionKind.SELL:
            return TradeKind.SELL
        return None


HOLD = ProposedAction(ActionKind.HOLD)


@dataclass(frozen=True)
class TradeRequest:
    """A trade submitted from the human trade intake."""
    kind: TradeKind
    symbol: str
    shares: int

    def to_action(self) -> ProposedAction:
        if self.kind == TradeKind.BUY:
            return ProposedAction.buy(self.symbol, self.shares)
        return ProposedAction.sell(self.symbol, self.shares)
