"""Trade records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class TradeKind(str, Enum):
    """Direction of an executed trade."""
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Trade:
    """Immutable record of an executed trade."""
    id: str
    kind: TradeKind
    symbol: str
    shares: int
    price: Decimal
    timestamp: datetime

    @property
    def notional(self) -> Decimal:
        """Cash value moved by the trade."""
        return self.price * self.shares

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "symbol": self.symbol,
            "shares": self.shares,
            "price": str(self.price),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class AccountView:
    """Read-only copy of an account handed to decision sources."""
    owner: str
    cash: Decimal
    holdings: tuple[tuple[str, int], ...]

    def shares_of(self, symbol: str) -> int:
        for held_symbol, shares in self.holdings:
            if held_symbol == symbol:
                return shares
        return 0
