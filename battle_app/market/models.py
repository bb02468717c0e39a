"""
Market data models.

Instrument is the only mutable record and never leaves the Market.
Everything handed to accounts and decision sources is a frozen
InstrumentQuote inside a MarketSnapshot.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, Optional


@dataclass
class Instrument:
    """Live instrument state, mutated only by its Market."""
    symbol: str
    display_name: str
    price: Decimal
    last_change: Decimal = Decimal("0.00")
    change_pct: float = 0.0

    def to_quote(self) -> "InstrumentQuote":
        return InstrumentQuote(
            symbol=self.symbol,
            display_name=self.display_name,
            price=self.price,
            last_change=self.last_change,
            change_pct=self.change_pct,
        )


@dataclass(frozen=True)
class InstrumentQuote:
    """Point-in-time copy of an instrument."""
    symbol: str
    display_name: str
    price: Decimal
    last_change: Decimal
    change_pct: float           # last_change as % of the previous price


@dataclass(frozen=True)
class MarketSnapshot:
    """Immutable copy of every instrument at one tick."""
    tick_index: int
    quotes: tuple[InstrumentQuote, ...]

    def __iter__(self) -> Iterator[InstrumentQuote]:
        return iter(self.quotes)

    def __len__(self) -> int:
        return len(self.quotes)

    def get(self, symbol: str) -> Optional[InstrumentQuote]:
        """Quote for symbol, None if not listed."""
        for quote in self.quotes:
            if quote.symbol == symbol:
                return quote
        return None

    def price_of(self, symbol: str) -> Optional[Decimal]:
        """Price for symbol, None if not listed."""
        quote = self.get(symbol)
        return quote.price if quote else None

    def symbols(self) -> list[str]:
        return [quote.symbol for quote in self.quotes]

    def to_dict(self) -> dict:
        return {
            "tick_index": self.tick_index,
            "quotes": [
                {
                    "symbol": q.symbol,
                    "display_name": q.display_name,
                    "price": str(q.price),
                    "last_change": str(q.last_change),
                    "change_pct": round(q.change_pct, 4),
                }
                for q in self.quotes
            ],
        }
