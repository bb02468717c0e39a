"""
Seeded random-walk market.

Each tick moves every instrument independently by a uniform draw in
[-max_move_pct, +max_move_pct] percent of its current price. Prices are
kept strictly above the configured floor: a move that would land at or
below it is clamped to one cent above the floor.
"""

import random
from decimal import Decimal
from typing import Iterable, Optional

from ..config.defaults import InstrumentSpec, MarketParams
from ..errors import ConfigurationError
from ..logging.config import get_logger
from ..utils.money import CENT, percent_of, to_money
from .models import Instrument, MarketSnapshot

logger = get_logger(__name__)


class Market:
    """Ordered set of instruments with a deterministic-given-seed price walk."""

    def __init__(
        self,
        instruments: Iterable[Instrument],
        tick_interval_ms: int = 1000,
        max_move_pct: float = 2.0,
        price_floor: Decimal = Decimal("10.00"),
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Build a market.

        Args:
            instruments: Instruments in display order, symbols unique
            tick_interval_ms: Price update period
            max_move_pct: Max absolute move per tick, percent of price
            price_floor: Exclusive lower bound for every price
            rng: Random source; built from seed when omitted
            seed: Seed used when rng is omitted

        Raises:
            ConfigurationError: invalid interval, bounds or catalog
        """
        self._instruments: list[Instrument] = list(instruments)
        self.tick_interval_ms = tick_interval_ms
        self.max_move_pct = max_move_pct
        self.price_floor = to_money(price_floor)
        self.seed = seed
        self._rng = rng if rng is not None else random.Random(seed)
        self._tick_index = 0

        self._validate()

        logger.debug(
            "Market created",
            instruments=len(self._instruments),
            tick_interval_ms=tick_interval_ms,
            max_move_pct=max_move_pct,
            price_floor=str(self.price_floor),
            seed=seed
        )

    @classmethod
    def from_catalog(
        cls,
        catalog: Iterable[InstrumentSpec],
        params: Optional[MarketParams] = None,
        seed: Optional[int] = None,
    ) -> "Market":
        """Build a fresh market from catalog entries."""
        params = params or MarketParams()
        instruments = [
            Instrument(
                symbol=spec.symbol,
                display_name=spec.display_name,
                price=to_money(spec.initial_price),
            )
            for spec in catalog
        ]
        return cls(
            instruments,
            tick_interval_ms=params.tick_ms,
            max_move_pct=params.max_move_pct,
            price_floor=params.price_floor,
            seed=seed,
        )

    def _validate(self) -> None:
        if not self._instruments:
            raise ConfigurationError("Market requires at least one instrument")

        if self.tick_interval_ms <= 0:
            raise ConfigurationError(
                "Market tick interval must be positive",
                context={"tick_interval_ms": self.tick_interval_ms}
            )

        if not 0 <= self.max_move_pct <= 100:
            raise ConfigurationError(
                "max_move_pct must be between 0 and 100",
                context={"max_move_pct": self.max_move_pct}
            )

        if self.price_floor <= 0:
            raise ConfigurationError(
                "Price floor must be positive",
                context={"price_floor": str(self.price_floor)}
            )

        seen: set[str] = set()
        for instrument in self._instruments:
            if instrument.symbol in seen:
                raise ConfigurationError(
                    f"Duplicate instrument symbol: {instrument.symbol}",
                    context={"symbol": instrument.symbol}
                )
            seen.add(instrument.symbol)

            if instrument.price <= self.price_floor:
                raise ConfigurationError(
                    f"Initial price of {instrument.symbol} must be above the price floor",
                    context={
                        "symbol": instrument.symbol,
                        "price": str(instrument.price),
                        "price_floor": str(self.price_floor),
                    }
                )

    @property
    def tick_index(self) -> int:
        """Number of ticks applied since creation."""
        return self._tick_index

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    def tick(self) -> MarketSnapshot:
        """Advance every price by one independent random step."""
        for instrument in self._instruments:
            delta_pct = self._rng.uniform(-self.max_move_pct, self.max_move_pct)
            self._move(instrument, delta_pct)

        self._tick_index += 1
        return self.snapshot()

    def apply_shock(self, pct: float) -> MarketSnapshot:
        """
        Move every price by the same percentage, e.g. +5 or -5 on news.

        The floor clamp applies exactly as for regular ticks. The tick
        index is not advanced.
        """
        for instrument in self._instruments:
            self._move(instrument, pct)

        logger.info("Market shock applied", pct=pct, tick_index=self._tick_index)
        return self.snapshot()

    def _move(self, instrument: Instrument, delta_pct: float) -> None:
        old_price = instrument.price
        new_price = old_price + percent_of(old_price, delta_pct)

        if new_price <= self.price_floor:
            new_price = self.price_floor + CENT

        instrument.price = new_price
        instrument.last_change = new_price - old_price
        instrument.change_pct = float(instrument.last_change / old_price * 100)

    def snapshot(self) -> MarketSnapshot:
        """Immutable copy of current instrument state."""
        return MarketSnapshot(
            tick_index=self._tick_index,
            quotes=tuple(instrument.to_quote() for instrument in self._instruments),
        )

    def price_of(self, symbol: str) -> Optional[Decimal]:
        for instrument in self._instruments:
            if instrument.symbol == symbol:
                return instrument.price
        return None

    def symbols(self) -> list[str]:
        return [instrument.symbol for instrument in self._instruments]
