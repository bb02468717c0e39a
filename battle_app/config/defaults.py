"""Default configuration parameters for a trading battle."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class InstrumentSpec:
    """Catalog entry used to build a fresh market instrument."""
    symbol: str
    display_name: str
    initial_price: Decimal


@dataclass(frozen=True)
class MarketParams:
    """Price walk parameters."""
    tick_ms: int = 1000                              # Market update period
    max_move_pct: float = 2.0                        # Max abs move per tick, % of price
    price_floor: Decimal = Decimal("10.00")          # Prices stay strictly above this


@dataclass(frozen=True)
class AIParams:
    """Automated trader parameters."""
    policy: str = "random"
    poll_interval_range_ms: tuple[int, int] = (2000, 4000)


DEFAULT_CATALOG: tuple[InstrumentSpec, ...] = (
    InstrumentSpec("TECH", "TechGiant Inc", Decimal("150.25")),
    InstrumentSpec("OILC", "OilCorp", Decimal("85.60")),
    InstrumentSpec("MEDX", "MediXplore", Decimal("210.40")),
    InstrumentSpec("FINT", "FinTech Plus", Decimal("175.80")),
    InstrumentSpec("RETA", "RetailPro", Decimal("75.80")),
)


@dataclass(frozen=True)
class BattleConfig:
    """Complete battle configuration, injected into the orchestrator."""
    max_rounds: int = 3
    round_duration_seconds: int = 30
    transition_seconds: int = 3
    starting_cash: Decimal = Decimal("10000.00")
    countdown_tick_seconds: float = 1.0
    market: MarketParams = field(default_factory=MarketParams)
    ai: AIParams = field(default_factory=AIParams)
    instrument_catalog: tuple[InstrumentSpec, ...] = DEFAULT_CATALOG
    seed: Optional[int] = None
    shared_trajectory: bool = False
    auto_start_rounds: bool = False


def get_default_config() -> BattleConfig:
    """Get the default configuration instance."""
    return BattleConfig()
