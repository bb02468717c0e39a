"""Pytest configuration and shared fixtures."""

from decimal import Decimal

import pytest

from battle_app.config.defaults import AIParams, BattleConfig, InstrumentSpec, MarketParams
from battle_app.decisions.models import HOLD
from battle_app.decisions.policies import TradingPolicy
from battle_app.market.market import Market
from battle_app.market.models import Instrument
from battle_app.scheduling.manual import ManualScheduler


class ScriptedPolicy(TradingPolicy):
    """Replays a fixed list of actions, then holds."""

    name = "scripted"

    def __init__(self, actions=None):
        super().__init__()
        self.actions = list(actions or [])
        self.calls = 0

    def decide(self, snapshot, account):
        self.calls += 1
        if self.actions:
            return self.actions.pop(0)
        return HOLD


@pytest.fixture
def catalog() -> tuple:
    """Two-instrument catalog with round prices."""
    return (
        InstrumentSpec("AAA", "Alpha Corp", Decimal("100.00")),
        InstrumentSpec("BBB", "Beta Industries", Decimal("50.00")),
    )


@pytest.fixture
def flat_market(catalog) -> Market:
    """Market whose prices never move."""
    return Market.from_catalog(catalog, MarketParams(max_move_pct=0.0), seed=1)


@pytest.fixture
def instruments() -> list:
    """Fresh mutable instruments for direct Market construction."""
    return [
        Instrument("AAA", "Alpha Corp", Decimal("100.00")),
        Instrument("BBB", "Beta Industries", Decimal("50.00")),
    ]


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual-clock scheduler starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def fast_config(catalog) -> BattleConfig:
    """Short deterministic match: 2 s rounds, 1 s transition, flat prices."""
    return BattleConfig(
        max_rounds=3,
        round_duration_seconds=2,
        transition_seconds=1,
        starting_cash=Decimal("10000.00"),
        market=MarketParams(tick_ms=1000, max_move_pct=0.0),
        ai=AIParams(policy="random", poll_interval_range_ms=(500, 500)),
        instrument_catalog=catalog,
        seed=42,
    )


@pytest.fixture
def scripted_policy_factory():
    """Build a ScriptedPolicy from a list of actions."""
    return ScriptedPolicy
