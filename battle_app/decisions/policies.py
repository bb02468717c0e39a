"""
Trading policies for the automated decision source.

Every policy implements decide(snapshot, account) -> ProposedAction and
is substitutable without touching the orchestrator.
"""

import random
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..errors import ConfigurationError
from ..market.models import InstrumentQuote, MarketSnapshot
from ..portfolio.models import AccountView
from .models import HOLD, ProposedAction


def affordable_shares(cash: Decimal, price: Decimal) -> int:
    """Whole shares purchasable with cash at price."""
    if price <= 0:
        return 0
    return int(cash // price)


class TradingPolicy(ABC):
    """Base class for automated trading strategies."""

    name = "policy"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    @abstractmethod
    def decide(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        pass

    def reset(self) -> None:
        pass


class RandomPolicy(TradingPolicy):
    """Buys 1-3 shares of a random instrument, capped by available cash."""

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None, min_shares: int = 1, max_shares: int = 3):
        super().__init__(rng)
        self.min_shares = min_shares
        self.max_shares = max_shares

    def decide(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        if not snapshot.quotes:
            return HOLD

        quote = self.rng.choice(snapshot.quotes)
        wanted = self.rng.randint(self.min_shares, self.max_shares)
        shares = min(wanted, affordable_shares(account.cash, quote.price))

        if shares < 1:
            return HOLD
        return ProposedAction.buy(quote.symbol, shares, "random pick")


class ContrarianPolicy(TradingPolicy):
    """
    Deliberately buys high and sells low.

    With probability bad_decision_rate it buys the strongest riser (ties go
    to the more expensive instrument) or, failing that, panic-sells the
    weakest owned instrument. Otherwise it falls back to buying a single
    share of the strongest riser.
    """

    name = "contrarian"

    def __init__(self, rng: Optional[random.Random] = None, bad_decision_rate: float = 0.9):
        super().__init__(rng)
        self.bad_decision_rate = bad_decision_rate
        self.history: list[ProposedAction] = []

    def decide(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        rising = sorted(
            (q for q in snapshot if q.change_pct >= 0),
            key=lambda q: (-q.change_pct, -q.price)
        )
        falling_owned = sorted(
            (q for q in snapshot if account.shares_of(q.symbol) > 0),
            key=lambda q: (q.change_pct, q.price)
        )

        top: Optional[InstrumentQuote] = rising[0] if rising else None
        can_buy_top = top is not None and account.cash >= top.price

        if self.rng.random() < self.bad_decision_rate:
            if can_buy_top:
                shares = min(
                    affordable_shares(account.cash, top.price),
                    self.rng.randint(2, 6)
                )
                return self._remember(ProposedAction.buy(
                    top.symbol, shares,
                    f"buying high: {top.symbol} up {top.change_pct:.2f}%"
                ))

            if falling_owned:
                worst = falling_owned[0]
                shares = min(account.shares_of(worst.symbol), self.rng.randint(2, 4))
                return self._remember(ProposedAction.sell(
                    worst.symbol, shares,
                    f"selling low: {worst.symbol} at {worst.change_pct:.2f}%"
                ))

        if can_buy_top:
            return self._remember(ProposedAction.buy(top.symbol, 1, "fallback buy"))

        return HOLD

    def _remember(self, action: ProposedAction) -> ProposedAction:
        self.history.append(action)
        return action

    def reset(self) -> None:
        self.history.clear()


class TrendFollowingPolicy(TradingPolicy):
    """
    Cuts losers and rides winners.

    Sells the whole position in the owned instrument with the worst
    negative last move; otherwise spends cash_fraction of cash on the
    instrument with the strongest positive last move.
    """

    name = "trend"

    def __init__(self, rng: Optional[random.Random] = None, cash_fraction: float = 0.25):
        super().__init__(rng)
        if not 0 < cash_fraction <= 1:
            raise ConfigurationError(
                "cash_fraction must be in (0, 1]",
                context={"cash_fraction": cash_fraction}
            )
        self.cash_fraction = Decimal(str(cash_fraction))

    def decide(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        losers = sorted(
            (q for q in snapshot if q.change_pct < 0 and account.shares_of(q.symbol) > 0),
            key=lambda q: q.change_pct
        )
        if losers:
            loser = losers[0]
            return ProposedAction.sell(
                loser.symbol, account.shares_of(loser.symbol),
                f"cutting {loser.symbol} after {loser.change_pct:.2f}%"
            )

        winners = sorted(
            (q for q in snapshot if q.change_pct > 0),
            key=lambda q: -q.change_pct
        )
        for winner in winners:
            budget = account.cash * self.cash_fraction
            shares = affordable_shares(budget, winner.price)
            if shares < 1 and account.cash >= winner.price:
                shares = 1
            if shares >= 1:
                return ProposedAction.buy(
                    winner.symbol, shares,
                    f"riding {winner.symbol} after +{winner.change_pct:.2f}%"
                )

        return HOLD


POLICIES: dict[str, type[TradingPolicy]] = {
    RandomPolicy.name: RandomPolicy,
    ContrarianPolicy.name: ContrarianPolicy,
    TrendFollowingPolicy.name: TrendFollowingPolicy,
}


def build_policy(name: str, rng: Optional[random.Random] = None) -> TradingPolicy:
    """
    Instantiate a registered policy by name.

    Raises:
        ConfigurationError: unknown policy name
    """
    try:
        policy_cls = POLICIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown trading policy: {name}",
            context={"policy": name, "available": sorted(POLICIES)}
        ) from None
    return policy_cls(rng=rng)
