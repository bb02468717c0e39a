"""
Participant account: cash, holdings and trade log.

Buy and sell validate everything before touching state, so a rejected
trade leaves the account exactly as it was.
"""

from decimal import Decimal
from typing import Optional

from ..errors import (
    AccountFrozenError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    InvalidTradeError,
)
from ..logging.config import get_logger
from ..market.models import MarketSnapshot
from ..utils.money import Number, to_money
from ..utils.time import utc_now
from .models import AccountView, Trade, TradeKind

logger = get_logger(__name__)


class Account:
    """One participant's cash balance and holdings for a single phase."""

    def __init__(self, owner: str, starting_cash: Number):
        starting = to_money(starting_cash)
        if starting < 0:
            raise InvalidTradeError("Starting cash cannot be negative")

        self.owner = owner
        self.starting_cash = starting
        self._cash = starting
        self._holdings: dict[str, int] = {}
        self._trades: list[Trade] = []
        self._frozen = False

    @property
    def cash(self) -> Decimal:
        return self._cash

    @property
    def holdings(self) -> dict[str, int]:
        """Copy of current holdings; never contains zero entries."""
        return dict(self._holdings)

    @property
    def trades(self) -> tuple[Trade, ...]:
        return tuple(self._trades)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def shares_of(self, symbol: str) -> int:
        return self._holdings.get(symbol, 0)

    def freeze(self) -> None:
        """Reject every further trade; used once the final value is read."""
        self._frozen = True

    def _check_order(self, symbol: str, shares: int, unit_price: Decimal) -> None:
        if self._frozen:
            raise AccountFrozenError(
                f"Account {self.owner} is frozen",
                symbol=symbol,
                shares=shares
            )
        if isinstance(shares, bool) or not isinstance(shares, int) or shares <= 0:
            raise InvalidTradeError(
                "Share count must be a positive integer",
                symbol=symbol,
                shares=shares
            )
        if unit_price <= 0:
            raise InvalidTradeError(
                "Unit price must be positive",
                symbol=symbol,
                shares=shares,
                context={"unit_price": str(unit_price)}
            )

    def buy(self, symbol: str, shares: int, unit_price: Number) -> Trade:
        """
        Buy shares at unit_price.

        Raises:
            InvalidTradeError: shares or price not positive
            InsufficientFundsError: cash < shares * unit_price
            AccountFrozenError: account already scored
        """
        price = to_money(unit_price)
        self._check_order(symbol, shares, price)

        cost = price * shares
        if cost > self._cash:
            raise InsufficientFundsError(
                f"Buying {shares} {symbol} costs {cost}, only {self._cash} available",
                required=cost,
                available=self._cash,
                symbol=symbol,
                shares=shares
            )

        self._cash -= cost
        self._holdings[symbol] = self._holdings.get(symbol, 0) + shares
        return self._record(TradeKind.BUY, symbol, shares, price)

    def sell(self, symbol: str, shares: int, unit_price: Number) -> Trade:
        """
        Sell shares at unit_price.

        Raises:
            InvalidTradeError: shares or price not positive
            InsufficientHoldingsError: fewer than shares held
            AccountFrozenError: account already scored
        """
        price = to_money(unit_price)
        self._check_order(symbol, shares, price)

        held = self._holdings.get(symbol, 0)
        if held < shares:
            raise InsufficientHoldingsError(
                f"Selling {shares} {symbol} but only {held} held",
                required=shares,
                available=held,
                symbol=symbol,
                shares=shares
            )

        self._cash += price * shares
        remaining = held - shares
        if remaining:
            self._holdings[symbol] = remaining
        else:
            del self._holdings[symbol]
        return self._record(TradeKind.SELL, symbol, shares, price)

    def _record(self, kind: TradeKind, symbol: str, shares: int, price: Decimal) -> Trade:
        trade = Trade(
            id=f"{self.owner}-{len(self._trades) + 1:04d}",
            kind=kind,
            symbol=symbol,
            shares=shares,
            price=price,
            timestamp=utc_now(),
        )
        self._trades.append(trade)
        return trade

    def holdings_value(self, snapshot: MarketSnapshot) -> Decimal:
        """
        Market value of all holdings at snapshot prices.

        A held symbol missing from the snapshot contributes zero and is
        logged, since it means the snapshot is stale.
        """
        total = Decimal("0.00")
        for symbol, shares in self._holdings.items():
            price: Optional[Decimal] = snapshot.price_of(symbol)
            if price is None:
                logger.warning(
                    "Held symbol missing from snapshot, valued at zero",
                    owner=self.owner,
                    symbol=symbol,
                    shares=shares,
                    tick_index=snapshot.tick_index
                )
                continue
            total += price * shares
        return total

    def total_value(self, snapshot: MarketSnapshot) -> Decimal:
        """Cash plus holdings valued at snapshot prices."""
        return self._cash + self.holdings_value(snapshot)

    def return_pct(self, snapshot: MarketSnapshot) -> float:
        """Percentage gain over starting cash."""
        if self.starting_cash == 0:
            return 0.0
        return float((self.total_value(snapshot) - self.starting_cash) / self.starting_cash * 100)

    def view(self) -> AccountView:
        """Immutable copy of cash and holdings."""
        return AccountView(
            owner=self.owner,
            cash=self._cash,
            holdings=tuple(sorted(self._holdings.items())),
        )
