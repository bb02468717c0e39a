"""Tests for participant accounts."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from battle_app.errors import (
    AccountFrozenError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    InvalidTradeError,
    TradeRejectedError,
)
from battle_app.market.models import InstrumentQuote, MarketSnapshot
from battle_app.portfolio import Account, TradeKind


def make_snapshot(**prices) -> MarketSnapshot:
    return MarketSnapshot(
        tick_index=0,
        quotes=tuple(
            InstrumentQuote(symbol, symbol, Decimal(price), Decimal("0.00"), 0.0)
            for symbol, price in prices.items()
        ),
    )


class TestBuy:
    """Test purchases."""

    def test_buy_debits_cash_exactly(self):
        """Test that buying 10 @ 100.00 from 10000.00 leaves exactly 9000.00."""
        account = Account("human", Decimal("10000.00"))

        trade = account.buy("AAA", 10, Decimal("100.00"))

        assert account.cash == Decimal("9000.00")
        assert account.holdings == {"AAA": 10}
        assert trade.kind == TradeKind.BUY
        assert trade.notional == Decimal("1000.00")

    def test_buy_accumulates_holdings(self):
        account = Account("human", Decimal("10000.00"))

        account.buy("AAA", 3, Decimal("10.50"))
        account.buy("AAA", 2, Decimal("11.25"))

        assert account.shares_of("AAA") == 5
        assert account.cash == Decimal("9946.00")

    def test_insufficient_funds_leaves_account_unchanged(self):
        account = Account("ai", Decimal("100.00"))

        with pytest.raises(InsufficientFundsError) as exc_info:
            account.buy("AAA", 2, Decimal("50.01"))

        assert exc_info.value.required == Decimal("100.02")
        assert exc_info.value.available == Decimal("100.00")
        assert exc_info.value.reason == "insufficient_funds"
        assert account.cash == Decimal("100.00")
        assert account.holdings == {}
        assert account.trades == ()

    def test_spending_entire_balance_allowed(self):
        account = Account("ai", Decimal("100.00"))

        account.buy("AAA", 2, Decimal("50.00"))

        assert account.cash == Decimal("0.00")

    @pytest.mark.parametrize("shares", [0, -1, 1.5, True])
    def test_invalid_share_counts_rejected(self, shares):
        account = Account("human", Decimal("1000.00"))

        with pytest.raises(InvalidTradeError):
            account.buy("AAA", shares, Decimal("10.00"))

    def test_non_positive_price_rejected(self):
        account = Account("human", Decimal("1000.00"))

        with pytest.raises(InvalidTradeError):
            account.buy("AAA", 1, Decimal("0"))


class TestSell:
    """Test sales."""

    def test_round_trip_at_same_price_restores_cash(self):
        """Test that buy then sell at the same price is exactly cash-neutral."""
        account = Account("human", Decimal("10000.00"))

        account.buy("AAA", 7, Decimal("33.33"))
        account.sell("AAA", 7, Decimal("33.33"))

        assert account.cash == Decimal("10000.00")
        assert account.holdings == {}
        assert "AAA" not in account.holdings

    def test_partial_sell_keeps_remaining_shares(self):
        account = Account("human", Decimal("1000.00"))
        account.buy("AAA", 5, Decimal("10.00"))

        account.sell("AAA", 2, Decimal("12.00"))

        assert account.shares_of("AAA") == 3
        assert account.cash == Decimal("974.00")

    def test_selling_more_than_held_rejected(self):
        account = Account("human", Decimal("1000.00"))
        account.buy("AAA", 1, Decimal("10.00"))

        with pytest.raises(InsufficientHoldingsError) as exc_info:
            account.sell("AAA", 2, Decimal("10.00"))

        assert exc_info.value.available == 1
        assert account.shares_of("AAA") == 1

    def test_selling_unowned_symbol_rejected(self):
        account = Account("human", Decimal("1000.00"))

        with pytest.raises(InsufficientHoldingsError):
            account.sell("ZZZ", 1, Decimal("10.00"))


class TestValuation:
    """Test total value computation."""

    def test_total_value_uses_snapshot_prices(self):
        account = Account("human", Decimal("10000.00"))
        account.buy("AAA", 10, Decimal("100.00"))
        account.buy("BBB", 4, Decimal("50.00"))

        snapshot = make_snapshot(AAA="120.00", BBB="45.00")

        assert account.holdings_value(snapshot) == Decimal("1380.00")
        assert account.total_value(snapshot) == Decimal("10180.00")
        assert account.return_pct(snapshot) == pytest.approx(1.8)

    def test_missing_symbol_valued_at_zero_and_logged(self):
        """Test that a stale snapshot contributes zero and logs a warning."""
        account = Account("human", Decimal("1000.00"))
        account.buy("GONE", 2, Decimal("100.00"))

        with patch("battle_app.portfolio.account.logger") as mock_logger:
            value = account.total_value(make_snapshot(AAA="10.00"))

        assert value == Decimal("800.00")
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["symbol"] == "GONE"


class TestTradeLogAndFreeze:
    """Test the trade log and account freezing."""

    def test_trade_log_is_append_only_copy(self):
        account = Account("human", Decimal("1000.00"))
        account.buy("AAA", 1, Decimal("10.00"))
        account.sell("AAA", 1, Decimal("11.00"))

        trades = account.trades

        assert [t.id for t in trades] == ["human-0001", "human-0002"]
        assert [t.kind for t in trades] == [TradeKind.BUY, TradeKind.SELL]
        assert isinstance(trades, tuple)

    def test_frozen_account_rejects_trades(self):
        account = Account("ai", Decimal("1000.00"))
        account.freeze()

        with pytest.raises(AccountFrozenError) as exc_info:
            account.buy("AAA", 1, Decimal("10.00"))

        assert isinstance(exc_info.value, TradeRejectedError)
        assert account.frozen is True
        assert account.cash == Decimal("1000.00")

    def test_view_is_immutable_copy(self):
        account = Account("ai", Decimal("1000.00"))
        account.buy("BBB", 2, Decimal("10.00"))
        account.buy("AAA", 1, Decimal("10.00"))

        view = account.view()
        account.sell("BBB", 2, Decimal("10.00"))

        assert view.holdings == (("AAA", 1), ("BBB", 2))
        assert view.shares_of("BBB") == 2
        assert view.cash == Decimal("970.00")
