"""Tests for human and automated decision sources."""

from decimal import Decimal
from unittest.mock import Mock, patch

import pytest

from battle_app.decisions import (
    HOLD,
    ActionKind,
    AutomatedDecisionSource,
    HumanDecisionSource,
    ProposedAction,
    TradingPolicy,
)
from battle_app.portfolio import Account, TradeKind


class TestHumanDecisionSource:
    """Test the human trade intake queue."""

    def test_empty_queue_holds(self, flat_market):
        source = HumanDecisionSource()

        action = source.propose_action(flat_market.snapshot(), Account("human", 100).view())

        assert action is HOLD
        assert action.is_hold

    def test_requests_drained_in_fifo_order(self, flat_market):
        source = HumanDecisionSource()
        source.submit(TradeKind.BUY, "AAA", 2)
        source.submit("sell", "BBB", 1)
        view = Account("human", 100).view()

        first = source.propose_action(flat_market.snapshot(), view)
        second = source.propose_action(flat_market.snapshot(), view)

        assert (first.kind, first.symbol, first.shares) == (ActionKind.BUY, "AAA", 2)
        assert (second.kind, second.symbol, second.shares) == (ActionKind.SELL, "BBB", 1)
        assert source.pending() == 0

    def test_submit_does_not_check_affordability(self):
        """Test that unaffordable requests are queued and rejected only at execution."""
        source = HumanDecisionSource()

        request = source.submit("buy", "AAA", 1_000_000)

        assert request.kind == TradeKind.BUY
        assert source.pending() == 1

    def test_unknown_kind_raises_value_error(self):
        source = HumanDecisionSource()

        with pytest.raises(ValueError):
            source.submit("short", "AAA", 1)

    def test_clear_reports_dropped_count(self):
        source = HumanDecisionSource()
        source.submit("buy", "AAA", 1)
        source.submit("buy", "BBB", 1)

        assert source.clear() == 2
        assert source.pending() == 0


class TestAutomatedDecisionSource:
    """Test policy wrapping and failure containment."""

    def test_delegates_to_policy(self, flat_market):
        policy = Mock(spec=TradingPolicy)
        policy.name = "mock"
        policy.decide.return_value = ProposedAction.buy("AAA", 1)
        source = AutomatedDecisionSource(policy)

        action = source.propose_action(flat_market.snapshot(), Account("ai", 1000).view())

        assert action == ProposedAction.buy("AAA", 1)
        assert source.decisions == 1
        assert source.failures == 0

    def test_policy_exception_degrades_to_hold(self, flat_market):
        """Test that a raising policy yields HOLD and a logged warning."""
        policy = Mock(spec=TradingPolicy)
        policy.name = "broken"
        policy.decide.side_effect = RuntimeError("model offline")
        source = AutomatedDecisionSource(policy)

        with patch("battle_app.decisions.automated.logger") as mock_logger:
            action = source.propose_action(flat_market.snapshot(), Account("ai", 1000).view())

        assert action is HOLD
        assert source.failures == 1
        mock_logger.warning.assert_called_once()
        kwargs = mock_logger.warning.call_args.kwargs
        assert kwargs["policy"] == "broken"
        assert kwargs["fallback"] == "hold"
        assert kwargs["error_type"] == "RuntimeError"

    def test_wrong_return_type_degrades_to_hold(self, flat_market):
        policy = Mock(spec=TradingPolicy)
        policy.name = "sloppy"
        policy.decide.return_value = {"kind": "buy"}
        source = AutomatedDecisionSource(policy)

        action = source.propose_action(flat_market.snapshot(), Account("ai", Decimal("1000")).view())

        assert action is HOLD
        assert source.failures == 1

    def test_reset_resets_policy(self):
        policy = Mock(spec=TradingPolicy)
        policy.name = "mock"
        source = AutomatedDecisionSource(policy)

        source.reset()

        policy.reset.assert_called_once()
