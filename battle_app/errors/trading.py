"""
Trade rejection errors raised by account operations.

All of these are user-facing and recoverable: the proposed trade is
rejected, reported to the caller and the phase continues.
"""

from decimal import Decimal
from typing import Optional

from .recovery import RecoverableError


class TradeRejectedError(RecoverableError):
    """Base class for a trade that could not be executed."""

    reason = "rejected"

    def __init__(self, message: str, symbol: Optional[str] = None,
                 shares: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.shares = shares


class InsufficientFundsError(TradeRejectedError):
    """Cash balance does not cover the purchase."""

    reason = "insufficient_funds"

    def __init__(self, message: str, required: Optional[Decimal] = None,
                 available: Optional[Decimal] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required = required
        self.available = available


class InsufficientHoldingsError(TradeRejectedError):
    """Not enough shares held to cover the sale."""

    reason = "insufficient_holdings"

    def __init__(self, message: str, required: Optional[int] = None,
                 available: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required = required
        self.available = available


class InvalidTradeError(TradeRejectedError):
    """Share count or price is not a positive value."""

    reason = "invalid_trade"


class UnknownInstrumentError(TradeRejectedError):
    """Symbol is not listed in the current market."""

    reason = "unknown_instrument"


class AccountFrozenError(TradeRejectedError):
    """Account has been frozen for scoring and accepts no more trades."""

    reason = "account_frozen"
