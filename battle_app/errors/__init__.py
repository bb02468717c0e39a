"""
Error classification system for the trading battle engine.

This module provides a structured exception hierarchy separating rejected
trades (recoverable, the phase continues), degraded decision making and
fatal configuration or state failures.
"""

from .trading import (
    TradeRejectedError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    InvalidTradeError,
    UnknownInstrumentError,
    AccountFrozenError,
)
from .system_failures import (
    SystemFailureError,
    ConfigurationError,
    StateTransitionError,
    PersistenceError,
)
from .recovery import (
    RecoverableError,
    GracefulDegradationError,
    DecisionSourceError,
)

__all__ = [
    # Trade rejections
    "TradeRejectedError",
    "InsufficientFundsError",
    "InsufficientHoldingsError",
    "InvalidTradeError",
    "UnknownInstrumentError",
    "AccountFrozenError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "StateTransitionError",
    "PersistenceError",
    # Recovery Categories
    "RecoverableError",
    "GracefulDegradationError",
    "DecisionSourceError",
]
