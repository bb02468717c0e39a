"""
Recovery strategy classifications for error handling.

These base classes categorize errors by their recovery characteristics
and guide how the orchestrator contains them.
"""

from typing import Any, Dict, Optional


class RecoverableError(Exception):
    """Base for errors the match recovers from without intervention."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class GracefulDegradationError(Exception):
    """Base for errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class DecisionSourceError(GracefulDegradationError):
    """A trading policy failed; the decision source falls back to holding."""

    def __init__(self, message: str, policy_name: Optional[str] = None,
                 cause: Optional[BaseException] = None, **kwargs):
        kwargs.setdefault("degraded_functionality", "automated_trading")
        kwargs.setdefault("fallback_strategy", "hold")
        super().__init__(message, **kwargs)
        self.policy_name = policy_name
        self.cause = cause
