"""
System failure error classifications.

Configuration errors abort a match before it starts. State transition
errors signal misuse of the orchestrator API. Persistence errors are
logged and never affect the match outcome.
"""

from typing import Any, Dict, Optional


class SystemFailureError(Exception):
    """Base class for system-level failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(SystemFailureError):
    """Invalid configuration detected at construction time."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class StateTransitionError(SystemFailureError):
    """Requested phase transition is not allowed from the current phase."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class PersistenceError(SystemFailureError):
    """Session sink failed to record a finished match."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
