"""
Decision source module.

A decision source proposes one trade, or a hold, given a market snapshot
and a read-only view of the participant's account. The human variant
relays queued UI requests; the automated variant delegates to a
pluggable trading policy.
"""
from .models import HOLD, ActionKind, ProposedAction, TradeRequest
from .base import DecisionSource
from .human import HumanDecisionSource
from .automated import AutomatedDecisionSource
from .policies import (
    POLICIES,
    ContrarianPolicy,
    RandomPolicy,
    TradingPolicy,
    TrendFollowingPolicy,
    build_policy,
)

__all__ = [
    "HOLD",
    "ActionKind",
    "ProposedAction",
    "TradeRequest",
    "DecisionSource",
    "HumanDecisionSource",
    "AutomatedDecisionSource",
    "POLICIES",
    "TradingPolicy",
    "RandomPolicy",
    "ContrarianPolicy",
    "TrendFollowingPolicy",
    "build_policy",
]
