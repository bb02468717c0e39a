"""Base class for decision sources."""

from abc import ABC, abstractmethod

from ..market.models import MarketSnapshot
from ..portfolio.models import AccountView
from .models import ProposedAction


class DecisionSource(ABC):
    """Produces trade proposals for one participant."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def propose_action(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        """
        Propose the next action.

        Args:
            snapshot: Current market state
            account: Read-only view of the participant's account

        Returns:
            A buy or sell proposal, or HOLD
        """
        pass

    def reset(self) -> None:
        """Drop any per-phase state. No-op by default."""
        pass
