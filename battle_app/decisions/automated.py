"""Decision source driven by a pluggable trading policy."""

from ..errors import DecisionSourceError
from ..logging.config import get_logger
from ..market.models import MarketSnapshot
from ..portfolio.models import AccountView
from .base import DecisionSource
from .models import HOLD, ProposedAction
from .policies import TradingPolicy

logger = get_logger(__name__)


class AutomatedDecisionSource(DecisionSource):
    """
    Wraps a TradingPolicy so that policy failures degrade to HOLD.

    The orchestrator polls this source on the AI phase interval; nothing
    raised inside the policy ever reaches it.
    """

    def __init__(self, policy: TradingPolicy, name: str = "ai"):
        super().__init__(name)
        self.policy = policy
        self.decisions = 0
        self.failures = 0

    def propose_action(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        self.decisions += 1
        try:
            action = self.policy.decide(snapshot, account)
            if not isinstance(action, ProposedAction):
                raise TypeError(
                    f"Policy returned {type(action).__name__}, expected ProposedAction"
                )
            return action
        except Exception as e:
            self.failures += 1
            error = DecisionSourceError(
                f"Trading policy {self.policy.name} failed: {e}",
                policy_name=self.policy.name,
                cause=e
            )
            logger.warning(
                "Decision source failed, holding",
                source=self.name,
                policy=error.policy_name,
                fallback=error.fallback_strategy,
                error=str(e),
                error_type=type(e).__name__
            )
            return HOLD

    def reset(self) -> None:
        self.policy.reset()
