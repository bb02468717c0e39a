"""Decision source fed by the human trade intake."""

from collections import deque
from typing import Union

from ..logging.config import get_logger
from ..market.models import MarketSnapshot
from ..portfolio.models import AccountView, TradeKind
from .base import DecisionSource
from .models import HOLD, ProposedAction, TradeRequest

logger = get_logger(__name__)


class HumanDecisionSource(DecisionSource):
    """FIFO of UI trade requests; each proposal drains at most one."""

    def __init__(self, name: str = "human"):
        super().__init__(name)
        self._queue: deque[TradeRequest] = deque()

    def submit(self, kind: Union[TradeKind, str], symbol: str, shares: int) -> TradeRequest:
        """Enqueue a request. Affordability is checked at execution, not here."""
        request = TradeRequest(kind=TradeKind(kind), symbol=symbol, shares=shares)
        self._queue.append(request)
        logger.debug(
            "Human trade request queued",
            kind=request.kind.value,
            symbol=symbol,
            shares=shares,
            queued=len(self._queue)
        )
        return request

    def pending(self) -> int:
        return len(self._queue)

    def clear(self) -> int:
        """Discard queued requests, returning how many were dropped."""
        dropped = len(self._queue)
        self._queue.clear()
        if dropped:
            logger.info("Discarded queued human trade requests", dropped=dropped)
        return dropped

    def reset(self) -> None:
        self.clear()

    def propose_action(self, snapshot: MarketSnapshot, account: AccountView) -> ProposedAction:
        if not self._queue:
            return HOLD
        return self._queue.popleft().to_action()
