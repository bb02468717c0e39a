"""
Battle orchestrator: the match state machine.

Sequences SETUP -> HUMAN_TURN -> TRANSITION -> AI_TURN -> ROUND_RESOLVED
for each round, owns every timer of the active phase and decides round and
match winners. All work happens on scheduler callbacks, so the orchestrator
is single-threaded and never needs locks.
"""

import asyncio
import random
import uuid
from decimal import Decimal
from typing import Callable, Optional, Union

from ..config.defaults import BattleConfig, get_default_config
from ..config.loader import validate_battle_config
from ..decisions.automated import AutomatedDecisionSource
from ..decisions.base import DecisionSource
from ..decisions.human import HumanDecisionSource
from ..decisions.models import ProposedAction
from ..decisions.policies import TradingPolicy, build_policy
from ..errors import (
    DecisionSourceError,
    InvalidTradeError,
    PersistenceError,
    StateTransitionError,
    TradeRejectedError,
    UnknownInstrumentError,
)
from ..logging.config import (
    get_battle_logger,
    get_trading_logger,
    log_phase_transition,
    log_trade_decision,
)
from ..market.market import Market
from ..market.models import MarketSnapshot
from ..portfolio.account import Account
from ..portfolio.models import TradeKind
from ..recording.base import SessionSink
from ..recording.models import SessionRecord
from ..scheduling.asyncio_scheduler import AsyncioScheduler
from ..scheduling.base import Scheduler, TimerHandle
from ..scheduling.timer import PeriodicTask, RoundTimer
from ..utils.time import elapsed_ms, utc_now
from .models import (
    ALLOWED_TRANSITIONS,
    BattleEvent,
    BattlePhase,
    BattleSession,
    MatchResult,
    RoundResult,
    TradeOutcome,
    Winner,
)
from .scoring import determine_match_winner, determine_round_winner, is_match_over

battle_logger = get_battle_logger(__name__)
trading_logger = get_trading_logger(__name__)

HUMAN = "human"
AI = "ai"
NOT_ACCEPTING_TRADES = "not_accepting_trades"

Listener = Callable[[BattleEvent], None]
CompletionCallback = Callable[[MatchResult], None]


class BattleOrchestrator:
    """Runs one human vs AI match from the first SETUP to MATCH_COMPLETE."""

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        sink: Optional[SessionSink] = None,
        scheduler: Optional[Scheduler] = None,
        policy: Optional[TradingPolicy] = None,
        ai_source: Optional[DecisionSource] = None,
        human_source: Optional[HumanDecisionSource] = None,
        session_id: Optional[str] = None,
    ):
        """
        Build an orchestrator in SETUP for round 1.

        Args:
            config: Match configuration, defaults when omitted
            sink: Receives the SessionRecord once the match completes
            scheduler: Timer substrate, an AsyncioScheduler when omitted
            policy: Trading policy for the AI; built from config.ai.policy when omitted
            ai_source: Replaces the automated decision source entirely
            human_source: Trade intake queue for the human
            session_id: Identifier for the session record

        Raises:
            ConfigurationError: invalid configuration or unknown policy
        """
        self.config = config or get_default_config()
        validate_battle_config(self.config)

        self.sink = sink
        self._scheduler = scheduler or AsyncioScheduler()
        self._rng = random.Random(self.config.seed)

        if ai_source is None:
            policy = policy or build_policy(
                self.config.ai.policy,
                random.Random(self._rng.getrandbits(32))
            )
            ai_source = AutomatedDecisionSource(policy)
        self.ai_source = ai_source
        self.human_source = human_source or HumanDecisionSource()

        self._session = BattleSession(
            session_id=session_id or uuid.uuid4().hex[:12],
            max_rounds=self.config.max_rounds,
        )
        self.auto_start_rounds = self.config.auto_start_rounds

        tick_seconds = self.config.countdown_tick_seconds
        self._countdown = RoundTimer(self._scheduler, tick_seconds=tick_seconds)
        self._market_task: Optional[PeriodicTask] = None
        self._ai_poll_task: Optional[PeriodicTask] = None
        self._pending_handle: Optional[TimerHandle] = None

        self._human_market: Optional[Market] = None
        self._ai_market: Optional[Market] = None
        self._human_market_seed: Optional[int] = None
        self._human_account: Optional[Account] = None
        self._ai_account: Optional[Account] = None
        self._human_final_value: Optional[Decimal] = None
        self._human_return_pct = 0.0
        self._ai_poll_ms = 0

        self._listeners: list[Listener] = []
        self._completion_callbacks: list[CompletionCallback] = []
        self._waiters: list[asyncio.Future] = []
        self._result: Optional[MatchResult] = None

        self._prepare_round()

        battle_logger.info(
            "Battle created",
            session_id=self._session.session_id,
            max_rounds=self.config.max_rounds,
            round_duration_seconds=self.config.round_duration_seconds,
            ai_source=self.ai_source.name,
            seed=self.config.seed
        )

    # Read-only accessors

    @property
    def phase(self) -> BattlePhase:
        return self._session.phase

    @property
    def current_round(self) -> int:
        return self._session.current_round

    @property
    def session(self) -> BattleSession:
        """Detached copy of the session aggregate."""
        return self._session.copy()

    @property
    def human_account(self) -> Optional[Account]:
        return self._human_account

    @property
    def ai_account(self) -> Optional[Account]:
        return self._ai_account

    @property
    def seconds_remaining(self) -> float:
        """Countdown left in the current timed phase, zero otherwise."""
        if not self._countdown.is_running():
            return 0.0
        return self._countdown.remaining * self.config.countdown_tick_seconds

    @property
    def result(self) -> Optional[MatchResult]:
        return self._result

    @property
    def is_complete(self) -> bool:
        return self._session.phase == BattlePhase.MATCH_COMPLETE

    def current_market_snapshot(self) -> Optional[MarketSnapshot]:
        market = self._active_market()
        return market.snapshot() if market is not None else None

    def _active_market(self) -> Optional[Market]:
        if self._session.phase in (BattlePhase.AI_TURN, BattlePhase.ROUND_RESOLVED,
                                  BattlePhase.MATCH_COMPLETE):
            return self._ai_market
        return self._human_market

    # Observers

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def on_complete(self, callback: CompletionCallback) -> None:
        """Register a callback for the final MatchResult; runs at once if already complete."""
        if self._result is not None:
            self._call_completion(callback, self._result)
            return
        self._completion_callbacks.append(callback)

    def _emit(self, kind: str, **payload) -> None:
        event = BattleEvent(
            kind=kind,
            phase=self._session.phase,
            round_number=self._session.current_round,
            payload=payload,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                battle_logger.error(
                    "Battle listener failed",
                    session_id=self._session.session_id,
                    event_kind=kind,
                    error=str(e),
                    exc_info=True
                )

    def _call_completion(self, callback: CompletionCallback, result: MatchResult) -> None:
        try:
            callback(result)
        except Exception as e:
            battle_logger.error(
                "Completion callback failed",
                session_id=result.session_id,
                error=str(e),
                exc_info=True
            )

    # Public control

    def start_round(self) -> None:
        """
        Start the human phase of the prepared round.

        Raises:
            StateTransitionError: not in SETUP
        """
        if self._session.phase != BattlePhase.SETUP:
            raise StateTransitionError(
                f"Cannot start a round from {self._session.phase.value}",
                current_state=self._session.phase.value,
                attempted_transition=BattlePhase.HUMAN_TURN.value
            )
        if self._session.started_at is None:
            self._session.started_at = utc_now()
        self._transition(BattlePhase.HUMAN_TURN, trigger="start_round")

    def submit_human_trade(
        self,
        kind: Union[TradeKind, str],
        symbol: str,
        shares: int
    ) -> TradeOutcome:
        """
        Queue a human trade and execute it at the current price.

        Rejections are returned, never raised: outside HUMAN_TURN the
        reason is "not_accepting_trades", otherwise the reason of the
        account or market check that failed.
        """
        if self._session.phase != BattlePhase.HUMAN_TURN:
            outcome = TradeOutcome(
                accepted=False,
                reason=NOT_ACCEPTING_TRADES,
                message=f"Trades are not accepted during {self._session.phase.value}"
            )
            log_trade_decision(
                trading_logger,
                participant=HUMAN,
                accepted=False,
                action=str(getattr(kind, "value", kind)),
                reason=outcome.reason,
                context={"symbol": symbol, "shares": shares, "phase": self._session.phase.value}
            )
            return outcome

        try:
            self.human_source.submit(kind, symbol, shares)
        except ValueError:
            outcome = TradeOutcome(
                accepted=False,
                reason=InvalidTradeError.reason,
                message=f"Unknown trade kind: {kind}"
            )
            log_trade_decision(
                trading_logger,
                participant=HUMAN,
                accepted=False,
                action=str(kind),
                reason=outcome.reason,
                context={"symbol": symbol, "shares": shares}
            )
            self._emit("trade_rejected", participant=HUMAN, reason=outcome.reason, symbol=symbol)
            return outcome

        # the queue holds only this request; each submission drains it
        action = self.human_source.propose_action(
            self._human_market.snapshot(),
            self._human_account.view()
        )
        return self._execute(HUMAN, self._human_account, self._human_market, action)

    def apply_market_shock(self, pct: float) -> MarketSnapshot:
        """
        Move every price of the trading market by pct percent.

        Raises:
            StateTransitionError: no market is trading in the current phase
        """
        phase = self._session.phase
        if phase not in (BattlePhase.HUMAN_TURN, BattlePhase.AI_TURN):
            raise StateTransitionError(
                f"No market is trading during {phase.value}",
                current_state=phase.value,
                attempted_transition="market_shock"
            )
        snapshot = self._active_market().apply_shock(pct)
        self._emit("market_tick", snapshot=snapshot, shock_pct=pct)
        return snapshot

    async def wait_until_complete(self) -> MatchResult:
        """Wait for MATCH_COMPLETE on the running event loop."""
        if self._result is not None:
            return self._result
        future = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        return await future

    async def run_match(self) -> MatchResult:
        """Start rounds as they become ready and wait for the final result."""
        self.auto_start_rounds = True
        if self._session.phase == BattlePhase.SETUP:
            self.start_round()
        return await self.wait_until_complete()

    # State machine

    def _transition(self, to_phase: BattlePhase, trigger: str, **context) -> None:
        from_phase = self._session.phase
        if to_phase not in ALLOWED_TRANSITIONS[from_phase]:
            raise StateTransitionError(
                f"Illegal phase transition {from_phase.value} -> {to_phase.value}",
                current_state=from_phase.value,
                attempted_transition=to_phase.value
            )

        self._cancel_phase_timers()
        self._exit_phase(from_phase)

        self._session.phase = to_phase
        prepare = {
            BattlePhase.SETUP: self._prepare_round,
            BattlePhase.AI_TURN: self._prepare_ai_turn,
        }.get(to_phase)
        if prepare is not None:
            prepare()

        log_phase_transition(
            battle_logger,
            session_id=self._session.session_id,
            from_phase=from_phase.value,
            to_phase=to_phase.value,
            trigger=trigger,
            context={"round": self._session.current_round, **context}
        )
        self._emit("phase_changed", from_phase=from_phase.value, trigger=trigger)
        if self._session.phase != to_phase:
            # a listener already moved the match on
            return

        enter = {
            BattlePhase.SETUP: self._enter_setup,
            BattlePhase.HUMAN_TURN: self._enter_human_turn,
            BattlePhase.TRANSITION: self._enter_transition,
            BattlePhase.AI_TURN: self._enter_ai_turn,
            BattlePhase.ROUND_RESOLVED: self._enter_round_resolved,
            BattlePhase.MATCH_COMPLETE: self._enter_match_complete,
        }[to_phase]
        enter()

    def _cancel_phase_timers(self) -> None:
        self._countdown.cancel()
        if self._market_task is not None:
            self._market_task.cancel()
            self._market_task = None
        if self._ai_poll_task is not None:
            self._ai_poll_task.cancel()
            self._ai_poll_task = None
        if self._pending_handle is not None:
            self._pending_handle.cancel()
            self._pending_handle = None

    def _exit_phase(self, phase: BattlePhase) -> None:
        if phase == BattlePhase.HUMAN_TURN:
            snapshot = self._human_market.snapshot()
            self._human_final_value = self._human_account.total_value(snapshot)
            self._human_return_pct = self._human_account.return_pct(snapshot)
            self._human_account.freeze()
            self.human_source.clear()
        elif phase == BattlePhase.AI_TURN:
            self._ai_account.freeze()

    def _prepare_round(self) -> None:
        """Fresh market and accounts for the upcoming round."""
        self._human_market_seed = self._rng.getrandbits(32)
        self._human_market = Market.from_catalog(
            self.config.instrument_catalog,
            self.config.market,
            seed=self._human_market_seed
        )
        self._ai_market = None
        self._human_account = Account(HUMAN, self.config.starting_cash)
        self._ai_account = Account(AI, self.config.starting_cash)
        self._human_final_value = None
        self._human_return_pct = 0.0
        self.human_source.clear()
        self.ai_source.reset()

    def _ticks_for(self, seconds: float) -> int:
        return int(round(seconds / self.config.countdown_tick_seconds))

    def _start_countdown(
        self,
        seconds: float,
        on_expire: Callable[[], None],
        minimum_ticks: int = 0
    ) -> None:
        ticks = max(minimum_ticks, self._ticks_for(seconds))
        if ticks <= 0:
            self._pending_handle = self._scheduler.call_later(0, on_expire)
            return
        self._countdown.start(ticks, on_tick=self._on_countdown, on_expire=on_expire)

    def _start_market_ticks(self, market: Market) -> None:
        self._market_task = PeriodicTask(
            self._scheduler,
            market.tick_interval_seconds,
            lambda: self._on_market_tick(market),
            name="market_tick"
        )
        self._market_task.start()

    def _enter_setup(self) -> None:
        if self.auto_start_rounds:
            self._pending_handle = self._scheduler.call_later(0, self._auto_start)

    def _auto_start(self) -> None:
        self._pending_handle = None
        if self._session.phase == BattlePhase.SETUP:
            self.start_round()

    def _enter_human_turn(self) -> None:
        self._start_market_ticks(self._human_market)
        self._start_countdown(
            self.config.round_duration_seconds,
            on_expire=self._on_human_turn_expired,
            minimum_ticks=1
        )

    def _on_human_turn_expired(self) -> None:
        if self._session.phase == BattlePhase.HUMAN_TURN:
            self._transition(BattlePhase.TRANSITION, trigger="timer_expired")

    def _enter_transition(self) -> None:
        self._start_countdown(
            self.config.transition_seconds,
            on_expire=self._on_transition_expired
        )

    def _on_transition_expired(self) -> None:
        self._pending_handle = None
        if self._session.phase == BattlePhase.TRANSITION:
            self._transition(BattlePhase.AI_TURN, trigger="transition_elapsed")

    def _prepare_ai_turn(self) -> None:
        if self.config.shared_trajectory:
            seed = self._human_market_seed
        else:
            seed = self._rng.getrandbits(32)
        self._ai_market = Market.from_catalog(
            self.config.instrument_catalog,
            self.config.market,
            seed=seed
        )

        low, high = self.config.ai.poll_interval_range_ms
        self._ai_poll_ms = self._rng.randint(low, high)

    def _enter_ai_turn(self) -> None:
        battle_logger.debug(
            "AI phase armed",
            session_id=self._session.session_id,
            round=self._session.current_round,
            poll_interval_ms=self._ai_poll_ms,
            shared_trajectory=self.config.shared_trajectory
        )

        self._start_market_ticks(self._ai_market)
        self._ai_poll_task = PeriodicTask(
            self._scheduler,
            self._ai_poll_ms / 1000.0,
            self._on_ai_poll,
            name="ai_poll"
        )
        self._ai_poll_task.start()
        self._start_countdown(
            self.config.round_duration_seconds,
            on_expire=self._on_ai_turn_expired,
            minimum_ticks=1
        )

    def _on_ai_turn_expired(self) -> None:
        if self._session.phase == BattlePhase.AI_TURN:
            self._transition(BattlePhase.ROUND_RESOLVED, trigger="timer_expired")

    def _enter_round_resolved(self) -> None:
        snapshot = self._ai_market.snapshot()
        human_value = self._human_final_value
        ai_value = self._ai_account.total_value(snapshot)
        winner = determine_round_winner(human_value, ai_value)

        result = RoundResult(
            round_number=self._session.current_round,
            human_final_value=human_value,
            ai_final_value=ai_value,
            winner=winner,
            human_trade_count=len(self._human_account.trades),
            ai_trade_count=len(self._ai_account.trades),
            human_return_pct=self._human_return_pct,
            ai_return_pct=self._ai_account.return_pct(snapshot),
        )
        self._session.results.append(result)
        if winner == Winner.HUMAN:
            self._session.human_wins += 1
        elif winner == Winner.AI:
            self._session.ai_wins += 1

        battle_logger.info(
            "Round resolved",
            session_id=self._session.session_id,
            round=result.round_number,
            winner=winner.value,
            human_value=str(human_value),
            ai_value=str(ai_value),
            human_wins=self._session.human_wins,
            ai_wins=self._session.ai_wins
        )
        self._emit("round_resolved", result=result)

        if is_match_over(
            self._session.current_round,
            self._session.max_rounds,
            self._session.human_wins,
            self._session.ai_wins
        ):
            self._transition(BattlePhase.MATCH_COMPLETE, trigger="match_decided")
        else:
            self._session.current_round += 1
            self._transition(BattlePhase.SETUP, trigger="next_round")

    def _enter_match_complete(self) -> None:
        outcome = determine_match_winner(self._session.human_wins, self._session.ai_wins)
        completed_at = utc_now()
        started_at = self._session.started_at or completed_at

        self._result = MatchResult(
            session_id=self._session.session_id,
            outcome=outcome,
            human_wins=self._session.human_wins,
            ai_wins=self._session.ai_wins,
            rounds=tuple(self._session.results),
            duration_ms=elapsed_ms(started_at, completed_at),
            completed_at=completed_at,
        )

        battle_logger.info(
            "Match complete",
            session_id=self._session.session_id,
            outcome=outcome.value,
            human_wins=self._session.human_wins,
            ai_wins=self._session.ai_wins,
            rounds=self._session.completed_rounds
        )

        if self.sink is not None:
            record = SessionRecord.from_match(self._result)
            self._scheduler.call_later(0, lambda: self._persist(record))

        self._emit("match_complete", result=self._result)

        callbacks, self._completion_callbacks = self._completion_callbacks, []
        for callback in callbacks:
            self._call_completion(callback, self._result)

        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(self._result)

    def _persist(self, record: SessionRecord) -> None:
        try:
            self.sink.record(record)
        except PersistenceError as e:
            battle_logger.error(
                "Session persistence failed",
                session_id=record.session_id,
                operation=e.operation,
                target=e.target,
                error=str(e)
            )
        except Exception as e:
            error = PersistenceError(
                f"Session sink raised {type(e).__name__}: {e}",
                operation="record",
                target=getattr(self.sink, "name", type(self.sink).__name__)
            )
            battle_logger.error(
                "Session persistence failed",
                session_id=record.session_id,
                operation=error.operation,
                target=error.target,
                error=str(error)
            )

    # Timer callbacks

    def _on_countdown(self, remaining: int) -> None:
        self._emit(
            "countdown",
            remaining=remaining,
            seconds_remaining=remaining * self.config.countdown_tick_seconds
        )

    def _on_market_tick(self, market: Market) -> None:
        if market is not self._active_market():
            return
        snapshot = market.tick()
        self._emit("market_tick", snapshot=snapshot)

    def _on_ai_poll(self) -> None:
        if self._session.phase != BattlePhase.AI_TURN:
            return
        try:
            action = self.ai_source.propose_action(
                self._ai_market.snapshot(),
                self._ai_account.view()
            )
        except Exception as e:
            error = DecisionSourceError(
                f"Decision source {self.ai_source.name} failed: {e}",
                cause=e
            )
            battle_logger.warning(
                "AI decision source failed, holding",
                session_id=self._session.session_id,
                source=self.ai_source.name,
                fallback=error.fallback_strategy,
                error=str(e),
                error_type=type(e).__name__
            )
            return
        if action.is_hold:
            return
        self._execute(AI, self._ai_account, self._ai_market, action)

    # Trade execution

    def _execute(
        self,
        participant: str,
        account: Account,
        market: Market,
        action: ProposedAction
    ) -> TradeOutcome:
        """Execute a proposed buy or sell at the market's current price."""
        kind = action.trade_kind
        try:
            if kind is None:
                raise InvalidTradeError("Hold is not a trade", symbol=action.symbol)
            price = market.price_of(action.symbol)
            if price is None:
                raise UnknownInstrumentError(
                    f"Unknown instrument: {action.symbol}",
                    symbol=action.symbol,
                    shares=action.shares
                )
            if kind == TradeKind.BUY:
                trade = account.buy(action.symbol, action.shares, price)
            else:
                trade = account.sell(action.symbol, action.shares, price)
        except TradeRejectedError as e:
            log_trade_decision(
                trading_logger,
                participant=participant,
                accepted=False,
                action=action.kind.value,
                reason=e.reason,
                context={
                    "symbol": action.symbol,
                    "shares": action.shares,
                    "round": self._session.current_round,
                    "message": str(e)
                }
            )
            self._emit(
                "trade_rejected",
                participant=participant,
                reason=e.reason,
                symbol=action.symbol,
                shares=action.shares
            )
            return TradeOutcome(accepted=False, reason=e.reason, message=str(e))

        log_trade_decision(
            trading_logger,
            participant=participant,
            accepted=True,
            action=action.kind.value,
            reason="executed",
            context={
                "trade_id": trade.id,
                "symbol": trade.symbol,
                "shares": trade.shares,
                "price": str(trade.price),
                "cash": str(account.cash),
                "reasoning": action.reasoning,
                "round": self._session.current_round
            }
        )
        self._emit("trade_executed", participant=participant, trade=trade)
        return TradeOutcome(accepted=True, trade=trade)
