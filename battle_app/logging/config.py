"""
Centralized logging configuration for the trading battle engine.

Every module logs through structlog loggers obtained here. Battle and
trading records carry `audit_trail=True` so a match can be replayed from
its log.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def _build_processors(
    format_json: bool,
    include_timestamp: bool,
    include_caller: bool
) -> list:
    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.MODULE,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    renderer = (
        structlog.processors.JSONRenderer()
        if format_json
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    processors.append(renderer)
    return processors


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False
) -> None:
    """
    Configure structlog for the battle engine.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Emit one JSON object per line instead of console output
        include_timestamp: Add an ISO-8601 UTC timestamp to each record
        include_caller: Add the calling module and line number
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
        format="%(message)s"
    )

    structlog.configure(
        processors=_build_processors(format_json, include_timestamp, include_caller),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_battle_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for battle orchestration records.

    Phase transitions and round scoring are written through this logger so
    that a full match can be reconstructed from the audit trail.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the battle subsystem
    """
    return get_logger(name).bind(
        subsystem="battle",
        audit_trail=True
    )


def get_trading_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for trade execution records.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the trading subsystem
    """
    return get_logger(name).bind(
        subsystem="trading",
        audit_trail=True
    )


def log_trade_decision(
    logger: FilteringBoundLogger,
    participant: str,
    accepted: bool,
    action: str,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an executed or rejected trade with standardized format.

    Args:
        logger: Structlog logger instance
        participant: Which side proposed the trade (human or ai)
        accepted: Whether the trade was executed
        action: Trade kind (buy or sell)
        reason: Rejection reason, or "executed"
        context: Additional context data
    """
    bound_logger = logger.bind(
        participant=participant,
        trade_result="ACCEPTED" if accepted else "REJECTED",
        action=action,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if accepted:
        bound_logger.info("Trade executed")
    else:
        bound_logger.info("Trade rejected")


def log_phase_transition(
    logger: FilteringBoundLogger,
    session_id: str,
    from_phase: str,
    to_phase: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a battle phase transition with standardized format.

    Args:
        logger: Structlog logger instance
        session_id: ID of the match session
        from_phase: Current phase
        to_phase: Target phase
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        session_id=session_id,
        from_phase=from_phase,
        to_phase=to_phase,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Phase transition")
