#!/usr/bin/env python3
"""
Basic Usage Example - Trade Battle Engine

This script runs one short match in real time on an asyncio event loop.
It shows how to:
- Build a configuration with overrides
- Attach listeners for countdown, trades and round results
- Feed human trades into the orchestrator while the human turn runs
- Record the finished session to a JSONL file

Run: python examples/basic_usage.py
"""

import asyncio
from pathlib import Path

from battle_app.battle.models import BattleEvent, BattlePhase
from battle_app.battle.orchestrator import BattleOrchestrator
from battle_app.config.loader import ConfigLoader
from battle_app.logging import configure_logging
from battle_app.recording import CompositeSessionSink, FileSessionSink, StdoutSessionSink


def print_event(event: BattleEvent) -> None:
    """Print the interesting battle events."""
    if event.kind == "phase_changed":
        print(f"\n▶ Round {event.round_number}: {event.phase.value}")
    elif event.kind == "trade_executed":
        trade = event.payload["trade"]
        print(f"  💱 {event.payload['participant']} {trade.kind.value} {trade.shares} {trade.symbol} @ {trade.price}")
    elif event.kind == "trade_rejected":
        print(f"  ✋ {event.payload['participant']} trade rejected: {event.payload['reason']}")
    elif event.kind == "round_resolved":
        result = event.payload["result"]
        print(f"  🏁 human {result.human_final_value} vs ai {result.ai_final_value}: {result.winner.value}")


async def main() -> None:
    configure_logging(level="WARNING")

    config = ConfigLoader.create().load_battle_config({
        "max_rounds": 2,
        "round_duration_seconds": 3,
        "transition_seconds": 1,
        "market": {"tick_ms": 500, "max_move_pct": 3.0},
        "ai": {"policy": "trend", "poll_interval_range_ms": [400, 800]},
    })

    output = Path("output") / "sessions.jsonl"
    sink = CompositeSessionSink([
        StdoutSessionSink(format="pretty"),
        FileSessionSink(output),
    ])

    orchestrator = BattleOrchestrator(config, sink=sink)
    orchestrator.add_listener(print_event)

    def trade_on_human_turn(event: BattleEvent) -> None:
        if event.kind == "phase_changed" and event.phase == BattlePhase.HUMAN_TURN:
            orchestrator.submit_human_trade("buy", "TECH", 20)
            orchestrator.submit_human_trade("buy", "RETA", 40)

    orchestrator.add_listener(trade_on_human_turn)

    result = await orchestrator.run_match()
    # Give the fire-and-forget sink a chance to run
    await asyncio.sleep(0)

    print(f"\n🏆 Match outcome: {result.outcome.value} "
          f"({result.human_wins}-{result.ai_wins}) in {result.duration_ms} ms")
    print(f"📁 Session appended to {output}")


if __name__ == "__main__":
    asyncio.run(main())
