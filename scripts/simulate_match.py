#!/usr/bin/env python3
"""
Headless match simulation.

Runs a complete match on the virtual clock, with a scripted human that
buys the cheapest instrument at the start of each round, and prints the
session record.

Usage:
    python scripts/simulate_match.py [seed] [policy]
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from battle_app.battle.models import BattlePhase
from battle_app.battle.orchestrator import BattleOrchestrator
from battle_app.config.loader import ConfigLoader
from battle_app.logging import configure_logging
from battle_app.recording import StdoutSessionSink
from battle_app.scheduling import ManualScheduler


def main():
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 7
    policy = sys.argv[2] if len(sys.argv) > 2 else "random"

    configure_logging(level="WARNING")
    config = ConfigLoader.create().load_battle_config({
        "seed": seed,
        "ai": {"policy": policy},
        "auto_start_rounds": False,
    })

    scheduler = ManualScheduler()
    orchestrator = BattleOrchestrator(
        config,
        sink=StdoutSessionSink(format="pretty"),
        scheduler=scheduler,
    )

    print(f"🏁 Simulating {config.max_rounds}-round match (seed={seed}, policy={policy})")

    while not orchestrator.is_complete:
        orchestrator.start_round()
        snapshot = orchestrator.current_market_snapshot()
        cheapest = min(snapshot, key=lambda q: q.price)
        shares = int(orchestrator.human_account.cash // cheapest.price // 2)
        outcome = orchestrator.submit_human_trade("buy", cheapest.symbol, shares)
        print(f"  Round {orchestrator.current_round}: human buys {shares} {cheapest.symbol} "
              f"({'ok' if outcome.accepted else outcome.reason})")

        while orchestrator.phase not in (BattlePhase.SETUP, BattlePhase.MATCH_COMPLETE):
            scheduler.advance(config.countdown_tick_seconds)

        last = orchestrator.session.results[-1]
        print(f"    human {last.human_final_value} vs ai {last.ai_final_value} -> {last.winner.value}")

    scheduler.advance(0)
    result = orchestrator.result
    print(f"🏆 Outcome: {result.outcome.value} ({result.human_wins}-{result.ai_wins})")


if __name__ == "__main__":
    main()
