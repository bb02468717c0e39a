"""
Battle orchestration module.

Sequences a match through SETUP → HUMAN_TURN → TRANSITION → AI_TURN →
ROUND_RESOLVED, repeating until MATCH_COMPLETE, and scores every round.
"""
