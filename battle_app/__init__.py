"""
Trade Battle - Human vs AI Trading Competition Engine

Runs a multi-round, timed trading match between a human participant and an
automated trader. Each side trades against a randomly evolving simulated
market and the side with the higher portfolio value wins the round.
"""

__version__ = "0.1.0"
__author__ = "Trade Battle Team"
