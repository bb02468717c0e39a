"""
Simulated market module.

Owns the tradable instruments of one phase and advances their prices on
a fixed tick with a seeded random walk.
"""
from .models import Instrument, InstrumentQuote, MarketSnapshot
from .market import Market

__all__ = ["Instrument", "InstrumentQuote", "Market", "MarketSnapshot"]
