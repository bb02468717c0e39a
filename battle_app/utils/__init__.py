"""
Utility functions module.

Common helpers for timestamps and money arithmetic shared across the
engine.

Money Semantics:
- Prices and cash are Decimal values quantized to cents
- Every mutation re-quantizes so buy/sell round trips are exact
"""
