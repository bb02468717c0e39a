"""
Portfolio module.

Cash, holdings and the append-only trade log of one participant.
"""
from .models import AccountView, Trade, TradeKind
from .account import Account

__all__ = ["Account", "AccountView", "Trade", "TradeKind"]
