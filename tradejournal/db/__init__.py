"""Persistence for TradeJournal."""

from tradejournal.db.store import TradeStore, watch_statistics

__all__ = ["TradeStore", "watch_statistics"]
