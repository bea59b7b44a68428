"""TradeJournal - personal trading journal with performance statistics."""

__version__ = "0.1.0"
