"""CLI commands for TradeJournal.

This package provides the command-line interface for TradeJournal,
including trade entry, statistics, calendar and strategy commands.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
