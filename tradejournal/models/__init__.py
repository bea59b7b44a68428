"""Data models for TradeJournal."""

from tradejournal.models.trade import Trade, TradeOrder, build_trade, close_trade
from tradejournal.models.strategy import Strategy
from tradejournal.models.stats import (
    CalendarDay,
    DashboardSummary,
    EquityPoint,
    GroupPerformance,
    PnlBucket,
    StrategySummary,
    TradeStatistics,
)

__all__ = [
    "Trade",
    "TradeOrder",
    "build_trade",
    "close_trade",
    "Strategy",
    "CalendarDay",
    "DashboardSummary",
    "EquityPoint",
    "GroupPerformance",
    "PnlBucket",
    "StrategySummary",
    "TradeStatistics",
]
