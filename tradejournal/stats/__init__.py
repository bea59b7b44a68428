"""Trade statistics for TradeJournal.

All functions here are pure: they take a snapshot of trades and return
fresh results without touching the store.
"""

from tradejournal.stats.engine import (
    DAYS_OF_WEEK,
    EPOCH_DATE,
    NO_TAGS,
    compute_statistics,
    equity_curve,
    expectancy,
    parse_order_hour,
    parse_trade_date,
    performance_by_symbol,
    performance_by_tag,
    pnl_by_day_of_week,
    pnl_by_hour,
    profit_factor,
    streaks,
    win_rate,
)
from tradejournal.stats.summary import calendar_days, dashboard_summary, strategy_summary

__all__ = [
    "DAYS_OF_WEEK",
    "EPOCH_DATE",
    "NO_TAGS",
    "compute_statistics",
    "equity_curve",
    "expectancy",
    "parse_order_hour",
    "parse_trade_date",
    "performance_by_symbol",
    "performance_by_tag",
    "pnl_by_day_of_week",
    "pnl_by_hour",
    "profit_factor",
    "streaks",
    "win_rate",
    "calendar_days",
    "dashboard_summary",
    "strategy_summary",
]
