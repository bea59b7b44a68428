"""Dashboard, calendar and strategy summaries."""

from decimal import Decimal
from functools import reduce
from typing import Iterable

from tradejournal.models.stats import (
    CalendarDay,
    DashboardSummary,
    StrategySummary,
)
from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import Trade
from tradejournal.stats.engine import (
    ZERO,
    closed_trades,
    losing_trades,
    parse_trade_date,
    winning_trades,
)


def calendar_days(trades: Iterable[Trade]) -> list[CalendarDay]:
    """Trade count and P&L per trade date, for the calendar heat-map.

    All trades are counted, open ones included. Days are ordered by date.
    """

    def step(days: dict[str, CalendarDay], trade: Trade) -> dict[str, CalendarDay]:
        day = days.get(trade.date, CalendarDay(date=trade.date))
        days[trade.date] = day.add(trade)
        return days

    days = reduce(step, trades, {})
    return sorted(days.values(), key=lambda day: parse_trade_date(day.date))


def dashboard_summary(trades: Iterable[Trade]) -> DashboardSummary:
    """Headline counters for the journal dashboard.

    Gross loss and average loss are reported as absolute values here,
    unlike ``avg_loss`` in the statistics result.
    """
    snapshot = list(trades)
    wins = winning_trades(snapshot)
    losses = losing_trades(snapshot)
    closed = closed_trades(snapshot)

    gross_profit = sum((trade.pnl for trade in wins), ZERO)
    gross_loss = sum((abs(trade.pnl) for trade in losses), ZERO)

    return DashboardSummary(
        wins=len(wins),
        losses=len(losses),
        open_trades=sum(1 for trade in snapshot if trade.status == "Open"),
        closed_trades=len(closed),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        avg_profit=gross_profit / len(wins) if wins else ZERO,
        avg_loss=gross_loss / len(losses) if losses else ZERO,
        closed_pnl=sum((trade.pnl for trade in closed), ZERO),
    )


def strategy_summary(strategy: Strategy, trades: Iterable[Trade]) -> StrategySummary:
    """Performance of the trades linked to a strategy.

    The win rate here is taken over every linked trade, open or closed.
    """
    linked = [trade for trade in trades if trade.strategy_id == strategy.id]
    winners = sum(1 for trade in linked if trade.pnl > 0)
    return StrategySummary(
        strategy=strategy,
        trades=linked,
        total_trades=len(linked),
        total_pnl=sum((trade.pnl for trade in linked), ZERO),
        win_rate=Decimal(winners) / len(linked) * 100 if linked else ZERO,
    )
