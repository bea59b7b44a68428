"""Statistics engine.

Turns a snapshot of trades into the summary figures and chart series of
the stats dashboard. Sums are accumulated as ``Decimal`` at full
precision; rounding is left to the presentation layer.

Degenerate input never raises. Ratios with an empty divisor fall back to
zero (profit factor goes to infinity when there are wins but no losses),
an unparseable trade date is read as the epoch date and an unparseable
order time as hour 0.
"""

import re
from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Iterable, Optional, Sequence

from tradejournal.models.stats import (
    EquityPoint,
    GroupPerformance,
    PnlBucket,
    TradeStatistics,
)
from tradejournal.models.trade import Trade

ZERO = Decimal("0")
HUNDRED = Decimal("100")
INFINITY = Decimal("Infinity")

EPOCH_DATE = date(1970, 1, 1)
NO_TAGS = "NO TAGS"
DAYS_OF_WEEK = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
HOURS = list(range(24))
ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


# ==================== Parsing ====================


def parse_trade_date(value: Optional[str]) -> date:
    """Parse an ISO trade date, returning the epoch date if it is malformed."""
    try:
        value = value.strip()
    except AttributeError:
        return EPOCH_DATE
    if not ISO_DATE.fullmatch(value):
        return EPOCH_DATE
    try:
        return date.fromisoformat(value)
    except ValueError:
        return EPOCH_DATE


def parse_order_hour(value: Optional[str]) -> int:
    """Hour of an ``HH:MM`` order time, or 0 if it cannot be read."""
    try:
        hour = int(value.split(":", 1)[0])
    except (AttributeError, TypeError, ValueError):
        return 0
    return hour if 0 <= hour < 24 else 0


def day_of_week(trade: Trade) -> int:
    """Weekday index of the trade date, Sunday=0 through Saturday=6."""
    return (parse_trade_date(trade.date).weekday() + 1) % 7


def trade_hour(trade: Trade) -> int:
    """Hour bucket of a trade, taken from its first order."""
    if not trade.orders:
        return 0
    return parse_order_hour(trade.orders[0].time)


def sort_by_date(trades: Iterable[Trade]) -> list[Trade]:
    """Sort trades by date, keeping input order for equal dates."""
    return sorted(trades, key=lambda trade: parse_trade_date(trade.date))


# ==================== Filters ====================


def closed_trades(trades: Iterable[Trade]) -> list[Trade]:
    return [trade for trade in trades if trade.status == "Closed"]


def winning_trades(trades: Iterable[Trade]) -> list[Trade]:
    return [trade for trade in closed_trades(trades) if trade.pnl > 0]


def losing_trades(trades: Iterable[Trade]) -> list[Trade]:
    return [trade for trade in closed_trades(trades) if trade.pnl < 0]


def _total_pnl(trades: Iterable[Trade]) -> Decimal:
    return sum((trade.pnl for trade in trades), ZERO)


def _average_pnl(trades: Sequence[Trade]) -> Decimal:
    return _total_pnl(trades) / len(trades) if trades else ZERO


# ==================== Summary figures ====================


def win_rate(trades: Sequence[Trade]) -> Decimal:
    """Winning closed trades as a percentage of closed trades."""
    closed = closed_trades(trades)
    if not closed:
        return ZERO
    return Decimal(len(winning_trades(closed))) / len(closed) * HUNDRED


def loss_rate(trades: Sequence[Trade]) -> Decimal:
    """Losing closed trades as a fraction (not a percentage) of closed trades."""
    closed = closed_trades(trades)
    if not closed:
        return ZERO
    return Decimal(len(losing_trades(closed))) / len(closed)


def avg_win(trades: Sequence[Trade]) -> Decimal:
    return _average_pnl(winning_trades(trades))


def avg_loss(trades: Sequence[Trade]) -> Decimal:
    """Average losing P&L. Negative, or zero when there are no losses."""
    return _average_pnl(losing_trades(trades))


def expectancy(trades: Sequence[Trade]) -> Decimal:
    """Expected P&L per closed trade.

    ``avg_loss`` already carries its negative sign, so the loss term is
    added rather than subtracted.
    """
    return win_rate(trades) / HUNDRED * avg_win(trades) + loss_rate(trades) * avg_loss(
        trades
    )


def profit_factor(trades: Sequence[Trade]) -> Decimal:
    """Gross profit divided by gross loss.

    Returns infinity when there is profit but no loss, and zero when
    there is neither.
    """
    gross_profit = _total_pnl(winning_trades(trades))
    gross_loss = _total_pnl(losing_trades(trades))
    if gross_loss == 0:
        return INFINITY if gross_profit > 0 else ZERO
    return abs(gross_profit / gross_loss)


def streaks(trades: Iterable[Trade]) -> tuple[int, int]:
    """Longest consecutive win and loss runs, in date order.

    Open trades and break-even closed trades leave both running streaks
    untouched.

    Returns:
        Tuple of (max_win_streak, max_loss_streak).
    """
    current_win = current_loss = 0
    max_win = max_loss = 0
    for trade in sort_by_date(trades):
        if trade.status != "Closed":
            continue
        if trade.pnl > 0:
            current_win += 1
            current_loss = 0
        elif trade.pnl < 0:
            current_loss += 1
            current_win = 0
        max_win = max(max_win, current_win)
        max_loss = max(max_loss, current_loss)
    return max_win, max_loss


def top_win(trades: Sequence[Trade]) -> Decimal:
    return max((trade.pnl for trade in winning_trades(trades)), default=ZERO)


def top_loss(trades: Sequence[Trade]) -> Decimal:
    return min((trade.pnl for trade in losing_trades(trades)), default=ZERO)


# ==================== Chart series ====================


def equity_curve(trades: Iterable[Trade]) -> list[EquityPoint]:
    """Running P&L total with one point per trade, open trades included."""
    points: list[EquityPoint] = []
    running = ZERO
    for trade in sort_by_date(trades):
        running += trade.pnl
        points.append(EquityPoint(date=trade.date, cumulative_pnl=running))
    return points


def _fold_buckets(
    names: list[str], keyed_pnl: Iterable[tuple[int, Decimal]]
) -> list[PnlBucket]:
    def step(buckets: list[PnlBucket], item: tuple[int, Decimal]) -> list[PnlBucket]:
        index, pnl = item
        buckets[index] = buckets[index].add(pnl)
        return buckets

    return reduce(step, keyed_pnl, [PnlBucket(name=name) for name in names])


def pnl_by_day_of_week(trades: Iterable[Trade]) -> list[PnlBucket]:
    """Closed-trade P&L per weekday, always seven buckets Sunday to Saturday."""
    return _fold_buckets(
        DAYS_OF_WEEK,
        ((day_of_week(trade), trade.pnl) for trade in closed_trades(trades)),
    )


def pnl_by_hour(trades: Iterable[Trade]) -> list[PnlBucket]:
    """Closed-trade P&L per hour of the first order, always 24 buckets."""
    return _fold_buckets(
        [f"{hour}:00" for hour in HOURS],
        ((trade_hour(trade), trade.pnl) for trade in closed_trades(trades)),
    )


# ==================== Grouped tables ====================


def _fold_groups(keyed: Iterable[tuple[str, Trade]]) -> dict[str, GroupPerformance]:
    def step(
        groups: dict[str, GroupPerformance], item: tuple[str, Trade]
    ) -> dict[str, GroupPerformance]:
        key, trade = item
        groups[key] = groups.get(key, GroupPerformance()).add(trade)
        return groups

    return reduce(step, keyed, {})


def performance_by_tag(trades: Iterable[Trade]) -> dict[str, GroupPerformance]:
    """Performance per tag across all trades.

    A trade counts in full towards every tag it carries, so the tag
    totals can exceed the overall P&L. Untagged trades go to ``NO TAGS``.
    """
    return _fold_groups(
        (tag, trade) for trade in trades for tag in (trade.tags or [NO_TAGS])
    )


def performance_by_symbol(trades: Iterable[Trade]) -> dict[str, GroupPerformance]:
    """Performance per symbol across all trades."""
    return _fold_groups((trade.symbol, trade) for trade in trades)


# ==================== Full pass ====================


def compute_statistics(trades: Iterable[Trade]) -> TradeStatistics:
    """Compute every dashboard statistic for one snapshot of trades.

    Args:
        trades: Trades in any order. The snapshot is copied, not modified.

    Returns:
        The complete statistics result.
    """
    snapshot = list(trades)
    max_win_streak, max_loss_streak = streaks(snapshot)
    return TradeStatistics(
        total_trades=len(snapshot),
        closed_trades=len(closed_trades(snapshot)),
        winning_trades=len(winning_trades(snapshot)),
        losing_trades=len(losing_trades(snapshot)),
        win_rate=win_rate(snapshot),
        expectancy=expectancy(snapshot),
        profit_factor=profit_factor(snapshot),
        avg_win=avg_win(snapshot),
        avg_loss=avg_loss(snapshot),
        max_win_streak=max_win_streak,
        max_loss_streak=max_loss_streak,
        top_win=top_win(snapshot),
        top_loss=top_loss(snapshot),
        equity_curve=equity_curve(snapshot),
        pnl_by_day_of_week=pnl_by_day_of_week(snapshot),
        pnl_by_hour=pnl_by_hour(snapshot),
        performance_by_tag=performance_by_tag(snapshot),
        performance_by_symbol=performance_by_symbol(snapshot),
    )
