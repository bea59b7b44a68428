"""Statistics commands for TradeJournal CLI.

Renders the statistics dashboard and the monthly P&L calendar.
"""

import calendar as calendar_lib
from datetime import date
from decimal import Decimal
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, fail, format_money, open_journal
from tradejournal.errors import TradeJournalError
from tradejournal.models import GroupPerformance


def _performance_table(
    title: str, key_label: str, groups: dict[str, GroupPerformance], currency: str
) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(key_label, style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Weighted", justify="right")
    for key, group in sorted(groups.items(), key=lambda item: item[1].pnl, reverse=True):
        table.add_row(
            key,
            str(group.trades),
            format_money(group.pnl, currency, signed=True),
            format_money(group.weighted_pnl, currency, signed=True),
        )
    return table


@click.command()
@click.option("--strategy", "strategy_id", default=None, help="Only trades linked to this strategy.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON.")
@click.option("--points", type=click.IntRange(min=1), default=10, help="Equity curve points to show.")
def stats(strategy_id: Optional[str], as_json: bool, points: int) -> None:
    """Display performance statistics.

    Shows win rate, expectancy, profit factor, streaks, the equity
    curve and P&L broken down by weekday, hour, tag and symbol.

    \b
    Examples:
      tradejournal stats
      tradejournal stats --strategy 3f2a... --json
    """
    from tradejournal.stats import compute_statistics, dashboard_summary

    config, store = open_journal()
    trades = store.list_trades(config.user_id)

    if strategy_id is not None:
        try:
            store.get_strategy(config.user_id, strategy_id)
        except TradeJournalError as e:
            fail(str(e))
        trades = [t for t in trades if t.strategy_id == strategy_id]

    result = compute_statistics(trades)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    currency = config.currency
    summary = dashboard_summary(trades)

    profit_factor = (
        "∞" if result.profit_factor.is_infinite() else f"{result.profit_factor:.2f}"
    )
    overview = (
        f"Trades: {result.total_trades} "
        f"[dim](open {summary.open_trades}, closed {summary.closed_trades})[/dim]\n"
        f"Closed P&L:     {format_money(summary.closed_pnl, currency, signed=True)}\n"
        f"{'─' * 30}\n"
        f"Win Rate:       {result.win_rate:.2f}% "
        f"[dim]({result.winning_trades}W / {result.losing_trades}L)[/dim]\n"
        f"Expectancy:     {format_money(result.expectancy, currency, signed=True)}\n"
        f"Profit Factor:  {profit_factor}\n"
        f"Avg Win:        {format_money(result.avg_win, currency, signed=True)}\n"
        f"Avg Loss:       {format_money(result.avg_loss, currency, signed=True)}\n"
        f"Top Win:        {format_money(result.top_win, currency, signed=True)}\n"
        f"Top Loss:       {format_money(result.top_loss, currency, signed=True)}\n"
        f"Win Streak:     [green]{result.max_win_streak}[/green]\n"
        f"Loss Streak:    [red]{result.max_loss_streak}[/red]"
    )
    console.print(Panel(
        overview,
        title="[bold cyan]Trade Statistics[/bold cyan]",
        border_style="cyan",
    ))

    if not trades:
        return

    equity = Table(title="Equity Curve", show_header=True, header_style="bold cyan")
    equity.add_column("Date", style="dim")
    equity.add_column("Cumulative P&L", justify="right")
    for point in result.equity_curve[-points:]:
        equity.add_row(point.date, format_money(point.cumulative_pnl, currency, signed=True))
    console.print(equity)

    weekday = Table(title="P&L by Day of Week", show_header=True, header_style="bold cyan")
    weekday.add_column("Day")
    weekday.add_column("P&L", justify="right")
    for bucket in result.pnl_by_day_of_week:
        weekday.add_row(bucket.name, format_money(bucket.pnl, currency, signed=True))
    console.print(weekday)

    hourly = Table(title="P&L by Hour", show_header=True, header_style="bold cyan")
    hourly.add_column("Hour")
    hourly.add_column("P&L", justify="right")
    for bucket in result.pnl_by_hour:
        if bucket.pnl != 0:
            hourly.add_row(bucket.name, format_money(bucket.pnl, currency, signed=True))
    console.print(hourly)

    console.print(_performance_table("Performance by Tag", "Tag", result.performance_by_tag, currency))
    console.print(
        _performance_table("Performance by Symbol", "Symbol", result.performance_by_symbol, currency)
    )


@click.command()
@click.option(
    "--month",
    type=str,
    default=None,
    help="Month to show (YYYY-MM). Defaults to the current month.",
)
def calendar(month: Optional[str]) -> None:
    """Display a monthly P&L calendar.

    Each day shows the number of trades and their combined P&L.

    \b
    Examples:
      tradejournal calendar
      tradejournal calendar --month 2025-07
    """
    from tradejournal.stats import calendar_days

    if month:
        try:
            year, month_number = (int(part) for part in month.split("-"))
            date(year, month_number, 1)
        except ValueError:
            fail(f"Invalid month: {month}. Use YYYY-MM")
    else:
        today = date.today()
        year, month_number = today.year, today.month

    config, store = open_journal()
    days = {day.date: day for day in calendar_days(store.list_trades(config.user_id))}

    title = f"{calendar_lib.month_name[month_number]} {year}"
    table = Table(title=title, show_header=True, header_style="bold cyan", show_lines=True)
    for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
        table.add_column(name, justify="center", min_width=10)

    month_pnl = Decimal("0")
    month_trades = 0
    weeks = calendar_lib.Calendar(firstweekday=6).monthdayscalendar(year, month_number)
    for week in weeks:
        cells = []
        for day_number in week:
            if day_number == 0:
                cells.append("")
                continue
            key = date(year, month_number, day_number).isoformat()
            day = days.get(key)
            if day is None:
                cells.append(f"[dim]{day_number}[/dim]")
                continue
            month_pnl += day.pnl
            month_trades += day.count
            plural = "s" if day.count > 1 else ""
            cells.append(
                f"[bold]{day_number}[/bold]\n{day.count} trade{plural}\n"
                f"{format_money(day.pnl, config.currency, signed=True)}"
            )
        table.add_row(*cells)

    console.print(table)
    console.print(
        f"\n[bold]Month:[/bold] {month_trades} trades, "
        f"{format_money(month_pnl, config.currency, signed=True)}"
    )
