"""Trade commands for TradeJournal CLI.

Handles adding, closing, deleting, listing and importing trades.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, fail, format_money, open_journal
from tradejournal.errors import TradeJournalError
from tradejournal.models import TradeOrder, build_trade, close_trade


def parse_order_spec(spec: str) -> TradeOrder:
    """Parse an order given as ``ACTION,DATE,TIME,QTY,PRICE[,FEE]``.

    Args:
        spec: Order text, e.g. ``Buy,2025-07-01,09:30,50,22000``.

    Returns:
        The parsed order.

    Raises:
        click.BadParameter: If the text is not a valid order.
    """
    parts = [part.strip() for part in spec.split(",")]
    if len(parts) not in (5, 6):
        raise click.BadParameter(
            f"'{spec}' should be ACTION,DATE,TIME,QTY,PRICE[,FEE]", param_hint="--order"
        )
    action, order_date, order_time, quantity, price = parts[:5]
    fee = parts[5] if len(parts) == 6 else "0"
    try:
        return TradeOrder(
            action=action.capitalize(),
            date=order_date,
            time=order_time,
            quantity=int(quantity),
            price=Decimal(price),
            fee=Decimal(fee),
        )
    except (ValueError, InvalidOperation, ValidationError) as e:
        raise click.BadParameter(f"Invalid order '{spec}': {e}", param_hint="--order")


@click.command()
@click.argument("symbol")
@click.option(
    "--order", "orders",
    multiple=True,
    required=True,
    help="Order as ACTION,DATE,TIME,QTY,PRICE[,FEE]. Repeat for scale-ins.",
)
@click.option("--tag", "tags", multiple=True, help="Tag to attach. Repeatable.")
@click.option("--notes", default="", help="Journal notes.")
@click.option("--confidence", type=click.IntRange(0, 10), default=5, help="Confidence 0-10.")
@click.option("--strategy", "strategy_id", default=None, help="Strategy ID to link.")
@click.option("--market", default="FUTURES", help="Market segment.")
def add(
    symbol: str,
    orders: tuple[str, ...],
    tags: tuple[str, ...],
    notes: str,
    confidence: int,
    strategy_id: Optional[str],
    market: str,
) -> None:
    """Log a new open trade.

    SYMBOL is the instrument traded. The first --order is the entry.

    \b
    Examples:
      tradejournal add NIFTY --order "Buy,2025-07-01,09:30,50,22000"
      tradejournal add AAPL --order "Sell,2025-07-02,15:45,10,190.5,1.2" --tag gap
    """
    parsed = [parse_order_spec(spec) for spec in orders]
    config, store = open_journal()

    if strategy_id is not None:
        try:
            store.get_strategy(config.user_id, strategy_id)
        except TradeJournalError as e:
            fail(str(e))

    try:
        trade = build_trade(
            symbol.upper(),
            parsed,
            market=market,
            tags=list(tags),
            notes=notes,
            confidence=confidence,
            strategy_id=strategy_id,
        )
    except ValidationError as e:
        fail(f"Invalid trade: {e}")

    trade = store.create_trade(config.user_id, trade)
    console.print(Panel(
        f"[bold]{trade.symbol}[/bold] {trade.type} {trade.quantity} @ "
        f"{format_money(trade.entry_price, config.currency)}\n\n"
        f"[dim]Trade ID: {trade.id}[/dim]",
        title="[bold green]Trade Logged[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("trade_id")
@click.option("--exit-price", type=str, required=True, help="Exit price.")
@click.option("--pnl", type=str, default=None, help="Realized P&L. Computed if omitted.")
def close(trade_id: str, exit_price: str, pnl: Optional[str]) -> None:
    """Close an open trade.

    \b
    Examples:
      tradejournal close 3f2a... --exit-price 22100
      tradejournal close 3f2a... --exit-price 22100 --pnl 4850
    """
    try:
        exit_value = Decimal(exit_price)
        pnl_value = Decimal(pnl) if pnl is not None else None
    except InvalidOperation:
        fail("Exit price and P&L must be numbers")

    config, store = open_journal()
    try:
        trade = store.get_trade(config.user_id, trade_id)
        trade = store.update_trade(
            config.user_id, close_trade(trade, exit_value, pnl_value)
        )
    except (TradeJournalError, ValidationError) as e:
        fail(str(e))

    console.print(Panel(
        f"[bold]{trade.symbol}[/bold] closed at "
        f"{format_money(trade.exit_price, config.currency)}\n"
        f"P&L: {format_money(trade.pnl, config.currency, signed=True)}",
        title="[bold cyan]Trade Closed[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("trade_id")
def delete(trade_id: str) -> None:
    """Delete a trade."""
    config, store = open_journal()
    try:
        store.delete_trade(config.user_id, trade_id)
    except TradeJournalError as e:
        fail(str(e))
    console.print(f"[green]Deleted trade {trade_id}[/green]")


@click.command()
@click.option("--symbol", default=None, help="Only show this symbol.")
@click.option("--tag", default=None, help="Only show trades with this tag.")
@click.option(
    "--status",
    type=click.Choice(["Open", "Closed"], case_sensitive=False),
    default=None,
    help="Only show open or closed trades.",
)
def journal(symbol: Optional[str], tag: Optional[str], status: Optional[str]) -> None:
    """Display logged trades.

    \b
    Examples:
      tradejournal journal
      tradejournal journal --status open --tag breakout
    """
    config, store = open_journal()
    trades = store.list_trades(config.user_id)

    if symbol:
        trades = [t for t in trades if t.symbol == symbol.upper()]
    if tag:
        trades = [t for t in trades if tag in t.tags]
    if status:
        trades = [t for t in trades if t.status == status.capitalize()]

    if not trades:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trade Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Trade Journal",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", style="dim", max_width=10)
    table.add_column("Date", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Type", justify="center")
    table.add_column("Qty", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("P&L", justify="right")
    table.add_column("Tags", max_width=20)

    for trade in trades:
        type_color = "green" if trade.type == "Buy" else "red"
        table.add_row(
            (trade.id or "")[:8],
            trade.date,
            trade.symbol,
            f"[{type_color}]{trade.type}[/{type_color}]",
            str(trade.quantity),
            format_money(trade.entry_price, config.currency),
            format_money(trade.exit_price, config.currency) if trade.exit_price is not None else "-",
            trade.status,
            format_money(trade.pnl, config.currency, signed=True) if trade.is_closed else "-",
            ", ".join(trade.tags) or "-",
        )

    console.print(table)
    console.print(f"\n[bold]Total Trades:[/bold] {len(trades)}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_trades(csv_file: Path) -> None:
    """Import trades from a CSV file.

    The header must name the columns Symbol, EntryPrice, ExitPrice,
    Quantity, Type, Date, Market, Target and StopLoss (any subset).
    Imported trades start out open.

    \b
    Examples:
      tradejournal import trades.csv
    """
    from tradejournal.importer import import_csv

    config, store = open_journal()
    try:
        text = csv_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        fail(f"Failed to read {csv_file}: {e}")

    imported = import_csv(store, config.user_id, text)
    console.print(Panel(
        f"Imported [bold]{len(imported)}[/bold] trades from {csv_file.name}",
        title="[bold cyan]Import Complete[/bold cyan]",
        border_style="cyan",
    ))
