"""Strategy management commands for TradeJournal CLI.

Handles strategy add, list, show and delete operations.
"""

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, fail, format_money, open_journal
from tradejournal.errors import TradeJournalError
from tradejournal.models import Strategy


@click.group()
def strategy() -> None:
    """Manage trading strategies.

    Trades can be linked to a strategy with ``tradejournal add --strategy``.

    \b
    Examples:
      tradejournal strategy add "ORB 15" --description "Opening range breakout"
      tradejournal strategy list
      tradejournal strategy show <strategy-id>
    """
    pass


@strategy.command("add")
@click.argument("name")
@click.option("--description", default="", help="Brief overview of the strategy.")
@click.option("--rules", default="", help="Entry and exit rules.")
@click.option("--risk", "risk_management", default="", help="Risk management notes.")
def add_strategy(name: str, description: str, rules: str, risk_management: str) -> None:
    """Create a strategy named NAME."""
    try:
        new_strategy = Strategy(
            name=name,
            description=description,
            rules=rules,
            risk_management=risk_management,
        )
    except ValidationError:
        fail("Strategy name cannot be empty.")

    config, store = open_journal()
    saved = store.create_strategy(config.user_id, new_strategy)
    console.print(f"[green]Created strategy '{saved.name}'[/green] [dim]({saved.id})[/dim]")


@strategy.command("list")
def list_strategies() -> None:
    """List strategies with their linked trade count and P&L."""
    from tradejournal.stats import strategy_summary

    config, store = open_journal()
    strategies = store.list_strategies(config.user_id)

    if not strategies:
        console.print(Panel(
            "[dim]No strategies yet[/dim]\n\n"
            "Create one with [cyan]tradejournal strategy add NAME[/cyan]",
            title="[bold]Strategies[/bold]",
            border_style="dim",
        ))
        return

    trades = store.list_trades(config.user_id)

    table = Table(title="Strategies", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", max_width=10)
    table.add_column("Name", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Win Rate", justify="right")

    for item in strategies:
        summary = strategy_summary(item, trades)
        table.add_row(
            (item.id or "")[:8],
            item.name,
            str(summary.total_trades),
            format_money(summary.total_pnl, config.currency, signed=True),
            f"{summary.win_rate:.2f}%",
        )

    console.print(table)


@strategy.command("show")
@click.argument("strategy_id")
def show_strategy(strategy_id: str) -> None:
    """Show a strategy's details and performance summary."""
    from tradejournal.stats import strategy_summary

    config, store = open_journal()
    try:
        item = store.get_strategy(config.user_id, strategy_id)
    except TradeJournalError as e:
        fail(str(e))

    summary = strategy_summary(item, store.list_trades(config.user_id))

    details = (
        f"[bold]Description:[/bold] {item.description or 'N/A'}\n"
        f"[bold]Rules:[/bold] {item.rules or 'N/A'}\n"
        f"[bold]Risk Management:[/bold] {item.risk_management or 'N/A'}\n\n"
        f"[bold]Performance Summary[/bold]\n"
        f"  Total Trades: {summary.total_trades}\n"
        f"  Total P&L:    {format_money(summary.total_pnl, config.currency, signed=True)}\n"
        f"  Win Rate:     {summary.win_rate:.2f}%"
    )
    console.print(Panel(
        details,
        title=f"[bold cyan]{item.name}[/bold cyan]",
        border_style="cyan",
    ))

    if summary.trades:
        table = Table(title="Linked Trades", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="dim")
        table.add_column("Symbol", style="bold")
        table.add_column("Status", justify="center")
        table.add_column("P&L", justify="right")
        for trade in summary.trades:
            table.add_row(
                trade.date,
                trade.symbol,
                trade.status,
                format_money(trade.pnl, config.currency, signed=True),
            )
        console.print(table)


@strategy.command("delete")
@click.argument("strategy_id")
def delete_strategy(strategy_id: str) -> None:
    """Delete a strategy. Linked trades are kept but unlinked."""
    config, store = open_journal()
    try:
        unlinked = store.delete_strategy(config.user_id, strategy_id)
    except TradeJournalError as e:
        fail(str(e))
    console.print(
        f"[green]Deleted strategy {strategy_id}[/green] "
        f"[dim]({unlinked} trades unlinked)[/dim]"
    )
