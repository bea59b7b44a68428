"""Helpers shared by the CLI command modules."""

from decimal import Decimal
from typing import NoReturn

from rich.console import Console
from rich.panel import Panel

console = Console()


def open_journal():
    """Load the configuration and open its store.

    Returns:
        Tuple of (config, store).
    """
    from tradejournal.config import load_config
    from tradejournal.db.store import TradeStore
    from tradejournal.errors import ConfigError

    try:
        config = load_config()
    except ConfigError as e:
        fail(str(e), title="Configuration Error")
    return config, TradeStore(config.db_path)


def fail(message: str, title: str = "Error") -> NoReturn:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def format_money(value: Decimal, currency: str = "₹", signed: bool = False) -> str:
    """Format an amount for display, rounded to two decimals.

    Positive amounts are green and negative ones red when ``signed``.
    """
    if not value.is_finite():
        return "∞" if value > 0 else "-∞"
    sign = "+" if signed and value > 0 else ""
    text = f"{sign}{currency}{value:,.2f}"
    if not signed:
        return text
    color = "green" if value >= 0 else "red"
    return f"[{color}]{text}[/{color}]"
