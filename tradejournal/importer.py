"""CSV import for TradeJournal.

Expects a header row followed by one trade per line, for example::

    Symbol,EntryPrice,ExitPrice,Quantity,Type,Date,Market,Target,StopLoss
    NIFTY,22000,22100,50,Buy,2025-07-01,FUTURES,22200,21900

Every imported trade starts out open with zero P&L.
"""

import csv
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from pydantic import ValidationError

from tradejournal.models import Trade

logger = logging.getLogger(__name__)

Cell = Union[int, float, str]


def _coerce(value: str) -> Cell:
    """Convert numeric-looking text to a number, leave other text alone."""
    value = value.strip()
    if not value:
        return value
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _split_line(line: str) -> list[str]:
    # One physical line per record; an open quote never spills into the next row.
    return next(csv.reader([line], strict=False))


def parse_csv(text: str) -> list[dict[str, Cell]]:
    """Parse CSV text into one dict per data row.

    Blank lines are ignored. Rows whose column count does not match the
    header are skipped with a warning.

    Args:
        text: CSV content.

    Returns:
        Rows keyed by header name.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    headers = [header.strip() for header in _split_line(lines[0])]
    rows = []
    for line in lines[1:]:
        values = _split_line(line)
        if len(values) != len(headers):
            logger.warning("Skipping malformed row: %s", line)
            continue
        rows.append({header: _coerce(value) for header, value in zip(headers, values)})
    return rows


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _to_int(value: Any) -> int:
    number = _to_decimal(value)
    return int(number) if number is not None and number.is_finite() else 0


def row_to_trade(row: dict[str, Cell], today: Optional[date] = None) -> Trade:
    """Map one CSV row to a new open trade.

    Raises:
        ValidationError: If the mapped values are not a valid trade.
    """
    today = today or date.today()
    return Trade(
        symbol=str(row.get("Symbol") or "UNKNOWN"),
        entry_price=_to_decimal(row.get("EntryPrice")) or Decimal("0"),
        exit_price=_to_decimal(row.get("ExitPrice")),
        quantity=_to_int(row.get("Quantity")),
        type="Buy" if row.get("Type") == "Buy" else "Sell",
        status="Open",
        pnl=Decimal("0"),
        date=str(row.get("Date") or today.isoformat()),
        market=str(row.get("Market") or "FUTURES"),
        target=_to_decimal(row.get("Target")),
        stop_loss=_to_decimal(row.get("StopLoss")),
    )


def rows_to_trades(
    rows: list[dict[str, Cell]], today: Optional[date] = None
) -> list[Trade]:
    """Map parsed rows to trades, skipping rows that fail validation."""
    trades = []
    for row in rows:
        try:
            trades.append(row_to_trade(row, today=today))
        except ValidationError as e:
            logger.warning("Skipping invalid row %s: %s", row, e)
    return trades


def import_csv(store, user_id: str, text: str) -> list[Trade]:
    """Parse CSV text and create a trade in the store for each valid row.

    Args:
        store: TradeStore to write to.
        user_id: Owner of the imported trades.
        text: CSV content.

    Returns:
        The stored trades.
    """
    trades = rows_to_trades(parse_csv(text))
    logger.info("Importing %d trades for user %s", len(trades), user_id)
    return [store.create_trade(user_id, trade) for trade in trades]
