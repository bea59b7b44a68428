"""Trade and TradeOrder data models."""

from datetime import date as date_type
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TradeOrder(BaseModel):
    """A single fill belonging to a trade, in entry order."""

    action: Literal["Buy", "Sell"] = Field(..., description="Order side")
    date: str = Field(..., description="Order date (YYYY-MM-DD)")
    time: str = Field(default="00:00", description="Order time (HH:MM)")
    quantity: int = Field(..., ge=0, description="Filled quantity")
    price: Decimal = Field(..., ge=0, description="Fill price")
    fee: Decimal = Field(default=Decimal("0"), ge=0, description="Fees paid")

    model_config = {"frozen": True}


class Trade(BaseModel):
    """Represents a journaled trade.

    ``date`` is kept as the raw ISO string supplied by the store. The
    statistics engine parses it and falls back to the epoch date when it
    is malformed, so a bad date never fails validation here.
    """

    id: Optional[str] = Field(default=None, description="Document ID")
    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    entry_price: Decimal = Field(default=Decimal("0"), ge=0, description="Entry price")
    exit_price: Optional[Decimal] = Field(
        default=None, ge=0, description="Exit price (set when closed)"
    )
    quantity: int = Field(..., ge=0, description="Total quantity")
    type: Literal["Buy", "Sell"] = Field(..., description="Trade direction")
    status: Literal["Open", "Closed"] = Field(default="Open", description="Trade status")
    pnl: Decimal = Field(default=Decimal("0"), description="Realized P&L")
    date: str = Field(..., description="Trade date (YYYY-MM-DD)")
    orders: list[TradeOrder] = Field(default_factory=list, description="Fills in entry order")
    market: str = Field(default="FUTURES", description="Market segment")
    target: Optional[Decimal] = Field(default=None, description="Target price")
    stop_loss: Optional[Decimal] = Field(default=None, description="Stop-loss price")
    tags: list[str] = Field(default_factory=list, description="Free-text labels")
    strategy_id: Optional[str] = Field(default=None, description="Linked strategy ID")
    notes: str = Field(default="", description="Journal notes")
    confidence: int = Field(default=5, ge=0, le=10, description="Confidence (0-10)")
    image_urls: list[str] = Field(default_factory=list, description="Screenshot URLs")

    model_config = {"frozen": True}

    @property
    def is_closed(self) -> bool:
        return self.status == "Closed"


def build_trade(
    symbol: str,
    orders: list[TradeOrder],
    *,
    market: str = "FUTURES",
    target: Optional[Decimal] = None,
    stop_loss: Optional[Decimal] = None,
    tags: Optional[list[str]] = None,
    notes: str = "",
    confidence: int = 5,
    image_urls: Optional[list[str]] = None,
    strategy_id: Optional[str] = None,
) -> Trade:
    """Build a new open trade from its orders.

    The first order is taken as the entry: it supplies the entry price,
    direction and date. Quantity is the sum over all orders.

    Args:
        symbol: Instrument symbol.
        orders: Orders in entry order.

    Returns:
        An open trade with zero P&L.
    """
    first = orders[0] if orders else None
    return Trade(
        symbol=symbol,
        entry_price=first.price if first else Decimal("0"),
        exit_price=None,
        quantity=sum(order.quantity for order in orders),
        type=first.action if first else "Sell",
        status="Open",
        pnl=Decimal("0"),
        date=first.date if first else date_type.today().isoformat(),
        orders=list(orders),
        market=market,
        target=target,
        stop_loss=stop_loss,
        tags=list(tags or []),
        notes=notes,
        confidence=confidence,
        image_urls=list(image_urls or []),
        strategy_id=strategy_id,
    )


def close_trade(
    trade: Trade, exit_price: Decimal, pnl: Optional[Decimal] = None
) -> Trade:
    """Return a closed copy of a trade.

    Args:
        trade: Trade to close.
        exit_price: Exit price.
        pnl: Realized P&L. Computed from entry/exit and quantity when omitted.

    Returns:
        The closed trade.
    """
    exit_price = Decimal(exit_price)
    if pnl is None:
        move = exit_price - trade.entry_price
        if trade.type == "Sell":
            move = -move
        pnl = move * trade.quantity
    return Trade.model_validate(
        {
            **trade.model_dump(),
            "exit_price": exit_price,
            "status": "Closed",
            "pnl": Decimal(pnl),
        }
    )
