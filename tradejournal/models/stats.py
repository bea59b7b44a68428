"""Statistics result models.

Grouped aggregates are built by folding trades into explicit accumulator
records. Each accumulator has a zero value and an ``add`` step that
returns a new record, so none of them is mutated in place.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import Trade

ZERO = Decimal("0")


class EquityPoint(BaseModel):
    """One point on the equity curve."""

    date: str = Field(..., description="Trade date")
    cumulative_pnl: Decimal = Field(..., description="Running P&L total")

    model_config = {"frozen": True}


class PnlBucket(BaseModel):
    """P&L summed over a fixed chart bucket (weekday or hour)."""

    name: str = Field(..., description="Bucket label")
    pnl: Decimal = Field(default=ZERO, description="Summed P&L")

    model_config = {"frozen": True}

    def add(self, pnl: Decimal) -> "PnlBucket":
        return self.model_copy(update={"pnl": self.pnl + pnl})


class GroupPerformance(BaseModel):
    """Per-tag or per-symbol performance accumulator."""

    trades: int = Field(default=0, ge=0, description="Number of trades")
    pnl: Decimal = Field(default=ZERO, description="Summed P&L")
    weighted_pnl: Decimal = Field(
        default=ZERO, description="Sum of P&L per unit of quantity"
    )

    model_config = {"frozen": True}

    def add(self, trade: Trade) -> "GroupPerformance":
        """Fold one trade into the group.

        A zero quantity is treated as one so the per-unit term stays defined.
        """
        quantity = trade.quantity or 1
        return GroupPerformance(
            trades=self.trades + 1,
            pnl=self.pnl + trade.pnl,
            weighted_pnl=self.weighted_pnl + trade.pnl / quantity,
        )


class CalendarDay(BaseModel):
    """Trades and P&L for one calendar date."""

    date: str = Field(..., description="Trade date (YYYY-MM-DD)")
    count: int = Field(default=0, ge=0, description="Number of trades")
    pnl: Decimal = Field(default=ZERO, description="Summed P&L")

    model_config = {"frozen": True}

    def add(self, trade: Trade) -> "CalendarDay":
        return self.model_copy(
            update={"count": self.count + 1, "pnl": self.pnl + trade.pnl}
        )


class DashboardSummary(BaseModel):
    """Headline counters shown on the journal dashboard."""

    wins: int = 0
    losses: int = 0
    open_trades: int = 0
    closed_trades: int = 0
    gross_profit: Decimal = ZERO
    gross_loss: Decimal = Field(default=ZERO, description="Absolute value of losses")
    avg_profit: Decimal = ZERO
    avg_loss: Decimal = Field(default=ZERO, description="Absolute value")
    closed_pnl: Decimal = ZERO

    model_config = {"frozen": True}


class StrategySummary(BaseModel):
    """Performance of the trades linked to one strategy."""

    strategy: Strategy
    trades: list[Trade] = Field(default_factory=list)
    total_trades: int = 0
    total_pnl: Decimal = ZERO
    win_rate: Decimal = ZERO

    model_config = {"frozen": True}


class TradeStatistics(BaseModel):
    """Everything the statistics dashboard displays."""

    total_trades: int = 0
    closed_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: Decimal = ZERO
    expectancy: Decimal = ZERO
    profit_factor: Decimal = Field(
        default=ZERO,
        allow_inf_nan=True,
        description="Gross profit / gross loss; infinite when there are no losses",
    )
    avg_win: Decimal = ZERO
    avg_loss: Decimal = ZERO
    max_win_streak: int = 0
    max_loss_streak: int = 0
    top_win: Decimal = ZERO
    top_loss: Decimal = ZERO
    equity_curve: list[EquityPoint] = Field(default_factory=list)
    pnl_by_day_of_week: list[PnlBucket] = Field(default_factory=list)
    pnl_by_hour: list[PnlBucket] = Field(default_factory=list)
    performance_by_tag: dict[str, GroupPerformance] = Field(default_factory=dict)
    performance_by_symbol: dict[str, GroupPerformance] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def final_equity(self) -> Optional[Decimal]:
        return self.equity_curve[-1].cumulative_pnl if self.equity_curve else None
