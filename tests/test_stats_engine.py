"""Property-based tests for the statistics engine.

**Feature: trade-journal**
"""

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

from tradejournal.models import Trade, TradeOrder
from tradejournal.stats import (
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
from tradejournal.stats.engine import sort_by_date


def make_trade(
    pnl,
    status: str = "Closed",
    trade_date: str = "2025-07-01",
    symbol: str = "AAPL",
    quantity: int = 1,
    tags=None,
    orders=None,
) -> Trade:
    return Trade(
        symbol=symbol,
        entry_price=Decimal("100"),
        quantity=quantity,
        type="Buy",
        status=status,
        pnl=Decimal(str(pnl)),
        date=trade_date,
        tags=tags or [],
        orders=orders or [],
    )


def order_at(time: str) -> TradeOrder:
    return TradeOrder(
        action="Buy", date="2025-07-01", time=time, quantity=1, price=Decimal("100")
    )


# Strategy for generating valid trade data
def trade_strategy():
    """Generate valid Trade objects for testing."""
    return st.builds(
        Trade,
        id=st.none(),
        symbol=st.sampled_from(["AAPL", "NIFTY", "TSLA", "INFY"]),
        entry_price=st.decimals(
            min_value=0, max_value=100000, places=2, allow_nan=False, allow_infinity=False
        ),
        quantity=st.integers(min_value=0, max_value=1000),
        type=st.sampled_from(["Buy", "Sell"]),
        status=st.sampled_from(["Open", "Closed"]),
        pnl=st.decimals(
            min_value=-10000, max_value=10000, places=2, allow_nan=False, allow_infinity=False
        ),
        date=st.dates(min_value=date(2020, 1, 1), max_value=date(2025, 12, 31)).map(
            date.isoformat
        ),
        tags=st.lists(st.sampled_from(["breakout", "gap", "reversal"]), max_size=3),
    )


class TestEmptySnapshot:
    """
    **Feature: trade-journal, Property 1: Empty Snapshot Defaults**

    *For* an empty trade list every figure is zero while the fixed
    weekday and hour series are still fully populated.
    """

    def test_empty_trades_returns_zeros(self):
        result = compute_statistics([])

        assert result.win_rate == 0
        assert result.expectancy == 0
        assert result.profit_factor == 0
        assert result.avg_win == 0
        assert result.avg_loss == 0
        assert result.max_win_streak == 0
        assert result.max_loss_streak == 0
        assert result.top_win == 0
        assert result.top_loss == 0
        assert result.equity_curve == []
        assert result.performance_by_tag == {}
        assert result.performance_by_symbol == {}

    def test_empty_trades_keep_fixed_series(self):
        result = compute_statistics([])

        assert [b.name for b in result.pnl_by_day_of_week] == DAYS_OF_WEEK
        assert len(result.pnl_by_hour) == 24
        assert all(b.pnl == 0 for b in result.pnl_by_day_of_week + result.pnl_by_hour)
        assert result.pnl_by_hour[0].name == "0:00"
        assert result.pnl_by_hour[23].name == "23:00"


class TestEquityCurveReconstruction:
    """
    **Feature: trade-journal, Property 2: Equity Curve Reconstruction**

    *For any* set of trades, consecutive equity-curve differences equal
    the P&L of the trade at that sorted position.
    """

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_differences_reconstruct_pnl(self, trades: list[Trade]):
        curve = equity_curve(trades)
        ordered = sort_by_date(trades)

        assert len(curve) == len(trades)
        previous = Decimal("0")
        for point, trade in zip(curve, ordered):
            assert point.cumulative_pnl - previous == trade.pnl
            assert point.date == trade.date
            previous = point.cumulative_pnl

    @given(trades=st.lists(trade_strategy(), min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_final_point_is_total_pnl(self, trades: list[Trade]):
        curve = equity_curve(trades)
        assert curve[-1].cumulative_pnl == sum((t.pnl for t in trades), Decimal("0"))

    def test_curve_is_sorted_by_date_and_stable(self):
        trades = [
            make_trade(5, trade_date="2025-07-03"),
            make_trade(1, trade_date="2025-07-01"),
            make_trade(2, trade_date="2025-07-01"),
        ]
        curve = equity_curve(trades)

        assert [p.date for p in curve] == ["2025-07-01", "2025-07-01", "2025-07-03"]
        assert [p.cumulative_pnl for p in curve] == [Decimal(1), Decimal(3), Decimal(8)]


class TestWinRateBounds:
    """
    **Feature: trade-journal, Property 3: Win Rate Bounds**

    *For any* set of trades, win rate lies in [0, 100] and is exactly 100
    when every closed trade is a winner.
    """

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=50))
    @settings(max_examples=100)
    def test_win_rate_bounds(self, trades: list[Trade]):
        assert 0 <= win_rate(trades) <= 100

    @given(trades=st.lists(trade_strategy(), min_size=1, max_size=50))
    @settings(max_examples=100)
    def test_win_rate_is_100_iff_all_closed_win(self, trades: list[Trade]):
        closed = [t for t in trades if t.status == "Closed"]
        assume(closed)

        all_win = all(t.pnl > 0 for t in closed)
        assert (win_rate(trades) == 100) == all_win

    def test_break_even_counts_as_closed_but_not_win(self):
        trades = [make_trade(10), make_trade(0)]
        assert win_rate(trades) == 50


class TestTagFanOut:
    """
    **Feature: trade-journal, Property 4: Tag Fan-Out**

    *For any* trade with several tags, its full P&L counts towards every
    tag, so tag totals are not conserved.
    """

    def test_multi_tag_trade_counts_in_each_bucket(self):
        result = performance_by_tag([make_trade(10, tags=["A", "B"])])

        assert result["A"].pnl == 10
        assert result["B"].pnl == 10
        assert result["A"].trades == 1
        assert sum(g.pnl for g in result.values()) == 20

    def test_untagged_trades_go_to_no_tags(self):
        result = performance_by_tag([make_trade(-4), make_trade(6, status="Open")])

        assert list(result) == [NO_TAGS]
        assert result[NO_TAGS].trades == 2
        assert result[NO_TAGS].pnl == 2

    def test_duplicate_tags_are_not_deduplicated(self):
        result = performance_by_tag([make_trade(3, tags=["A", "A"])])
        assert result["A"].trades == 2
        assert result["A"].pnl == 6

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_tag_totals_match_fan_out(self, trades: list[Trade]):
        result = performance_by_tag(trades)

        expected = sum((t.pnl * max(len(t.tags), 1) for t in trades), Decimal("0"))
        assert sum((g.pnl for g in result.values()), Decimal("0")) == expected
        assert sum(g.trades for g in result.values()) == sum(
            max(len(t.tags), 1) for t in trades
        )


class TestScenarios:
    """
    **Feature: trade-journal, Property 5: Worked Scenarios**
    """

    def test_three_closed_trades(self):
        trades = [
            make_trade(50, trade_date="2025-07-01"),
            make_trade(-20, trade_date="2025-07-02"),
            make_trade(70, trade_date="2025-07-03"),
        ]
        result = compute_statistics(trades)

        assert round(float(result.win_rate), 2) == 66.67
        assert result.avg_win == 60
        assert result.avg_loss == -20
        assert result.profit_factor == 6
        assert result.max_win_streak == 1
        assert result.max_loss_streak == 1
        assert result.top_win == 70
        assert result.top_loss == -20
        assert result.equity_curve[-1].cumulative_pnl == 100
        assert result.final_equity == 100

    def test_expectancy_adds_signed_loss_term(self):
        trades = [
            make_trade(50, trade_date="2025-07-01"),
            make_trade(-20, trade_date="2025-07-02"),
            make_trade(70, trade_date="2025-07-03"),
        ]
        # 2/3 * 60 + 1/3 * -20
        assert round(float(expectancy(trades)), 4) == 33.3333

    def test_single_open_trade(self):
        result = compute_statistics([make_trade(0, status="Open")])

        assert result.win_rate == 0
        assert result.profit_factor == 0
        assert len(result.equity_curve) == 1
        assert result.equity_curve[0].cumulative_pnl == 0
        assert result.max_win_streak == 0
        assert result.max_loss_streak == 0

    def test_symbol_weighted_pnl(self):
        trades = [
            make_trade(10, symbol="AAPL", quantity=10),
            make_trade(-5, symbol="AAPL", quantity=5),
        ]
        result = performance_by_symbol(trades)

        assert result["AAPL"].trades == 2
        assert result["AAPL"].pnl == 5
        assert result["AAPL"].weighted_pnl == 0

    def test_zero_quantity_weights_as_one(self):
        result = performance_by_symbol([make_trade(7, quantity=0)])
        assert result["AAPL"].weighted_pnl == 7

    def test_many_groups_fold_independently(self):
        trades = [
            make_trade(i % 7, symbol=f"SYM{i % 1000}", tags=[f"tag{i % 500}"])
            for i in range(3000)
        ]

        by_symbol = performance_by_symbol(trades)
        by_tag = performance_by_tag(trades)

        assert len(by_symbol) == 1000
        assert all(group.trades == 3 for group in by_symbol.values())
        assert len(by_tag) == 500
        assert all(group.trades == 6 for group in by_tag.values())
        assert sum((g.pnl for g in by_symbol.values()), Decimal("0")) == sum(
            (t.pnl for t in trades), Decimal("0")
        )
        assert performance_by_symbol(trades[:3]) == performance_by_symbol(trades[:3])
        assert len(performance_by_symbol(trades[:3])) == 3


class TestIdempotence:
    """
    **Feature: trade-journal, Property 6: Idempotence**

    *For any* unchanged snapshot, computing twice yields identical output.
    """

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=30))
    @settings(max_examples=50)
    def test_same_snapshot_same_result(self, trades: list[Trade]):
        first = compute_statistics(trades)
        second = compute_statistics(trades)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()


class TestProfitFactor:
    """
    **Feature: trade-journal, Property 7: Profit Factor Guards**
    """

    def test_no_losses_with_profit_is_infinite(self):
        assert profit_factor([make_trade(10)]).is_infinite()
        assert compute_statistics([make_trade(10)]).profit_factor > 0

    def test_no_losses_no_profit_is_zero(self):
        assert profit_factor([make_trade(0), make_trade(5, status="Open")]) == 0

    def test_ratio_is_absolute(self):
        assert profit_factor([make_trade(30), make_trade(-10), make_trade(-5)]) == 2


class TestStreaks:
    """
    **Feature: trade-journal, Property 8: Streak Detection**

    Streaks follow trade-date order; open and break-even trades do not
    reset a running streak.
    """

    def test_streaks_follow_date_not_input_order(self):
        trades = [
            make_trade(-1, trade_date="2025-07-05"),
            make_trade(1, trade_date="2025-07-01"),
            make_trade(1, trade_date="2025-07-02"),
            make_trade(1, trade_date="2025-07-03"),
            make_trade(-1, trade_date="2025-07-04"),
        ]
        assert streaks(trades) == (3, 2)

    def test_open_and_break_even_do_not_reset(self):
        trades = [
            make_trade(1, trade_date="2025-07-01"),
            make_trade(0, status="Open", trade_date="2025-07-02"),
            make_trade(0, trade_date="2025-07-03"),
            make_trade(1, trade_date="2025-07-04"),
        ]
        assert streaks(trades) == (2, 0)

    def test_open_trade_with_pnl_is_ignored(self):
        trades = [
            make_trade(-3, trade_date="2025-07-01"),
            make_trade(9, status="Open", trade_date="2025-07-02"),
            make_trade(-3, trade_date="2025-07-03"),
        ]
        assert streaks(trades) == (0, 2)

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_streaks_bounded_by_counts(self, trades: list[Trade]):
        max_win, max_loss = streaks(trades)
        closed = [t for t in trades if t.status == "Closed"]

        assert max_win <= sum(1 for t in closed if t.pnl > 0)
        assert max_loss <= sum(1 for t in closed if t.pnl < 0)


class TestChartBuckets:
    """
    **Feature: trade-journal, Property 9: Weekday and Hour Buckets**
    """

    def test_weekday_buckets_use_sunday_first(self):
        trades = [
            make_trade(50, trade_date="2025-07-01"),  # Tuesday
            make_trade(-20, trade_date="2025-07-06"),  # Sunday
            make_trade(99, status="Open", trade_date="2025-07-01"),
        ]
        buckets = pnl_by_day_of_week(trades)

        assert buckets[0].name == "Sunday"
        assert buckets[0].pnl == -20
        assert buckets[2].name == "Tuesday"
        assert buckets[2].pnl == 50
        assert sum(b.pnl for b in buckets) == 30

    def test_hour_from_first_order(self):
        trades = [
            make_trade(10, orders=[order_at("09:30"), order_at("14:00")]),
            make_trade(5),
            make_trade(3, orders=[order_at("bad")]),
        ]
        buckets = pnl_by_hour(trades)

        assert buckets[9].pnl == 10
        assert buckets[14].pnl == 0
        assert buckets[0].pnl == 8

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=50)
    def test_buckets_sum_to_closed_pnl(self, trades: list[Trade]):
        closed_total = sum((t.pnl for t in trades if t.status == "Closed"), Decimal("0"))

        assert sum((b.pnl for b in pnl_by_day_of_week(trades)), Decimal("0")) == closed_total
        assert sum((b.pnl for b in pnl_by_hour(trades)), Decimal("0")) == closed_total


class TestMalformedInput:
    """
    **Feature: trade-journal, Property 10: Malformed Date and Time Fallbacks**
    """

    @pytest.mark.parametrize(
        "value", ["", "not-a-date", "2025-13-40", "20250701", "2025-W27-2", "2025-07-01T09:30", None]
    )
    def test_bad_dates_fall_back_to_epoch(self, value):
        assert parse_trade_date(value) == EPOCH_DATE

    @pytest.mark.parametrize(
        "value,hour",
        [("09:30", 9), ("23:59", 23), ("7:05", 7), ("25:00", 0), ("xx", 0), ("", 0), (None, 0)],
    )
    def test_order_hour(self, value, hour):
        assert parse_order_hour(value) == hour

    def test_malformed_date_sorts_first_and_lands_on_thursday(self):
        trades = [
            make_trade(4, trade_date="2025-07-01"),
            make_trade(6, trade_date="garbage"),
        ]
        curve = equity_curve(trades)
        buckets = pnl_by_day_of_week(trades)

        assert curve[0].date == "garbage"
        assert buckets[4].name == "Thursday"
        assert buckets[4].pnl == 6
