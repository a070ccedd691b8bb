"""Tests for time-series builders."""

from datetime import date, time
from decimal import Decimal

import pytest

from journalytics.libraries.performance.series import (
    build_calendar_month,
    build_daily_equity_curve,
    build_daily_heatmap,
    build_day_of_week,
    build_drawdown_curve,
    build_equity_curve,
    build_hour_heatmap,
    build_monthly_pl,
    build_rolling_expectancy,
    build_rolling_rate,
    build_rolling_win_rate,
    format_day_label,
)


class TestEquityCurves:
    """Test cumulative and drawdown curves."""

    def test_equity_curve_last_point_is_total(self, three_trades):
        """Test cumulative P/L ends at the sum of all trades."""
        curve = build_equity_curve(three_trades)

        assert [p.value for p in curve] == [Decimal("100"), Decimal("50"), Decimal("150")]
        assert curve[0].label == "Jan 1"
        assert curve[-1].date == date(2024, 1, 3)

    def test_equity_curve_sorts_input(self, three_trades):
        """Test points follow chronological order."""
        curve = build_equity_curve(list(reversed(three_trades)))

        assert [p.value for p in curve] == [Decimal("100"), Decimal("50"), Decimal("150")]

    def test_equity_curve_empty(self):
        """Test empty input gives no points."""
        assert build_equity_curve([]) == []

    def test_drawdown_curve_is_non_positive(self, three_trades):
        """Test drawdown values are shown as losses."""
        curve = build_drawdown_curve(three_trades)

        assert [p.value for p in curve] == [Decimal("0"), Decimal("-50"), Decimal("0")]

    def test_daily_equity_curve_starts_at_balance(self, make_trade):
        """Test balance per day with a Start point."""
        trades = [
            make_trade("100", day=date(2024, 1, 1)),
            make_trade("-40", day=date(2024, 1, 1)),
            make_trade("25", day=date(2024, 1, 2)),
        ]
        curve = build_daily_equity_curve(trades, Decimal("1000"))

        assert [p.label for p in curve] == ["Start", "Jan 1", "Jan 2"]
        assert [p.value for p in curve] == [Decimal("1000"), Decimal("1060"), Decimal("1085")]

    def test_daily_equity_curve_empty(self):
        """Test no trades means no curve, not a lone Start point."""
        assert build_daily_equity_curve([], Decimal("1000")) == []

    def test_format_day_label(self):
        """Test short label has no zero padding."""
        assert format_day_label(date(2024, 3, 9)) == "Mar 9"


class TestMonthlyAndWeekday:
    """Test calendar aggregations."""

    def test_monthly_pl_running_total(self, make_trade):
        """Test months in order with cumulative P/L."""
        trades = [
            make_trade("100", day=date(2024, 2, 10)),
            make_trade("50", day=date(2024, 1, 5)),
            make_trade("-30", day=date(2024, 1, 20)),
        ]
        points = build_monthly_pl(trades)

        assert [p.month for p in points] == ["2024-01", "2024-02"]
        assert [p.label for p in points] == ["Jan 24", "Feb 24"]
        assert [p.pl for p in points] == [Decimal("20"), Decimal("100")]
        assert points[-1].cumulative_pl == Decimal("120")
        assert points[0].trade_count == 2

    def test_day_of_week_monday_first(self, make_trade):
        """Test seven entries with averages per weekday."""
        trades = [
            make_trade("100", day=date(2024, 1, 1)),  # Monday
            make_trade("50", day=date(2024, 1, 8)),  # Monday
            make_trade("-20", day=date(2024, 1, 5)),  # Friday
        ]
        points = build_day_of_week(trades)

        assert len(points) == 7
        assert points[0].label == "Mon"
        assert points[0].avg_pl == Decimal("75.00")
        assert points[0].trade_count == 2
        assert points[4].avg_pl == Decimal("-20.00")
        assert points[2].avg_pl == Decimal("0")
        assert points[2].trade_count == 0

    def test_day_of_week_empty(self):
        """Test no trades gives an empty list."""
        assert build_day_of_week([]) == []


class TestRollingSeries:
    """Test trailing-window series."""

    def test_rolling_win_rate_point_count(self, make_trade):
        """Test len(trades) - window + 1 points."""
        trades = [make_trade(pl, day=date(2024, 1, i + 1)) for i, pl in enumerate(["10", "-5", "10", "10", "-5"])]
        points = build_rolling_win_rate(trades, window=3)

        assert [p.index for p in points] == [3, 4, 5]
        assert [p.value for p in points] == [Decimal("66.67"), Decimal("66.67"), Decimal("66.67")]

    def test_rolling_fewer_trades_than_window(self, three_trades):
        """Test no points until the window fills."""
        assert build_rolling_win_rate(three_trades, window=10) == []

    def test_rolling_expectancy(self, three_trades):
        """Test expectancy over each window."""
        points = build_rolling_expectancy(three_trades, window=2)

        # (+100, -50) -> 25; (-50, +100) -> 25
        assert [p.value for p in points] == [Decimal("25.00"), Decimal("25.00")]

    def test_rolling_rate_predicate(self, make_trade):
        """Test share of flagged trades per window."""
        trades = [
            make_trade("10", day=date(2024, 1, 1), rule_violation=True),
            make_trade("10", day=date(2024, 1, 2)),
            make_trade("10", day=date(2024, 1, 3), rule_violation=True),
        ]
        points = build_rolling_rate(trades, lambda t: t.rule_violation, window=2)

        assert [p.value for p in points] == [Decimal("50.00"), Decimal("50.00")]

    def test_invalid_window(self, three_trades):
        """Test window below 1 is rejected."""
        with pytest.raises(ValueError, match="window"):
            build_rolling_win_rate(three_trades, window=0)


class TestHeatmaps:
    """Test daily and hourly heatmaps."""

    def test_daily_heatmap_distinguishes_empty_and_flat(self, make_trade):
        """Test no-trade days have pl None while flat days have 0."""
        trades = [
            make_trade("100", day=date(2024, 1, 3)),
            make_trade("-100", day=date(2024, 1, 3)),
            make_trade("40", day=date(2024, 1, 5)),
        ]
        cells = build_daily_heatmap(trades, days=5, end_date=date(2024, 1, 5))

        assert [c.date for c in cells] == [date(2024, 1, d) for d in range(1, 6)]
        assert cells[0].pl is None
        assert not cells[0].has_trades
        assert cells[2].pl == Decimal("0")
        assert cells[2].trade_count == 2
        assert cells[4].pl == Decimal("40")

    def test_daily_heatmap_empty(self):
        """Test no trades gives no cells."""
        assert build_daily_heatmap([], days=5, end_date=date(2024, 1, 5)) == []

    def test_daily_heatmap_invalid_days(self, three_trades):
        """Test days below 1 is rejected."""
        with pytest.raises(ValueError):
            build_daily_heatmap(three_trades, days=0)

    def test_hour_heatmap_cells(self, make_trade):
        """Test P/L is summed per weekday and entry hour."""
        trades = [
            make_trade("100", day=date(2024, 1, 1), entry_time=time(9, 15)),
            make_trade("-30", day=date(2024, 1, 1), entry_time=time(9, 45)),
            make_trade("-80", day=date(2024, 1, 2), entry_time=time(14, 0)),
            make_trade("500", day=date(2024, 1, 3)),
        ]
        heatmap = build_hour_heatmap(trades)

        assert len(heatmap.cells) == 7 * 24
        assert heatmap.cell(0, 9).pl == Decimal("70")
        assert heatmap.cell(0, 9).trade_count == 2
        assert heatmap.best.weekday == 0 and heatmap.best.hour == 9
        assert heatmap.worst.weekday == 1 and heatmap.worst.hour == 14
        assert heatmap.trades_counted == 3
        assert heatmap.trades_excluded == 1

    def test_hour_heatmap_without_entry_times(self, three_trades):
        """Test None when no trade has an entry time."""
        assert build_hour_heatmap(three_trades) is None


class TestCalendarMonth:
    """Test the month calendar view."""

    def test_month_days_and_extremes(self, make_trade):
        """Test only the requested month is summarized."""
        trades = [
            make_trade("100", day=date(2024, 1, 2)),
            make_trade("-40", day=date(2024, 1, 2)),
            make_trade("-70", day=date(2024, 1, 9)),
            make_trade("999", day=date(2024, 2, 1)),
        ]
        month = build_calendar_month(trades, 2024, 1)

        assert month.label == "January 2024"
        assert month.trading_days == 2
        assert month.green_days == 1
        assert month.total_pl == Decimal("-10")
        assert month.best_day == Decimal("60")
        assert month.worst_day == Decimal("-70")
        assert month.days[0].wins == 1
        assert month.days[0].trade_count == 2

    def test_empty_month(self, three_trades):
        """Test a month without trades has no extremes."""
        month = build_calendar_month(three_trades, 2023, 12)

        assert month.days == []
        assert month.best_day is None
        assert month.total_pl == Decimal("0")
