"""Unit tests for period reports and the analytics bundle."""

from datetime import date, time
from decimal import Decimal

import pytest
from pydantic import ValidationError

from journalytics.services.data import InMemoryTradeStore
from journalytics.services.reporting import ReportBuilder, ReportRequest, build_analytics
from journalytics.services.reporting.report import format_long_date
from journalytics.system.config import AnalyticsConfig, SystemConfig


@pytest.fixture
def store(make_trade):
    """Three January trades on two accounts plus one in February."""
    return InMemoryTradeStore(
        [
            make_trade("100", day=date(2024, 1, 2), account_id=1, direction="Long"),
            make_trade("-40", day=date(2024, 1, 5), account_id=1, direction="Short"),
            make_trade("60", day=date(2024, 1, 5), account_id=2, direction="Long"),
            make_trade("25", day=date(2024, 2, 1), account_id=1, direction="Long"),
        ]
    )


class TestReportBuilder:
    """Test ReportBuilder periods."""

    def test_monthly(self, store):
        """Test a calendar month report."""
        report = ReportBuilder(store).monthly(2024, 1)

        assert report.title == "Monthly Report — January 2024"
        assert report.period == "monthly"
        assert report.start_date == date(2024, 1, 1)
        assert report.end_date == date(2024, 1, 31)
        assert report.stats.total_trades == 3
        assert report.stats.total_pl == Decimal("120")
        assert [t.date for t in report.trades] == [date(2024, 1, 2), date(2024, 1, 5), date(2024, 1, 5)]

    def test_daily(self, store):
        """Test a single-day report with the day summary."""
        report = ReportBuilder(store).daily(date(2024, 1, 5))

        assert report.title == "Daily Report — Jan 5, 2024"
        assert report.stats.total_pl == Decimal("20")
        assert report.days.trading_days == 1
        assert report.long_short["Short"].total_pl == Decimal("-40")

    def test_weekly_defaults_to_seven_days(self, store):
        """Test the week ends six days after its start."""
        report = ReportBuilder(store).weekly(date(2024, 1, 1))

        assert report.end_date == date(2024, 1, 7)
        assert report.title == "Weekly Report — Jan 1, 2024 to Jan 7, 2024"
        assert report.stats.total_trades == 3

    def test_custom(self, store):
        """Test an arbitrary inclusive range."""
        report = ReportBuilder(store).custom(date(2024, 1, 5), date(2024, 2, 1))

        assert report.title.startswith("Custom Report — Jan 5, 2024")
        assert report.stats.total_trades == 3

    def test_account_scope(self, store):
        """Test the builder's account restricts every report."""
        report = ReportBuilder(store, account_id="2").monthly(2024, 1)

        assert report.stats.total_trades == 1
        assert report.stats.total_pl == Decimal("60")

    def test_empty_period(self, store):
        """Test a period without trades yields an empty report."""
        report = ReportBuilder(store).monthly(2023, 12)

        assert report.is_empty
        assert report.stats is None
        assert report.trades == []
        assert report.long_short == {}
        assert report.days is None

    def test_inverted_request(self):
        """Test the request validates its range."""
        with pytest.raises(ValidationError):
            ReportRequest(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1), title="x")

    def test_format_long_date(self):
        """Test header date format."""
        assert format_long_date(date(2024, 11, 30)) == "Nov 30, 2024"


class TestBuildAnalytics:
    """Test build_analytics()."""

    def test_full_bundle(self, make_trade):
        """Test every section is populated from one trade set."""
        trades = [
            make_trade("100", day=date(2024, 1, 2), r_multiple="2", trade_grade="A", entry_time=time(9, 30)),
            make_trade("-50", day=date(2024, 1, 3), r_multiple="-1", rule_violation=True, mistake_tag="FOMO"),
            make_trade("100", day=date(2024, 1, 4), model_id=1, model_name="Breakout", account_id=3),
        ]
        config = SystemConfig(analytics=AnalyticsConfig(rolling_window=2, heatmap_days=7))

        bundle = build_analytics(trades, config, starting_balance=Decimal("1000"))

        assert bundle.trade_count == 3
        assert bundle.stats.max_drawdown == Decimal("50")
        assert len(bundle.score) == 6
        assert bundle.equity_curve[-1].value == Decimal("150")
        assert bundle.daily_equity_curve[-1].value == Decimal("1150")
        assert len(bundle.rolling_win_rate) == 2
        # heatmap ends at the latest trade date by default
        assert bundle.daily_heatmap[-1].date == date(2024, 1, 4)
        assert len(bundle.daily_heatmap) == 7
        assert bundle.calendar.label == "January 2024"
        assert bundle.hour_heatmap.trades_excluded == 2
        assert sum(b.count for b in bundle.r_histogram) == 2
        assert bundle.models[0].label == "Breakout"
        assert bundle.accounts[0].key == "3"
        assert bundle.violations.top_mistakes[0].tag == "FOMO"
        assert bundle.streaks.current == 1
        assert bundle.days.trading_days == 3

    def test_empty(self):
        """Test empty input gives an empty bundle."""
        bundle = build_analytics([])

        assert bundle.is_empty
        assert bundle.stats is None
        assert bundle.score is None
        assert bundle.equity_curve == []
        assert bundle.daily_heatmap == []
        assert bundle.calendar is None
        assert bundle.hour_heatmap is None
        assert bundle.long_short == {}
        assert bundle.streaks is None
        assert all(b.count == 0 for b in bundle.r_histogram)

    def test_explicit_today(self, three_trades):
        """Test today selects the calendar month."""
        bundle = build_analytics(three_trades, today=date(2024, 2, 15))

        assert bundle.calendar.month == 2
        assert bundle.calendar.trading_days == 0

    def test_default_balance_is_configured_capital(self, three_trades):
        """Test the daily equity curve starts at risk.capital."""
        bundle = build_analytics(three_trades)

        assert bundle.daily_equity_curve[0].value == Decimal("25000")
