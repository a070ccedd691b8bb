"""Tests for core statistics calculations."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from journalytics.libraries.performance.metrics import (
    calculate_calmar_ratio,
    calculate_expectancy,
    calculate_max_drawdown,
    calculate_profit_factor,
    calculate_sharpe_ratio,
    calculate_sortino_ratio,
    calculate_std_dev,
    calculate_win_rate,
    compute_stats,
    quantize,
    safe_ratio,
    sort_trades,
)
from journalytics.libraries.performance.models import RATIO_SENTINEL


class TestSafeRatio:
    """Test the zero-denominator policy."""

    def test_regular_division(self):
        """Test positive denominator divides and rounds to cents."""
        assert safe_ratio(Decimal("200"), Decimal("3")) == Decimal("66.67")

    def test_zero_denominator_positive_numerator_is_sentinel(self):
        """Test infinite ratio is replaced by the sentinel."""
        assert safe_ratio(Decimal("200"), Decimal("0")) == RATIO_SENTINEL

    def test_zero_over_zero_is_zero(self):
        """Test 0/0 yields 0, never NaN."""
        assert safe_ratio(Decimal("0"), Decimal("0")) == Decimal("0.00")

    def test_quantize_rounds_to_cents(self):
        """Test quantize keeps two decimal places."""
        assert quantize(Decimal("2")) == Decimal("2.00")
        assert quantize(Decimal("66.6666")) == Decimal("66.67")


class TestSortTrades:
    """Test chronological ordering."""

    def test_sorts_by_date(self, make_trade):
        """Test trades come back oldest first."""
        later = make_trade("10", day=date(2024, 1, 5))
        earlier = make_trade("20", day=date(2024, 1, 1))

        assert sort_trades([later, earlier]) == [earlier, later]

    def test_same_day_uses_created_at(self, make_trade):
        """Test creation time breaks ties within a day."""
        second = make_trade("10", created_at=datetime(2024, 1, 1, 15, 0))
        first = make_trade("20", created_at=datetime(2024, 1, 1, 9, 0))

        assert sort_trades([second, first]) == [first, second]

    def test_mixed_aware_and_missing_created_at(self, make_trade):
        """Test aware, naive and missing creation times sort together."""
        aware = make_trade("10", created_at=datetime(2024, 1, 1, 15, 0, tzinfo=timezone.utc))
        missing = make_trade("-5")
        naive = make_trade("20", created_at=datetime(2024, 1, 1, 9, 0))

        assert sort_trades([aware, missing, naive]) == [missing, naive, aware]
        assert compute_stats([aware, missing, naive]).total_pl == Decimal("25")

    def test_aware_created_at_stored_as_naive_utc(self, make_trade):
        """Test an offset timestamp becomes the same instant in naive UTC."""
        trade = make_trade("1", created_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=2))))

        assert trade.created_at == datetime(2024, 1, 1, 7, 0)
        assert trade.created_at.tzinfo is None

    def test_does_not_mutate_input(self, make_trade):
        """Test the input list keeps its order."""
        trades = [make_trade("1", day=date(2024, 1, 3)), make_trade("2", day=date(2024, 1, 1))]
        original = list(trades)

        sort_trades(trades)

        assert trades == original


class TestTradeMetrics:
    """Test per-metric functions."""

    def test_win_rate(self, three_trades):
        """Test win rate as a percentage."""
        assert calculate_win_rate(three_trades) == Decimal("66.67")

    def test_win_rate_empty(self):
        """Test empty input gives 0."""
        assert calculate_win_rate([]) == Decimal("0.00")

    def test_breakeven_is_not_a_win(self, make_trade):
        """Test zero P/L counts toward the total but not wins."""
        trades = [make_trade("100"), make_trade("0")]
        assert calculate_win_rate(trades) == Decimal("50.00")

    def test_profit_factor(self, three_trades):
        """Test gross win over gross loss."""
        assert calculate_profit_factor(three_trades) == Decimal("4.00")

    def test_profit_factor_no_losses_is_sentinel(self, make_trade):
        """Test all-winning set yields the sentinel."""
        trades = [make_trade("100"), make_trade("50")]
        assert calculate_profit_factor(trades) == RATIO_SENTINEL

    def test_profit_factor_all_losses_is_zero(self, make_trade):
        """Test all-losing set yields 0."""
        trades = [make_trade("-100"), make_trade("-50")]
        assert calculate_profit_factor(trades) == Decimal("0.00")

    def test_expectancy(self, three_trades):
        """Test (win% x avg win) - (loss% x avg loss)."""
        assert calculate_expectancy(three_trades) == Decimal("50.00")

    def test_expectancy_breakeven_dilutes_win_fraction(self, make_trade):
        """Test breakeven trades count in (1 - win%) without adding loss size."""
        trades = [make_trade("100"), make_trade("0")]
        # 0.5 x 100 - 0.5 x 0
        assert calculate_expectancy(trades) == Decimal("50.00")

    def test_std_dev_is_population(self):
        """Test standard deviation divides by N."""
        values = [Decimal(v) for v in ("2", "4", "4", "4", "5", "5", "7", "9")]
        assert calculate_std_dev(values) == Decimal("2")

    def test_std_dev_single_value_is_zero(self):
        """Test one value has no dispersion."""
        assert calculate_std_dev([Decimal("100")]) == Decimal("0")

    def test_sharpe_zero_dispersion(self):
        """Test identical values give Sharpe 0."""
        assert calculate_sharpe_ratio([Decimal("10"), Decimal("10")]) == Decimal("0.00")

    def test_sharpe_annualization_factor(self):
        """Test factor 1 gives the plain mean / std."""
        values = [Decimal("100"), Decimal("-50"), Decimal("100")]
        # mean 50, std sqrt(5000) = 70.71
        assert calculate_sharpe_ratio(values, annualization_factor=1) == Decimal("0.71")

    def test_sortino_uses_downside_only(self):
        """Test downside deviation from negative values."""
        values = [Decimal("100"), Decimal("-50"), Decimal("100")]
        # mean 50 / downside 50 = 1
        assert calculate_sortino_ratio(values, annualization_factor=1) == Decimal("1.00")
        assert calculate_sortino_ratio(values) == Decimal("15.87")

    def test_sortino_without_losses_uses_std(self):
        """Test fallback to the full standard deviation."""
        values = [Decimal("100"), Decimal("300")]
        # mean 200 / std 100
        assert calculate_sortino_ratio(values, annualization_factor=1) == Decimal("2.00")

    def test_max_drawdown(self, three_trades):
        """Test peak-to-trough decline of cumulative P/L."""
        assert calculate_max_drawdown(three_trades) == Decimal("50")

    def test_max_drawdown_ignores_input_order(self, three_trades):
        """Test trades are sorted before walking the curve."""
        assert calculate_max_drawdown(list(reversed(three_trades))) == Decimal("50")

    def test_max_drawdown_from_flat_start(self, make_trade):
        """Test a losing first trade is already a drawdown."""
        assert calculate_max_drawdown([make_trade("-80")]) == Decimal("80")

    def test_no_drawdown_when_curve_never_falls(self, make_trade):
        """Test a non-decreasing cumulative curve has zero drawdown."""
        trades = [
            make_trade("10", day=date(2024, 1, 1)),
            make_trade("0", day=date(2024, 1, 2)),
            make_trade("5", day=date(2024, 1, 3)),
        ]

        assert calculate_max_drawdown(trades) == Decimal("0")

    def test_no_drawdown_with_only_breakeven_and_wins(self, make_trade):
        """Test breakeven trades at the start and end keep drawdown at zero."""
        trades = [
            make_trade("0", day=date(2024, 1, 1)),
            make_trade("0", day=date(2024, 1, 2)),
            make_trade("25", day=date(2024, 1, 3)),
            make_trade("0", day=date(2024, 1, 4)),
            make_trade("25", day=date(2024, 1, 5)),
        ]

        assert calculate_max_drawdown(trades) == Decimal("0")
        assert compute_stats(trades).max_drawdown == Decimal("0")

    def test_calmar(self):
        """Test total P/L over max drawdown."""
        assert calculate_calmar_ratio(Decimal("150"), Decimal("50")) == Decimal("3.00")
        assert calculate_calmar_ratio(Decimal("150"), Decimal("0")) == RATIO_SENTINEL


class TestComputeStats:
    """Test the full statistics bundle."""

    def test_empty_returns_none(self):
        """Test no trades gives None rather than zeros."""
        assert compute_stats([]) is None

    def test_three_trade_round_trip(self, three_trades):
        """Test the reference +100, -50, +100 sequence."""
        stats = compute_stats(three_trades)

        assert stats is not None
        assert stats.total_trades == 3
        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.breakeven == 0
        assert stats.win_rate == Decimal("66.67")
        assert stats.total_pl == Decimal("150")
        assert stats.gross_win == Decimal("200")
        assert stats.gross_loss == Decimal("50")
        assert stats.avg_win == Decimal("100.00")
        assert stats.avg_loss == Decimal("50.00")
        assert stats.profit_factor == Decimal("4.00")
        assert stats.payoff_ratio == Decimal("2.00")
        assert stats.expectancy == Decimal("50.00")
        assert stats.max_drawdown == Decimal("50")
        assert stats.calmar == Decimal("3.00")
        assert stats.std_dev == Decimal("70.71")
        assert stats.best_trade == Decimal("100")
        assert stats.worst_trade == Decimal("-50")

    def test_counts_add_up(self, make_trade):
        """Test wins + losses + breakeven equals total."""
        trades = [make_trade("10"), make_trade("0"), make_trade("-5"), make_trade("0")]
        stats = compute_stats(trades)

        assert stats.wins + stats.losses + stats.breakeven == stats.total_trades
        assert stats.breakeven == 2

    def test_single_trade(self, make_trade):
        """Test one winning trade produces finite ratios."""
        stats = compute_stats([make_trade("100")])

        assert stats.std_dev == Decimal("0.00")
        assert stats.sharpe == Decimal("0.00")
        assert stats.sortino == Decimal("0.00")
        assert stats.max_drawdown == Decimal("0")
        assert stats.profit_factor == RATIO_SENTINEL
        assert stats.payoff_ratio == RATIO_SENTINEL
        assert stats.calmar == RATIO_SENTINEL

    def test_unsorted_input_matches_sorted(self, three_trades):
        """Test input order does not change any statistic."""
        assert compute_stats(list(reversed(three_trades))) == compute_stats(three_trades)

    def test_r_statistics(self, make_trade):
        """Test R stats use only trades carrying an R multiple."""
        trades = [
            make_trade("100", r_multiple="2"),
            make_trade("-50", r_multiple="-1"),
            make_trade("30"),
        ]
        stats = compute_stats(trades)

        assert stats.r_count == 2
        assert stats.avg_r == Decimal("0.50")
        assert stats.best_r == Decimal("2")
        assert stats.worst_r == Decimal("-1")
        assert stats.std_dev_r == Decimal("1.50")

    def test_no_r_values(self, three_trades):
        """Test R stats are None when no trade has R."""
        stats = compute_stats(three_trades)

        assert stats.r_count == 0
        assert stats.avg_r is None
        assert stats.best_r is None

    def test_mean_pl(self, three_trades):
        """Test average P/L per trade."""
        assert compute_stats(three_trades).mean_pl == Decimal("50")

    def test_annualization_factor_is_passed_through(self, three_trades):
        """Test the factor reaches Sharpe and Sortino."""
        stats = compute_stats(three_trades, annualization_factor=1)

        assert stats.sharpe == Decimal("0.71")
        assert stats.sortino == Decimal("1.00")
