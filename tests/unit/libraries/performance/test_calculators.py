"""Unit tests for the drawdown and streak calculators."""

from decimal import Decimal

import pytest

from journalytics.libraries.performance.calculators import DrawdownCalculator, StreakCalculator


class TestDrawdownCalculator:
    """Test DrawdownCalculator functionality."""

    @pytest.fixture
    def calculator(self) -> DrawdownCalculator:
        """Create calculator instance."""
        return DrawdownCalculator()

    def test_initial_state(self, calculator):
        """Test calculator starts flat."""
        assert calculator.cumulative == Decimal("0")
        assert calculator.peak == Decimal("0")
        assert calculator.max_drawdown == Decimal("0")

    def test_update_returns_current_drawdown(self, calculator):
        """Test each update reports the distance from the peak."""
        assert calculator.update(Decimal("100")) == Decimal("0")
        assert calculator.update(Decimal("-30")) == Decimal("30")
        assert calculator.update(Decimal("-20")) == Decimal("50")
        assert calculator.current_drawdown == Decimal("50")

    def test_new_peak_resets_current_but_keeps_max(self, calculator):
        """Test recovery above the old peak."""
        for pl in ("100", "-60", "200"):
            calculator.update(Decimal(pl))

        assert calculator.peak == Decimal("240")
        assert calculator.current_drawdown == Decimal("0")
        assert calculator.max_drawdown == Decimal("60")

    def test_losing_start_is_drawdown(self, calculator):
        """Test the peak starts at zero."""
        calculator.update(Decimal("-25"))

        assert calculator.peak == Decimal("0")
        assert calculator.max_drawdown == Decimal("25")


class TestStreakCalculator:
    """Test StreakCalculator functionality."""

    @staticmethod
    def _feed(values: list[str]) -> StreakCalculator:
        calc = StreakCalculator()
        for v in values:
            calc.update(Decimal(v))
        return calc

    def test_win_and_loss_runs(self):
        """Test runs are collected in order."""
        calc = self._feed(["1", "1", "-1", "-1", "-1", "1"])

        assert calc.win_streaks == [2, 1]
        assert calc.loss_streaks == [3]
        assert calc.current == 1

    def test_breakeven_resets_both(self):
        """Test a flat trade ends the running streak and starts none."""
        calc = self._feed(["1", "1", "0", "1"])

        assert calc.win_streaks == [2, 1]
        assert calc.current == 1

    def test_current_after_breakeven_is_zero(self):
        """Test current is 0 when the latest trade was flat."""
        calc = self._feed(["-1", "0"])

        assert calc.loss_streaks == [1]
        assert calc.current == 0

    def test_current_loss_is_negative(self):
        """Test ongoing loss streak is reported as negative."""
        calc = self._feed(["1", "-1", "-1"])

        assert calc.current == -2

    def test_empty(self):
        """Test no updates means no streaks."""
        calc = StreakCalculator()

        assert calc.win_streaks == []
        assert calc.loss_streaks == []
        assert calc.current == 0
