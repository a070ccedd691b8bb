"""Unit tests for risk limit and trading-rule loaders."""

from datetime import time
from decimal import Decimal

import pytest

from journalytics.libraries.risk.loaders import limits_from_settings, load_risk_limits, load_rules, rules_from_settings
from journalytics.system.config import RiskSettings, RulesSettings


@pytest.fixture
def risk_file(tmp_path):
    """YAML file with both sections."""
    path = tmp_path / "risk.yaml"
    path.write_text(
        """
risk_limits:
  max_daily_drawdown_pct: 3
  profit_target_pct: 8.5

trading_rules:
  trading_days: [Mon, Tue, Wed]
  hours_from: 9:30
  hours_to: "11:45"
  max_trades_per_day: 3
  max_loss_per_trade: 250
  max_loss_per_day: "500.50"
"""
    )
    return path


class TestLoadRiskLimits:
    """Tests for load_risk_limits."""

    def test_load(self, risk_file):
        """Test values override defaults, missing keys keep them."""
        limits = load_risk_limits(risk_file)

        assert limits.max_daily_drawdown_pct == Decimal("3")
        assert limits.profit_target_pct == Decimal("8.5")
        assert limits.max_total_drawdown_pct == Decimal("10")

    def test_missing_file(self, tmp_path):
        """Test missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_risk_limits(tmp_path / "missing.yaml")

    def test_missing_root_key(self, tmp_path):
        """Test the section must be present."""
        path = tmp_path / "other.yaml"
        path.write_text("something: 1\n")

        with pytest.raises(ValueError, match="risk_limits"):
            load_risk_limits(path)

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors become ValueError."""
        path = tmp_path / "bad.yaml"
        path.write_text("risk_limits: [unclosed\n")

        with pytest.raises(ValueError, match="Failed to parse"):
            load_risk_limits(path)

    def test_non_numeric_value(self, tmp_path):
        """Test non-numeric percentages are rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("risk_limits:\n  profit_target_pct: lots\n")

        with pytest.raises(ValueError, match="profit_target_pct"):
            load_risk_limits(path)

    def test_out_of_range_value(self, tmp_path):
        """Test model validation runs at load time."""
        path = tmp_path / "bad.yaml"
        path.write_text("risk_limits:\n  consistency_pct: 150\n")

        with pytest.raises(ValueError, match="consistency_pct"):
            load_risk_limits(path)


class TestLoadRules:
    """Tests for load_rules."""

    def test_load(self, risk_file):
        """Test every field is parsed."""
        rules = load_rules(risk_file)

        assert rules.trading_days == ("Mon", "Tue", "Wed")
        assert rules.hours_from == time(9, 30)
        assert rules.hours_to == time(11, 45)
        assert rules.max_trades_per_day == 3
        assert rules.max_loss_per_trade == Decimal("250")
        assert rules.max_loss_per_day == Decimal("500.50")

    def test_empty_section_uses_defaults(self, tmp_path):
        """Test an empty section gives default rules."""
        path = tmp_path / "rules.yaml"
        path.write_text("trading_rules:\n")

        assert load_rules(path).hours_to == time(16, 0)

    def test_bad_time(self, tmp_path):
        """Test hours must be HH:MM."""
        path = tmp_path / "rules.yaml"
        path.write_text('trading_rules:\n  hours_from: "nine"\n')

        with pytest.raises(ValueError, match="hours_from"):
            load_rules(path)

    def test_trading_days_must_be_list(self, tmp_path):
        """Test a scalar trading_days is rejected."""
        path = tmp_path / "rules.yaml"
        path.write_text("trading_rules:\n  trading_days: Mon\n")

        with pytest.raises(ValueError, match="trading_days"):
            load_rules(path)

    def test_bad_trade_count(self, tmp_path):
        """Test max_trades_per_day must be an integer."""
        path = tmp_path / "rules.yaml"
        path.write_text("trading_rules:\n  max_trades_per_day: many\n")

        with pytest.raises(ValueError, match="max_trades_per_day"):
            load_rules(path)

    def test_quoted_boolean_words(self, tmp_path):
        """Test quoted true/false words are parsed rather than truth-tested."""
        path = tmp_path / "rules.yaml"
        path.write_text('trading_rules:\n  hours_enabled: "false"\n  max_trades_per_day: "4"\n')

        rules = load_rules(path)

        assert rules.hours_enabled is False
        assert rules.max_trades_per_day == 4

    def test_bad_hours_flag(self, tmp_path):
        """Test an unrecognized hours_enabled value is rejected."""
        path = tmp_path / "rules.yaml"
        path.write_text("trading_rules:\n  hours_enabled: sometimes\n")

        with pytest.raises(ValueError, match="hours_enabled"):
            load_rules(path)


class TestFromSettings:
    """Tests for building models from system configuration sections."""

    def test_limits_from_settings(self):
        """Test the risk section maps onto RiskLimits."""
        limits = limits_from_settings(RiskSettings(max_total_drawdown_pct=Decimal("6")))

        assert limits.max_total_drawdown_pct == Decimal("6")
        assert limits.consistency_pct == Decimal("40")

    def test_rules_from_settings(self):
        """Test string hours are parsed."""
        rules = rules_from_settings(RulesSettings(hours_from="08:15", trading_days=["Sat", "Sun"]))

        assert rules.hours_from == time(8, 15)
        assert rules.trading_days == ("Sat", "Sun")
