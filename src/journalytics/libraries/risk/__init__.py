"""
Risk Library.

Pure function-based checks of logged trades against account risk limits and
discipline rules. All tools are stateless, composable, and easy to test.

Architecture:
- tools/limits.py: Risk status and trading-rule checks
- models.py: Configuration and result dataclasses
- loaders.py: Limits and rules loading from YAML

Usage:
    >>> from journalytics.libraries.risk import RiskLimits, load_rules
    >>> from journalytics.libraries.risk.tools import limits
    >>>
    >>> status = limits.evaluate_risk_status(trades, RiskLimits(), Decimal("25000"))
    >>> status.total_status
    'ok'
    >>>
    >>> rules = load_rules("config/rules.yaml")
    >>> limits.check_trade_rules(trade, earlier_trades_today, rules)
    []
"""

from journalytics.libraries.risk.loaders import limits_from_settings, load_risk_limits, load_rules, rules_from_settings
from journalytics.libraries.risk.models import RiskLimits, RiskStatus, RuleViolation, TradingRules, TradingStatus

__all__ = [
    # Loading
    "load_risk_limits",
    "load_rules",
    "limits_from_settings",
    "rules_from_settings",
    # Models
    "RiskLimits",
    "RiskStatus",
    "TradingRules",
    "RuleViolation",
    "TradingStatus",
]
