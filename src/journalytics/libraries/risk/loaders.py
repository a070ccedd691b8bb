"""Risk limit and trading-rule loaders.

Loads RiskLimits and TradingRules from YAML files or from the `risk` and
`rules` sections of the system configuration.

Expected YAML structure:
    risk_limits:
      max_daily_drawdown_pct: 2
      max_total_drawdown_pct: 10
      profit_target_pct: 10
      consistency_pct: 40

    trading_rules:
      trading_days: [Mon, Tue, Wed, Thu, Fri]
      hours_enabled: true
      hours_from: "09:00"
      hours_to: "16:00"
      max_trades_per_day: 3
      max_loss_per_trade: 250
      max_loss_per_day: 500

Both sections may live in the same file. Missing keys keep their defaults.
Validation happens at load time (fail fast).
"""

from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from journalytics.libraries.risk.models import RiskLimits, TradingRules
from journalytics.system.config import RiskSettings, RulesSettings, as_bool, as_int

_LIMIT_KEYS = ("max_daily_drawdown_pct", "max_total_drawdown_pct", "profit_target_pct", "consistency_pct")


def load_risk_limits(path: Path | str) -> RiskLimits:
    """
    Load RiskLimits from the `risk_limits` section of a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the section is missing or a value is invalid
    """
    section = _load_section(Path(path), "risk_limits")
    try:
        return RiskLimits(**{key: _decimal(section[key], key) for key in _LIMIT_KEYS if key in section})
    except TypeError as e:
        raise ValueError(f"Invalid risk_limits in {path}: {e}")


def load_rules(path: Path | str) -> TradingRules:
    """
    Load TradingRules from the `trading_rules` section of a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the section is missing or a value is invalid
    """
    section = _load_section(Path(path), "trading_rules")
    return _rules_from_mapping(section, source=str(path))


def limits_from_settings(settings: RiskSettings) -> RiskLimits:
    """Build RiskLimits from the `risk` section of SystemConfig."""
    return RiskLimits(
        max_daily_drawdown_pct=settings.max_daily_drawdown_pct,
        max_total_drawdown_pct=settings.max_total_drawdown_pct,
        profit_target_pct=settings.profit_target_pct,
        consistency_pct=settings.consistency_pct,
    )


def rules_from_settings(settings: RulesSettings) -> TradingRules:
    """Build TradingRules from the `rules` section of SystemConfig."""
    return _rules_from_mapping(
        {
            "trading_days": settings.trading_days,
            "hours_enabled": settings.hours_enabled,
            "hours_from": settings.hours_from,
            "hours_to": settings.hours_to,
            "max_trades_per_day": settings.max_trades_per_day,
            "max_loss_per_trade": settings.max_loss_per_trade,
            "max_loss_per_day": settings.max_loss_per_day,
        },
        source="system configuration",
    )


def _load_section(path: Path, key: str) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Risk file not found: {path}")

    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML from {path}: {e}")

    if not isinstance(raw, dict) or key not in raw:
        raise ValueError(f"File {path} must have '{key}' root key")

    section = raw[key] or {}
    if not isinstance(section, dict):
        raise ValueError(f"File {path}: '{key}' must be a mapping")
    return section


def _rules_from_mapping(data: dict[str, Any], source: str) -> TradingRules:
    kwargs: dict[str, Any] = {}

    if "trading_days" in data:
        days = data["trading_days"]
        if not isinstance(days, (list, tuple)):
            raise ValueError(f"{source}: trading_days must be a list")
        kwargs["trading_days"] = tuple(str(d) for d in days)
    if "hours_enabled" in data:
        kwargs["hours_enabled"] = as_bool(data["hours_enabled"], f"{source}: hours_enabled")
    for key in ("hours_from", "hours_to"):
        if key in data:
            kwargs[key] = _time(data[key], key)
    if "max_trades_per_day" in data:
        kwargs["max_trades_per_day"] = as_int(data["max_trades_per_day"], f"{source}: max_trades_per_day")
    for key in ("max_loss_per_trade", "max_loss_per_day"):
        if key in data:
            kwargs[key] = _decimal(data[key], key)

    return TradingRules(**kwargs)


def _decimal(value: Any, key: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{key} must be numeric, got {value!r}")


def _time(value: Any, key: str) -> time:
    if isinstance(value, time):
        return value
    # YAML 1.1 reads unquoted 09:00 as a sexagesimal integer (minutes)
    if isinstance(value, int):
        return time(value // 60, value % 60)
    try:
        return datetime.strptime(str(value), "%H:%M").time()
    except ValueError:
        raise ValueError(f"{key} must be HH:MM, got {value!r}")
