"""Risk and trading-rule models.

Immutable data structures for account risk limits, discipline rules and the
results of checking trades against them.

Design Principles:
- Immutable (frozen dataclasses)
- Comprehensive validation in __post_init__
- Percentages are of account capital, expressed 0-100
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from typing import Literal

from journalytics.libraries.performance.models import WEEKDAY_LABELS

LimitStatus = Literal["ok", "warn", "breach"]
TargetStatus = Literal["reached", "pending"]

# Share of a limit at which a metric is flagged as a warning.
WARN_THRESHOLD = Decimal("0.7")


@dataclass(frozen=True)
class RiskLimits:
    """
    Account risk limits (funded-account style).

    Attributes:
        max_daily_drawdown_pct: Max loss on one day as % of capital
        max_total_drawdown_pct: Max peak-to-trough drawdown as % of capital
        profit_target_pct: Profit goal as % of capital
        consistency_pct: Max profit on one day as % of the profit target

    Example:
        >>> limits = RiskLimits(max_daily_drawdown_pct=Decimal("2"))
        >>> limits.profit_target(Decimal("25000"))
        Decimal('2500')
    """

    max_daily_drawdown_pct: Decimal = Decimal("2")
    max_total_drawdown_pct: Decimal = Decimal("10")
    profit_target_pct: Decimal = Decimal("10")
    consistency_pct: Decimal = Decimal("40")

    def __post_init__(self) -> None:
        """Validate limits."""
        for name in ("max_daily_drawdown_pct", "max_total_drawdown_pct", "profit_target_pct", "consistency_pct"):
            value = getattr(self, name)
            if not Decimal("0") < value <= Decimal("100"):
                raise ValueError(f"{name} must be in (0, 100], got {value}")

    def profit_target(self, capital: Decimal) -> Decimal:
        """Profit target in account currency."""
        return capital * self.profit_target_pct / 100

    def max_daily_profit(self, capital: Decimal) -> Decimal:
        """Largest single-day profit that still counts as consistent."""
        return self.profit_target(capital) * self.consistency_pct / 100


@dataclass(frozen=True)
class RiskStatus:
    """
    Snapshot of an account against its RiskLimits.

    Drawdown and profit figures are percentages of capital. `daily_pl` maps
    each trading day to its net P/L in date order.
    """

    capital: Decimal
    today: date
    today_pl: Decimal
    total_pl: Decimal
    max_drawdown: Decimal
    daily_drawdown_pct: Decimal
    total_drawdown_pct: Decimal
    profit_pct: Decimal
    profit_target: Decimal
    max_daily_profit: Decimal
    trading_days: int
    inconsistent_days: int
    consistency_score: Decimal
    daily_status: LimitStatus
    total_status: LimitStatus
    profit_status: TargetStatus
    consistency_status: LimitStatus
    daily_pl: dict[date, Decimal] = field(default_factory=dict)

    @property
    def is_breached(self) -> bool:
        """Any limit breached."""
        return "breach" in (self.daily_status, self.total_status, self.consistency_status)


@dataclass(frozen=True)
class TradingRules:
    """
    Discipline rules for one account.

    A numeric limit of zero disables that rule.

    Attributes:
        trading_days: Allowed weekdays ("Mon".."Sun")
        hours_enabled: Whether the trading-hours window applies
        hours_from: Window start (inclusive)
        hours_to: Window end (inclusive)
        max_trades_per_day: Max trades per calendar day
        max_loss_per_trade: Max loss on a single trade (positive amount)
        max_loss_per_day: Max net loss per calendar day (positive amount)
    """

    trading_days: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri")
    hours_enabled: bool = True
    hours_from: time = time(9, 0)
    hours_to: time = time(16, 0)
    max_trades_per_day: int = 0
    max_loss_per_trade: Decimal = Decimal("0")
    max_loss_per_day: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        """Validate rules."""
        unknown = [d for d in self.trading_days if d not in WEEKDAY_LABELS]
        if unknown:
            raise ValueError(f"trading_days must be among {list(WEEKDAY_LABELS)}, got {unknown}")

        if self.hours_enabled and self.hours_from > self.hours_to:
            raise ValueError(f"hours_from must not be after hours_to, got {self.hours_from} > {self.hours_to}")

        if self.max_trades_per_day < 0:
            raise ValueError(f"max_trades_per_day must be >= 0, got {self.max_trades_per_day}")

        if self.max_loss_per_trade < 0:
            raise ValueError(f"max_loss_per_trade must be >= 0, got {self.max_loss_per_trade}")

        if self.max_loss_per_day < 0:
            raise ValueError(f"max_loss_per_day must be >= 0, got {self.max_loss_per_day}")

    def allows_day(self, day: date) -> bool:
        return WEEKDAY_LABELS[day.weekday()] in self.trading_days

    def allows_time(self, moment: time) -> bool:
        if not self.hours_enabled:
            return True
        return self.hours_from <= moment.replace(second=0, microsecond=0) <= self.hours_to


@dataclass(frozen=True)
class RuleViolation:
    """
    One rule a trade breaks.

    Attributes:
        rule: "trading_day", "trading_hours", "max_trades_per_day",
              "max_loss_per_trade" or "max_loss_per_day"
        message: Human-readable explanation
    """

    rule: str
    message: str


@dataclass(frozen=True)
class TradingStatus:
    """Whether trading is allowed at a given moment, and why not."""

    can_trade: bool
    day_allowed: bool
    time_allowed: bool
    trades_limit_hit: bool
    daily_loss_hit: bool
    today_trades: int
    today_pl: Decimal
    reasons: tuple[str, ...] = ()
