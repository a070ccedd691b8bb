"""Risk limit and trading-rule checks.

Pure functions evaluating logged trades against RiskLimits and TradingRules.
All functions are stateless and never mutate their inputs.

Supported Checks:
- Account limits: daily drawdown, total drawdown, profit target, consistency
- Trade rules: trading day, trading hours, trades per day, loss per trade,
  loss per day
- Live status: whether trading is allowed at a moment in time
"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Sequence

from journalytics.libraries.performance.metrics import calculate_max_drawdown, quantize, sort_trades
from journalytics.libraries.performance.models import WEEKDAY_LABELS, Trade
from journalytics.libraries.risk.models import (
    WARN_THRESHOLD,
    LimitStatus,
    RiskLimits,
    RiskStatus,
    RuleViolation,
    TradingRules,
    TradingStatus,
)

_ZERO = Decimal("0")


def _pct_of(amount: Decimal, capital: Decimal) -> Decimal:
    if capital <= 0:
        return quantize(_ZERO)
    return quantize(amount / capital * 100)


def _limit_status(value: Decimal, limit: Decimal) -> LimitStatus:
    if value >= limit:
        return "breach"
    if value >= limit * WARN_THRESHOLD:
        return "warn"
    return "ok"


def evaluate_risk_status(
    trades: Iterable[Trade],
    limits: RiskLimits,
    capital: Decimal,
    today: date | None = None,
) -> RiskStatus:
    """
    Evaluate an account against its risk limits.

    Calculation:
    1. Daily drawdown: today's loss (0 when today is profitable) / capital
    2. Total drawdown: max peak-to-trough drawdown / capital
    3. Profit: total P/L / capital, reached once it meets the target
    4. Consistency: share of trading days whose profit stays under
       max_daily_profit; a few offending days (at most 10% of trading
       days, rounded up) warn, more breach

    Args:
        trades: Account trades in any order
        limits: Configured limits
        capital: Starting capital of the account
        today: Day treated as "today" (defaults to date.today())

    Returns:
        RiskStatus snapshot

    Raises:
        ValueError: If capital is negative

    Example:
        >>> status = evaluate_risk_status(trades, RiskLimits(), Decimal("25000"))
        >>> status.daily_status
        'ok'
    """
    if capital < 0:
        raise ValueError(f"capital must be non-negative, got {capital}")

    today = today or date.today()
    ordered = sort_trades(trades)

    daily_pl: dict[date, Decimal] = {}
    for trade in ordered:
        daily_pl[trade.date] = daily_pl.get(trade.date, _ZERO) + trade.net_pl

    today_pl = daily_pl.get(today, _ZERO)
    total_pl = sum((t.net_pl for t in ordered), _ZERO)
    max_drawdown = calculate_max_drawdown(ordered)

    daily_dd_pct = _pct_of(abs(min(today_pl, _ZERO)), capital)
    total_dd_pct = _pct_of(max_drawdown, capital)
    profit_pct = _pct_of(total_pl, capital)

    max_daily_profit = limits.max_daily_profit(capital)
    trading_days = len(daily_pl)
    inconsistent = sum(1 for pl in daily_pl.values() if pl > max_daily_profit)
    if trading_days:
        consistency_score = quantize(Decimal(trading_days - inconsistent) / trading_days * 100)
    else:
        consistency_score = quantize(Decimal("100"))

    if inconsistent == 0:
        consistency_status: LimitStatus = "ok"
    elif inconsistent <= math.ceil(trading_days * 0.1):
        consistency_status = "warn"
    else:
        consistency_status = "breach"

    return RiskStatus(
        capital=capital,
        today=today,
        today_pl=today_pl,
        total_pl=total_pl,
        max_drawdown=max_drawdown,
        daily_drawdown_pct=daily_dd_pct,
        total_drawdown_pct=total_dd_pct,
        profit_pct=profit_pct,
        profit_target=limits.profit_target(capital),
        max_daily_profit=max_daily_profit,
        trading_days=trading_days,
        inconsistent_days=inconsistent,
        consistency_score=consistency_score,
        daily_status=_limit_status(daily_dd_pct, limits.max_daily_drawdown_pct),
        total_status=_limit_status(total_dd_pct, limits.max_total_drawdown_pct),
        profit_status="reached" if profit_pct >= limits.profit_target_pct else "pending",
        consistency_status=consistency_status,
        daily_pl=daily_pl,
    )


def check_trade_rules(trade: Trade, day_trades: Sequence[Trade], rules: TradingRules) -> list[RuleViolation]:
    """
    List the rules a trade breaks.

    Args:
        trade: Trade being checked
        day_trades: Other trades on the same day logged before it
        rules: Account trading rules

    Returns:
        Violations in rule order; empty when the trade is clean. Trades
        without an entry time are never flagged for trading hours.

    Example:
        >>> rules = TradingRules(max_loss_per_trade=Decimal("100"))
        >>> [v.rule for v in check_trade_rules(losing_trade, [], rules)]
        ['max_loss_per_trade']
    """
    violations = []

    if not rules.allows_day(trade.date):
        violations.append(
            RuleViolation(
                rule="trading_day",
                message=f"{WEEKDAY_LABELS[trade.date.weekday()]} is not a trading day",
            )
        )

    if trade.entry_time is not None and not rules.allows_time(trade.entry_time):
        violations.append(
            RuleViolation(
                rule="trading_hours",
                message=(
                    f"Entry {trade.entry_time:%H:%M} outside trading hours "
                    f"{rules.hours_from:%H:%M}-{rules.hours_to:%H:%M}"
                ),
            )
        )

    same_day = [t for t in day_trades if t.date == trade.date]
    if rules.max_trades_per_day > 0 and len(same_day) + 1 > rules.max_trades_per_day:
        violations.append(
            RuleViolation(
                rule="max_trades_per_day",
                message=f"Trade {len(same_day) + 1} exceeds max {rules.max_trades_per_day} trades per day",
            )
        )

    if rules.max_loss_per_trade > 0 and trade.net_pl <= -rules.max_loss_per_trade:
        violations.append(
            RuleViolation(
                rule="max_loss_per_trade",
                message=f"Loss {abs(trade.net_pl)} reaches max loss per trade {rules.max_loss_per_trade}",
            )
        )

    day_pl = sum((t.net_pl for t in same_day), _ZERO) + trade.net_pl
    if rules.max_loss_per_day > 0 and day_pl <= -rules.max_loss_per_day:
        violations.append(
            RuleViolation(
                rule="max_loss_per_day",
                message=f"Day loss {abs(day_pl)} reaches max loss per day {rules.max_loss_per_day}",
            )
        )

    return violations


def evaluate_trading_status(
    trades: Iterable[Trade],
    rules: TradingRules,
    now: datetime | None = None,
) -> TradingStatus:
    """
    Decide whether trading is allowed at `now`.

    Trading is restricted on a disallowed weekday, outside the hours window,
    once today's trade count reaches max_trades_per_day, or once today's net
    loss reaches max_loss_per_day.
    """
    now = now or datetime.now()
    today = [t for t in trades if t.date == now.date()]
    today_pl = sum((t.net_pl for t in today), _ZERO)

    day_allowed = rules.allows_day(now.date())
    time_allowed = rules.allows_time(now.time())
    trades_limit_hit = rules.max_trades_per_day > 0 and len(today) >= rules.max_trades_per_day
    daily_loss_hit = rules.max_loss_per_day > 0 and today_pl <= -rules.max_loss_per_day

    reasons = []
    if not day_allowed:
        reasons.append("Day not allowed")
    if not time_allowed:
        reasons.append("Outside trading hours")
    if trades_limit_hit:
        reasons.append(f"Max {rules.max_trades_per_day} trades hit")
    if daily_loss_hit:
        reasons.append("Daily loss limit hit")

    return TradingStatus(
        can_trade=not reasons,
        day_allowed=day_allowed,
        time_allowed=time_allowed,
        trades_limit_hit=trades_limit_hit,
        daily_loss_hit=daily_loss_hit,
        today_trades=len(today),
        today_pl=today_pl,
        reasons=tuple(reasons),
    )
