"""Performance analytics data models.

Pydantic models for the trade record consumed by the engine and for every
structure the builders return. Rendering layers (console tables, JSON export,
charts) consume these models directly.
"""

from datetime import date as Date
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Direction = Literal["Long", "Short"]
Grade = Literal["A+", "A", "B", "C", "F"]

DIRECTIONS: tuple[Direction, ...] = ("Long", "Short")
GRADES: tuple[Grade, ...] = ("A+", "A", "B", "C", "F")
WEEKDAY_LABELS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Stands in for an infinite ratio (numerator positive, denominator zero).
RATIO_SENTINEL = Decimal("9999")


class Trade(BaseModel):
    """
    A logged trade, already normalized at the store boundary.

    Only `net_pl` decides win/loss/breakeven. `r_multiple` is either given or
    absent and is never derived from price levels.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str
    date: Date
    pair: str
    direction: Direction
    net_pl: Decimal
    entry_time: time | None = None
    r_multiple: Decimal | None = None
    rule_violation: bool = False
    mistake_tag: str | None = None
    trade_grade: Grade | None = None
    model_id: int | str | None = None
    model_name: str | None = None
    account_id: int | str | None = None
    account_name: str | None = None
    created_at: datetime | None = None

    @field_validator("created_at")
    @classmethod
    def naive_utc_created_at(cls, value: datetime | None) -> datetime | None:
        """Store aware timestamps as naive UTC so every pair of trades is comparable."""
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @property
    def is_winner(self) -> bool:
        """Trade was profitable."""
        return self.net_pl > 0

    @property
    def is_loser(self) -> bool:
        """Trade lost money."""
        return self.net_pl < 0

    @property
    def is_breakeven(self) -> bool:
        """Trade closed flat."""
        return self.net_pl == 0

    @property
    def outcome(self) -> Literal["win", "loss", "breakeven"]:
        if self.net_pl > 0:
            return "win"
        if self.net_pl < 0:
            return "loss"
        return "breakeven"


class Stats(BaseModel):
    """
    Core statistics over a non-empty trade set.

    Monetary values are in account currency. `max_drawdown` is a positive
    figure; renderers show it as a loss. R statistics are None when no trade
    carries an R multiple.
    """

    total_trades: int
    wins: int
    losses: int
    breakeven: int
    win_rate: Decimal  # Percentage 0-100
    total_pl: Decimal
    gross_win: Decimal
    gross_loss: Decimal  # Absolute value
    avg_win: Decimal
    avg_loss: Decimal  # Absolute value
    profit_factor: Decimal
    payoff_ratio: Decimal
    expectancy: Decimal
    avg_r: Decimal | None
    std_dev_r: Decimal | None
    best_r: Decimal | None
    worst_r: Decimal | None
    r_count: int
    std_dev: Decimal  # Population standard deviation of net P/L
    consistency: Decimal  # 0-100, from the unrounded std dev
    sharpe: Decimal
    sortino: Decimal
    max_drawdown: Decimal
    calmar: Decimal
    best_trade: Decimal
    worst_trade: Decimal

    @property
    def mean_pl(self) -> Decimal:
        """Average net P/L per trade."""
        return self.total_pl / self.total_trades


class SeriesPoint(BaseModel):
    """Single labeled point of a chart series."""

    label: str
    value: Decimal
    date: Date | None = None


class MonthlyPoint(BaseModel):
    """Net P/L of one calendar month with the running total across months."""

    month: str  # "2024-01"
    label: str  # "Jan 24"
    pl: Decimal
    cumulative_pl: Decimal
    trade_count: int


class WeekdayPoint(BaseModel):
    """Average net P/L for one weekday (0 when the weekday has no trades)."""

    weekday: int  # 0=Monday .. 6=Sunday
    label: str
    avg_pl: Decimal
    total_pl: Decimal
    trade_count: int


class RollingPoint(BaseModel):
    """Metric over the trailing window ending at trade number `index` (1-based)."""

    index: int
    value: Decimal


class HeatmapDay(BaseModel):
    """One calendar day of the daily P/L heatmap. `pl` is None on days without trades."""

    date: Date
    pl: Decimal | None
    trade_count: int = 0

    @property
    def has_trades(self) -> bool:
        return self.pl is not None


class HourCell(BaseModel):
    """Summed P/L and trade count for a (weekday, hour) pair."""

    weekday: int
    hour: int
    pl: Decimal = Decimal("0")
    trade_count: int = 0


class HourHeatmap(BaseModel):
    """Weekday x hour grid built from trades that carry an entry time."""

    cells: list[HourCell]
    best: HourCell | None
    worst: HourCell | None
    trades_counted: int
    trades_excluded: int

    def cell(self, weekday: int, hour: int) -> HourCell:
        return self.cells[weekday * 24 + hour]


class RBucket(BaseModel):
    """R-multiple histogram bucket covering (low, high]. None marks an open end."""

    label: str
    low: Decimal | None
    high: Decimal | None
    count: int = 0
    positive: bool

    def contains(self, r: Decimal) -> bool:
        above = self.low is None or r > self.low
        below = self.high is None or r <= self.high
        return above and below


class SegmentStats(BaseModel):
    """Aggregate for a group of trades (instrument, direction, model, account)."""

    key: str
    label: str
    trades: int
    wins: int
    losses: int
    win_rate: Decimal
    total_pl: Decimal
    avg_pl: Decimal
    avg_win: Decimal
    avg_loss: Decimal
    profit_factor: Decimal
    payoff_ratio: Decimal
    expectancy: Decimal
    avg_r: Decimal | None


class GradeBucket(BaseModel):
    """Trades with one grade. `avg_pl` is None when the grade has no trades."""

    grade: Grade
    count: int
    total_pl: Decimal
    avg_pl: Decimal | None


class StreakSummary(BaseModel):
    """
    Consecutive-outcome runs.

    `current` is positive for an ongoing win streak, negative for an ongoing
    loss streak and 0 when the latest trade was breakeven.
    """

    best_win_streak: int
    worst_loss_streak: int
    avg_win_streak: Decimal
    avg_loss_streak: Decimal
    current: int


class PartitionStats(BaseModel):
    """Average outcome of one side of a partition."""

    trades: int
    total_pl: Decimal
    avg_pl: Decimal
    win_rate: Decimal


class MistakeCount(BaseModel):
    tag: str
    count: int


class ViolationAnalysis(BaseModel):
    """
    Discipline analysis.

    `hidden_cost` is the summed net P/L of violated trades. It is reported as
    is, so a positive value means violations were net profitable.
    """

    violation_count: int
    violated: PartitionStats | None
    clean: PartitionStats | None
    violation_rate: list[RollingPoint] = Field(default_factory=list)
    top_mistakes: list[MistakeCount] = Field(default_factory=list)
    hidden_cost: Decimal


class DaySummary(BaseModel):
    """Per-calendar-day outcome summary."""

    trading_days: int
    green_days: int
    red_days: int
    flat_days: int
    best_day: Decimal
    best_day_date: Date
    worst_day: Decimal
    worst_day_date: Date


class CalendarDay(BaseModel):
    date: Date
    pl: Decimal
    trade_count: int
    wins: int


class CalendarMonth(BaseModel):
    """Month view of daily P/L. Best/worst day are None when nothing was traded."""

    year: int
    month: int
    label: str  # "January 2024"
    days: list[CalendarDay]
    trading_days: int
    green_days: int
    total_pl: Decimal
    best_day: Decimal | None
    worst_day: Decimal | None


class ScoreDimension(BaseModel):
    """One axis of the composite score: the raw metric and its 0-100 score."""

    name: str
    value: Decimal
    score: Decimal
