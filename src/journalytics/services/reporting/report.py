"""Period reports and the analytics bundle.

ReportBuilder pulls trades for a date range from a trade store and packages
the figures a printed report shows: core statistics, chronological trade
rows, the long/short split and the best/worst day. `build_analytics` runs
every builder over a trade list for the full analytics view.

Both return plain pydantic models; rendering lives in `formatters` and
`writers`.
"""

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator

from journalytics.libraries.performance.metrics import compute_stats, sort_trades
from journalytics.libraries.performance.models import (
    CalendarMonth,
    DaySummary,
    GradeBucket,
    HeatmapDay,
    HourHeatmap,
    MonthlyPoint,
    RBucket,
    RollingPoint,
    ScoreDimension,
    SegmentStats,
    SeriesPoint,
    Stats,
    StreakSummary,
    Trade,
    ViolationAnalysis,
    WeekdayPoint,
)
from journalytics.libraries.performance.score import build_composite_score
from journalytics.libraries.performance.segments import (
    aggregate_by_account,
    aggregate_by_model,
    aggregate_by_pair,
    aggregate_long_short,
    analyze_violations,
    build_grade_buckets,
    build_r_histogram,
    detect_streaks,
    summarize_days,
)
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
    build_rolling_win_rate,
)
from journalytics.services.data.interface import ITradeStore
from journalytics.services.data.models import TradeFilter
from journalytics.system import LoggerFactory
from journalytics.system.config import SystemConfig

logger = LoggerFactory.get_logger()

Period = Literal["daily", "weekly", "monthly", "custom"]


def format_long_date(day: date) -> str:
    """Report header date, e.g. 'Jan 5, 2024'."""
    return f"{day:%b} {day.day}, {day.year}"


class ReportRequest(BaseModel):
    """What to report on: an inclusive date range plus its header text."""

    start_date: date
    end_date: date
    title: str
    subtitle: str | None = None
    period: Period = "custom"
    account_id: int | str | None = None

    @model_validator(mode="after")
    def validate_range(self) -> Self:
        if self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        return self


class Report(BaseModel):
    """
    A period report.

    `stats` is None and `trades` empty when nothing was traded in the range;
    renderers show an empty state for that case.
    """

    title: str
    subtitle: str | None = None
    period: Period
    start_date: date
    end_date: date
    generated_at: datetime
    stats: Stats | None
    trades: list[Trade] = Field(default_factory=list)
    long_short: dict[str, SegmentStats | None] = Field(default_factory=dict)
    days: DaySummary | None = None

    @property
    def is_empty(self) -> bool:
        return self.stats is None


class ReportBuilder:
    """
    Builds period reports from a trade store.

    Example:
        >>> builder = ReportBuilder(CSVTradeStore("trades.csv"))
        >>> report = builder.monthly(2024, 1)
        >>> report.title
        'Monthly Report — January 2024'
    """

    def __init__(
        self,
        store: ITradeStore,
        account_id: int | str | None = None,
        annualization_factor: int = 252,
    ) -> None:
        self.store = store
        self.account_id = account_id
        self.annualization_factor = annualization_factor

    def build(self, request: ReportRequest) -> Report:
        """Fetch the range's trades and compute the report figures."""
        account_id = request.account_id if request.account_id is not None else self.account_id
        trades = self.store.get_trades(
            TradeFilter(account_id=account_id, start_date=request.start_date, end_date=request.end_date)
        )
        ordered = sort_trades(trades)
        stats = compute_stats(ordered, self.annualization_factor)

        report = Report(
            title=request.title,
            subtitle=request.subtitle,
            period=request.period,
            start_date=request.start_date,
            end_date=request.end_date,
            generated_at=datetime.now(),
            stats=stats,
            trades=ordered,
            long_short=aggregate_long_short(ordered) if ordered else {},
            days=summarize_days(ordered),
        )

        logger.info(
            "report.built",
            period=request.period,
            start=str(request.start_date),
            end=str(request.end_date),
            trades=len(ordered),
        )
        return report

    def daily(self, day: date) -> Report:
        return self.build(
            ReportRequest(
                start_date=day,
                end_date=day,
                title=f"Daily Report — {format_long_date(day)}",
                period="daily",
            )
        )

    def weekly(self, start: date, end: date | None = None) -> Report:
        """Seven days starting at `start` unless `end` is given."""
        end = end or start + timedelta(days=6)
        return self.build(
            ReportRequest(
                start_date=start,
                end_date=end,
                title=f"Weekly Report — {format_long_date(start)} to {format_long_date(end)}",
                period="weekly",
            )
        )

    def monthly(self, year: int, month: int) -> Report:
        last_day = calendar.monthrange(year, month)[1]
        return self.build(
            ReportRequest(
                start_date=date(year, month, 1),
                end_date=date(year, month, last_day),
                title=f"Monthly Report — {calendar.month_name[month]} {year}",
                period="monthly",
            )
        )

    def custom(self, start: date, end: date) -> Report:
        return self.build(
            ReportRequest(
                start_date=start,
                end_date=end,
                title=f"Custom Report — {format_long_date(start)} to {format_long_date(end)}",
                period="custom",
            )
        )


class AnalyticsBundle(BaseModel):
    """Every analytics builder's output for one trade set."""

    trade_count: int
    stats: Stats | None
    score: list[ScoreDimension] | None
    equity_curve: list[SeriesPoint]
    drawdown_curve: list[SeriesPoint]
    daily_equity_curve: list[SeriesPoint]
    monthly_pl: list[MonthlyPoint]
    day_of_week: list[WeekdayPoint]
    rolling_win_rate: list[RollingPoint]
    rolling_expectancy: list[RollingPoint]
    daily_heatmap: list[HeatmapDay]
    hour_heatmap: HourHeatmap | None
    calendar: CalendarMonth | None
    r_histogram: list[RBucket]
    pairs: list[SegmentStats]
    long_short: dict[str, SegmentStats | None]
    models: list[SegmentStats]
    accounts: list[SegmentStats]
    grades: list[GradeBucket]
    streaks: StreakSummary | None
    violations: ViolationAnalysis | None
    days: DaySummary | None

    @property
    def is_empty(self) -> bool:
        return self.trade_count == 0


def build_analytics(
    trades: list[Trade],
    config: SystemConfig | None = None,
    today: date | None = None,
    starting_balance: Decimal | None = None,
) -> AnalyticsBundle:
    """
    Run every builder over one trade set.

    Args:
        trades: Trades in any order
        config: Windows and score ranges (defaults when None)
        today: End of the daily heatmap window and month shown in the
               calendar (defaults to the latest trade date)
        starting_balance: Balance for the daily equity curve (defaults to
                          the configured risk capital)

    Returns:
        AnalyticsBundle; empty input gives None/[] everywhere
    """
    config = config or SystemConfig()
    ordered = sort_trades(trades)
    settings = config.analytics

    if today is None and ordered:
        today = ordered[-1].date
    balance = starting_balance if starting_balance is not None else config.risk.capital

    stats = compute_stats(ordered, settings.annualization_factor)

    bundle = AnalyticsBundle(
        trade_count=len(ordered),
        stats=stats,
        score=build_composite_score(stats, config.score_bounds()),
        equity_curve=build_equity_curve(ordered),
        drawdown_curve=build_drawdown_curve(ordered),
        daily_equity_curve=build_daily_equity_curve(ordered, balance),
        monthly_pl=build_monthly_pl(ordered),
        day_of_week=build_day_of_week(ordered),
        rolling_win_rate=build_rolling_win_rate(ordered, settings.rolling_window),
        rolling_expectancy=build_rolling_expectancy(ordered, settings.rolling_window),
        daily_heatmap=build_daily_heatmap(ordered, settings.heatmap_days, today),
        hour_heatmap=build_hour_heatmap(ordered),
        calendar=build_calendar_month(ordered, today.year, today.month) if ordered and today else None,
        r_histogram=build_r_histogram(ordered),
        pairs=aggregate_by_pair(ordered),
        long_short=aggregate_long_short(ordered) if ordered else {},
        models=aggregate_by_model(ordered),
        accounts=aggregate_by_account(ordered),
        grades=build_grade_buckets(ordered),
        streaks=detect_streaks(ordered),
        violations=analyze_violations(ordered, settings.rolling_window, settings.top_mistakes),
        days=summarize_days(ordered),
    )

    logger.debug("analytics.built", trades=len(ordered))
    return bundle
