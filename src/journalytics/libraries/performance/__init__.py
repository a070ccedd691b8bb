"""Performance analytics library for logged trades.

This library turns a list of trades into the numbers and series behind the
dashboard, analytics, report and risk views:

1. **Models** (`models.py`): Pydantic data structures
   - Trade: Normalized trade record
   - Stats: Core statistics bundle
   - SeriesPoint, MonthlyPoint, WeekdayPoint, RollingPoint: Chart series
   - HeatmapDay, HourHeatmap, CalendarMonth: Calendar and time-of-day views
   - RBucket, SegmentStats, GradeBucket, StreakSummary, ViolationAnalysis: Segments

2. **Metrics** (`metrics.py`): Pure calculation functions
   - compute_stats: Everything in one pass
   - Ratios: profit factor, payoff, Sharpe, Sortino, Calmar
   - Trade stats: win_rate, expectancy, max_drawdown

3. **Series** (`series.py`): Time-series builders
   - Equity, drawdown, monthly, weekday, rolling, heatmaps, calendar

4. **Segments** (`segments.py`): Distribution and segmentation builders
   - R histogram, instrument/direction/model/account aggregates
   - Grades, streaks, discipline analysis, day summary

5. **Score** (`score.py`): Six-dimension 0-100 composite score

6. **Calculators** (`calculators.py`): Stateful chronological walkers
   - DrawdownCalculator, StreakCalculator

Usage:
    >>> from journalytics.libraries.performance import compute_stats, build_equity_curve
    >>> stats = compute_stats(trades)
    >>> curve = build_equity_curve(trades)

Design Principles:
    - Decimal precision for money
    - Empty input yields None or [], never zero-filled results
    - Zero denominators yield RATIO_SENTINEL or 0, never inf/NaN
    - Builders sort their own input; nothing mutates trades
"""

# Stateful calculators
from journalytics.libraries.performance.calculators import DrawdownCalculator, StreakCalculator

# Pure calculation functions
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
    safe_ratio,
    sort_trades,
)

# Models
from journalytics.libraries.performance.models import (
    RATIO_SENTINEL,
    CalendarDay,
    CalendarMonth,
    DaySummary,
    GradeBucket,
    HeatmapDay,
    HourCell,
    HourHeatmap,
    MistakeCount,
    MonthlyPoint,
    PartitionStats,
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

# Composite score
from journalytics.libraries.performance.score import (
    DEFAULT_SCORE_RANGES,
    build_composite_score,
    calculate_consistency,
)

# Segmentation builders
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

# Time-series builders
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
    build_rolling_rate,
    build_rolling_win_rate,
)

__all__ = [
    # Models
    "Trade",
    "Stats",
    "SeriesPoint",
    "MonthlyPoint",
    "WeekdayPoint",
    "RollingPoint",
    "HeatmapDay",
    "HourCell",
    "HourHeatmap",
    "CalendarDay",
    "CalendarMonth",
    "RBucket",
    "SegmentStats",
    "GradeBucket",
    "StreakSummary",
    "PartitionStats",
    "MistakeCount",
    "ViolationAnalysis",
    "DaySummary",
    "ScoreDimension",
    "RATIO_SENTINEL",
    # Metrics (pure functions)
    "compute_stats",
    "sort_trades",
    "safe_ratio",
    "calculate_win_rate",
    "calculate_profit_factor",
    "calculate_expectancy",
    "calculate_std_dev",
    "calculate_sharpe_ratio",
    "calculate_sortino_ratio",
    "calculate_max_drawdown",
    "calculate_calmar_ratio",
    # Series
    "build_equity_curve",
    "build_drawdown_curve",
    "build_daily_equity_curve",
    "build_monthly_pl",
    "build_day_of_week",
    "build_rolling_win_rate",
    "build_rolling_expectancy",
    "build_rolling_rate",
    "build_daily_heatmap",
    "build_hour_heatmap",
    "build_calendar_month",
    # Segments
    "build_r_histogram",
    "aggregate_by_pair",
    "aggregate_long_short",
    "aggregate_by_model",
    "aggregate_by_account",
    "build_grade_buckets",
    "detect_streaks",
    "analyze_violations",
    "summarize_days",
    # Score
    "DEFAULT_SCORE_RANGES",
    "build_composite_score",
    "calculate_consistency",
    # Calculators (stateful)
    "DrawdownCalculator",
    "StreakCalculator",
]
