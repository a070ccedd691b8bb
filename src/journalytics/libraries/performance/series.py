"""Time-series builders.

Each builder sorts its input chronologically and returns a list of points
for a chart (empty list for empty input). Labels use the trade's own local
calendar date; no timezone conversion happens here.
"""

import calendar
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from journalytics.libraries.performance.calculators import DrawdownCalculator
from journalytics.libraries.performance.metrics import calculate_expectancy, calculate_win_rate, quantize, sort_trades
from journalytics.libraries.performance.models import (
    WEEKDAY_LABELS,
    CalendarDay,
    CalendarMonth,
    HeatmapDay,
    HourCell,
    HourHeatmap,
    MonthlyPoint,
    RollingPoint,
    SeriesPoint,
    Trade,
    WeekdayPoint,
)

_ZERO = Decimal("0")

DEFAULT_ROLLING_WINDOW = 10
DEFAULT_HEATMAP_DAYS = 90


def format_day_label(day: date) -> str:
    """Short chart label, e.g. 'Jan 5'."""
    return f"{day:%b} {day.day}"


def build_equity_curve(trades: Iterable[Trade]) -> list[SeriesPoint]:
    """
    Cumulative net P/L after each trade.

    One point per trade, so several trades on one day give several points.
    The last value always equals the sum of all net P/L.
    """
    points = []
    cumulative = _ZERO
    for trade in sort_trades(trades):
        cumulative += trade.net_pl
        points.append(SeriesPoint(label=format_day_label(trade.date), value=cumulative, date=trade.date))
    return points


def build_drawdown_curve(trades: Iterable[Trade]) -> list[SeriesPoint]:
    """Drawdown from the running peak after each trade, as a value <= 0."""
    calc = DrawdownCalculator()
    points = []
    for trade in sort_trades(trades):
        drawdown = calc.update(trade.net_pl)
        points.append(SeriesPoint(label=format_day_label(trade.date), value=-drawdown, date=trade.date))
    return points


def build_daily_equity_curve(trades: Iterable[Trade], starting_balance: Decimal) -> list[SeriesPoint]:
    """
    Account balance at the end of each trading day.

    The first point is labeled 'Start' and carries the starting balance.
    Returns [] when there are no trades.
    """
    by_day: dict[date, Decimal] = {}
    for trade in sort_trades(trades):
        by_day[trade.date] = by_day.get(trade.date, _ZERO) + trade.net_pl

    if not by_day:
        return []

    balance = starting_balance
    points = [SeriesPoint(label="Start", value=starting_balance)]
    for day, pl in by_day.items():
        balance += pl
        points.append(SeriesPoint(label=format_day_label(day), value=balance, date=day))
    return points


def build_monthly_pl(trades: Iterable[Trade]) -> list[MonthlyPoint]:
    """Net P/L per calendar month in chronological order, with a running total."""
    buckets: dict[tuple[int, int], list[Trade]] = {}
    for trade in sort_trades(trades):
        buckets.setdefault((trade.date.year, trade.date.month), []).append(trade)

    points = []
    cumulative = _ZERO
    for (year, month), month_trades in buckets.items():
        pl = sum((t.net_pl for t in month_trades), _ZERO)
        cumulative += pl
        points.append(
            MonthlyPoint(
                month=f"{year:04d}-{month:02d}",
                label=f"{calendar.month_abbr[month]} {year % 100:02d}",
                pl=pl,
                cumulative_pl=cumulative,
                trade_count=len(month_trades),
            )
        )
    return points


def build_day_of_week(trades: Iterable[Trade]) -> list[WeekdayPoint]:
    """
    Average net P/L per weekday, Monday first.

    Always seven entries; weekdays without trades report 0. Returns [] when
    there are no trades at all.
    """
    totals = [_ZERO] * 7
    counts = [0] * 7
    seen = False
    for trade in trades:
        seen = True
        weekday = trade.date.weekday()
        totals[weekday] += trade.net_pl
        counts[weekday] += 1

    if not seen:
        return []

    return [
        WeekdayPoint(
            weekday=i,
            label=WEEKDAY_LABELS[i],
            avg_pl=quantize(totals[i] / counts[i]) if counts[i] else _ZERO,
            total_pl=totals[i],
            trade_count=counts[i],
        )
        for i in range(7)
    ]


def _rolling(ordered: Sequence[Trade], window: int) -> Iterable[tuple[int, Sequence[Trade]]]:
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    for end in range(window, len(ordered) + 1):
        yield end, ordered[end - window : end]


def build_rolling_win_rate(trades: Iterable[Trade], window: int = DEFAULT_ROLLING_WINDOW) -> list[RollingPoint]:
    """
    Win rate over each trailing window of `window` trades.

    Produces len(trades) - window + 1 points, or none when there are fewer
    trades than the window.
    """
    ordered = sort_trades(trades)
    return [RollingPoint(index=end, value=calculate_win_rate(chunk)) for end, chunk in _rolling(ordered, window)]


def build_rolling_expectancy(trades: Iterable[Trade], window: int = DEFAULT_ROLLING_WINDOW) -> list[RollingPoint]:
    """Expectancy over each trailing window of `window` trades."""
    ordered = sort_trades(trades)
    return [RollingPoint(index=end, value=calculate_expectancy(chunk)) for end, chunk in _rolling(ordered, window)]


def build_rolling_rate(
    trades: Iterable[Trade],
    predicate: Callable[[Trade], bool],
    window: int = DEFAULT_ROLLING_WINDOW,
) -> list[RollingPoint]:
    """Percentage of trades matching `predicate` over each trailing window."""
    ordered = sort_trades(trades)
    return [
        RollingPoint(index=end, value=quantize(Decimal(sum(1 for t in chunk if predicate(t))) / window * 100))
        for end, chunk in _rolling(ordered, window)
    ]


def build_daily_heatmap(
    trades: Iterable[Trade],
    days: int = DEFAULT_HEATMAP_DAYS,
    end_date: date | None = None,
) -> list[HeatmapDay]:
    """
    Net P/L per calendar day over the trailing `days` days ending at `end_date`.

    Days without trades have pl=None, which is distinct from a breakeven day
    (pl == 0). Returns [] when there are no trades at all.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")

    day_pl: dict[date, Decimal] = defaultdict(lambda: _ZERO)
    day_count: dict[date, int] = defaultdict(int)
    for trade in trades:
        day_pl[trade.date] += trade.net_pl
        day_count[trade.date] += 1

    if not day_count:
        return []

    end = end_date or date.today()
    start = end - timedelta(days=days - 1)
    cells = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        if day in day_count:
            cells.append(HeatmapDay(date=day, pl=day_pl[day], trade_count=day_count[day]))
        else:
            cells.append(HeatmapDay(date=day, pl=None))
    return cells


def build_hour_heatmap(trades: Iterable[Trade]) -> HourHeatmap | None:
    """
    Summed P/L and trade count per (weekday, entry hour).

    Trades without an entry time are left out entirely. Best and worst cells
    are chosen among cells that have trades. Returns None when no trade has
    an entry time.
    """
    cells = [HourCell(weekday=w, hour=h) for w in range(7) for h in range(24)]
    pl = [_ZERO] * len(cells)
    counts = [0] * len(cells)
    excluded = 0

    for trade in trades:
        if trade.entry_time is None:
            excluded += 1
            continue
        idx = trade.date.weekday() * 24 + trade.entry_time.hour
        pl[idx] += trade.net_pl
        counts[idx] += 1

    counted = sum(counts)
    if counted == 0:
        return None

    cells = [cell.model_copy(update={"pl": pl[i], "trade_count": counts[i]}) for i, cell in enumerate(cells)]
    active = [c for c in cells if c.trade_count > 0]

    return HourHeatmap(
        cells=cells,
        best=max(active, key=lambda c: c.pl),
        worst=min(active, key=lambda c: c.pl),
        trades_counted=counted,
        trades_excluded=excluded,
    )


def build_calendar_month(trades: Iterable[Trade], year: int, month: int) -> CalendarMonth:
    """
    Daily P/L for one calendar month.

    Trades outside the month are ignored. `days` lists only days with trades,
    in date order.
    """
    by_day: dict[date, list[Trade]] = {}
    for trade in sort_trades(trades):
        if trade.date.year == year and trade.date.month == month:
            by_day.setdefault(trade.date, []).append(trade)

    days = [
        CalendarDay(
            date=day,
            pl=sum((t.net_pl for t in day_trades), _ZERO),
            trade_count=len(day_trades),
            wins=sum(1 for t in day_trades if t.is_winner),
        )
        for day, day_trades in by_day.items()
    ]
    values = [d.pl for d in days]

    return CalendarMonth(
        year=year,
        month=month,
        label=f"{calendar.month_name[month]} {year}",
        days=days,
        trading_days=len(days),
        green_days=sum(1 for v in values if v > 0),
        total_pl=sum(values, _ZERO),
        best_day=max(values) if values else None,
        worst_day=min(values) if values else None,
    )
