"""Distribution and segmentation builders.

Group trades along one dimension (R multiple, instrument, direction, model,
account, grade, outcome run, discipline flag, calendar day) and summarize each
group with the same formulas `metrics` uses for the whole set.
"""

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from journalytics.libraries.performance.calculators import StreakCalculator
from journalytics.libraries.performance.metrics import (
    calculate_expectancy,
    calculate_win_rate,
    quantize,
    safe_ratio,
    sort_trades,
)
from journalytics.libraries.performance.models import (
    DIRECTIONS,
    GRADES,
    DaySummary,
    GradeBucket,
    MistakeCount,
    PartitionStats,
    RBucket,
    SegmentStats,
    StreakSummary,
    Trade,
    ViolationAnalysis,
)
from journalytics.libraries.performance.series import DEFAULT_ROLLING_WINDOW, build_rolling_rate

_ZERO = Decimal("0")

DEFAULT_TOP_MISTAKES = 5

# (label, low, high) covering (low, high]; None is an open end.
R_BUCKET_EDGES: tuple[tuple[str, Decimal | None, Decimal | None], ...] = (
    ("≤ -2R", None, Decimal("-2")),
    ("-2 to -1R", Decimal("-2"), Decimal("-1")),
    ("-1 to 0R", Decimal("-1"), Decimal("0")),
    ("0 to 1R", Decimal("0"), Decimal("1")),
    ("1 to 2R", Decimal("1"), Decimal("2")),
    ("2 to 3R", Decimal("2"), Decimal("3")),
    ("> 3R", Decimal("3"), None),
)


def build_r_histogram(trades: Iterable[Trade]) -> list[RBucket]:
    """
    Count trades per R-multiple bucket.

    Buckets are contiguous, so every trade with an R multiple lands in
    exactly one. Trades without R are left out. A 0R trade counts in
    '-1 to 0R'.
    """
    buckets = [
        RBucket(label=label, low=low, high=high, positive=low is not None and low >= 0)
        for label, low, high in R_BUCKET_EDGES
    ]
    counts = [0] * len(buckets)
    for trade in trades:
        if trade.r_multiple is None:
            continue
        for i, bucket in enumerate(buckets):
            if bucket.contains(trade.r_multiple):
                counts[i] += 1
                break
    return [bucket.model_copy(update={"count": counts[i]}) for i, bucket in enumerate(buckets)]


def _segment_stats(key: str, label: str, trades: Sequence[Trade]) -> SegmentStats:
    winners = [t.net_pl for t in trades if t.is_winner]
    losers = [t.net_pl for t in trades if t.is_loser]
    gross_win = sum(winners, _ZERO)
    gross_loss = abs(sum(losers, _ZERO))
    avg_win = gross_win / len(winners) if winners else _ZERO
    avg_loss = gross_loss / len(losers) if losers else _ZERO
    total_pl = sum((t.net_pl for t in trades), _ZERO)
    r_values = [t.r_multiple for t in trades if t.r_multiple is not None]

    return SegmentStats(
        key=key,
        label=label,
        trades=len(trades),
        wins=len(winners),
        losses=len(losers),
        win_rate=calculate_win_rate(trades),
        total_pl=total_pl,
        avg_pl=quantize(total_pl / len(trades)),
        avg_win=quantize(avg_win),
        avg_loss=quantize(avg_loss),
        profit_factor=safe_ratio(gross_win, gross_loss),
        payoff_ratio=safe_ratio(avg_win, avg_loss),
        expectancy=calculate_expectancy(trades),
        avg_r=quantize(sum(r_values, _ZERO) / len(r_values)) if r_values else None,
    )


def _aggregate(
    trades: Iterable[Trade],
    key_fn: Callable[[Trade], object | None],
    label_fn: Callable[[Trade], str],
) -> list[SegmentStats]:
    groups: dict[str, list[Trade]] = {}
    labels: dict[str, str] = {}
    for trade in trades:
        key = key_fn(trade)
        if key is None:
            continue
        key = str(key)
        groups.setdefault(key, []).append(trade)
        labels.setdefault(key, label_fn(trade))

    segments = [_segment_stats(key, labels[key], group) for key, group in groups.items()]
    return sorted(segments, key=lambda s: s.total_pl, reverse=True)


def aggregate_by_pair(trades: Iterable[Trade]) -> list[SegmentStats]:
    """Per-instrument aggregates, best total P/L first."""
    return _aggregate(trades, lambda t: t.pair, lambda t: t.pair)


def aggregate_by_model(trades: Iterable[Trade]) -> list[SegmentStats]:
    """Per-model aggregates, best total P/L first. Trades without a model are skipped."""
    return _aggregate(trades, lambda t: t.model_id, lambda t: t.model_name or str(t.model_id))


def aggregate_by_account(trades: Iterable[Trade]) -> list[SegmentStats]:
    """Per-account aggregates, best total P/L first. Trades without an account are skipped."""
    return _aggregate(trades, lambda t: t.account_id, lambda t: t.account_name or str(t.account_id))


def aggregate_long_short(trades: Iterable[Trade]) -> dict[str, SegmentStats | None]:
    """
    Aggregate per direction.

    Returns:
        {"Long": ..., "Short": ...}; a side without trades maps to None
        instead of a zero-filled aggregate.
    """
    sides: dict[str, list[Trade]] = {direction: [] for direction in DIRECTIONS}
    for trade in trades:
        sides[trade.direction].append(trade)
    return {
        direction: _segment_stats(direction, direction, side) if side else None
        for direction, side in sides.items()
    }


def build_grade_buckets(trades: Iterable[Trade]) -> list[GradeBucket]:
    """Count and P/L per grade, always in A+, A, B, C, F order. Ungraded trades are skipped."""
    by_grade: dict[str, list[Decimal]] = {grade: [] for grade in GRADES}
    for trade in trades:
        if trade.trade_grade is not None:
            by_grade[trade.trade_grade].append(trade.net_pl)

    buckets = []
    for grade in GRADES:
        pls = by_grade[grade]
        total = sum(pls, _ZERO)
        buckets.append(
            GradeBucket(
                grade=grade,
                count=len(pls),
                total_pl=total,
                avg_pl=quantize(total / len(pls)) if pls else None,
            )
        )
    return buckets


def detect_streaks(trades: Iterable[Trade]) -> StreakSummary | None:
    """
    Win and loss runs in chronological order.

    Example:
        >>> detect_streaks(trades)  # +, +, 0, +, -
        StreakSummary(best_win_streak=2, worst_loss_streak=1, ..., current=-1)
    """
    ordered = sort_trades(trades)
    if not ordered:
        return None

    calc = StreakCalculator()
    for trade in ordered:
        calc.update(trade.net_pl)

    win_streaks = calc.win_streaks
    loss_streaks = calc.loss_streaks
    return StreakSummary(
        best_win_streak=max(win_streaks, default=0),
        worst_loss_streak=max(loss_streaks, default=0),
        avg_win_streak=quantize(Decimal(sum(win_streaks)) / len(win_streaks)) if win_streaks else quantize(_ZERO),
        avg_loss_streak=quantize(Decimal(sum(loss_streaks)) / len(loss_streaks)) if loss_streaks else quantize(_ZERO),
        current=calc.current,
    )


def _partition_stats(trades: Sequence[Trade]) -> PartitionStats | None:
    if not trades:
        return None
    total = sum((t.net_pl for t in trades), _ZERO)
    return PartitionStats(
        trades=len(trades),
        total_pl=total,
        avg_pl=quantize(total / len(trades)),
        win_rate=calculate_win_rate(trades),
    )


def analyze_violations(
    trades: Iterable[Trade],
    window: int = DEFAULT_ROLLING_WINDOW,
    top_n: int = DEFAULT_TOP_MISTAKES,
) -> ViolationAnalysis | None:
    """
    Compare rule-violating trades against clean ones.

    Args:
        trades: Trades in any order
        window: Trailing window for the rolling violation rate
        top_n: Number of mistake tags to report

    Returns:
        ViolationAnalysis, or None when there are no trades. Mistake tags are
        counted over violated trades only, most frequent first (ties keep
        first-seen order).
    """
    ordered = sort_trades(trades)
    if not ordered:
        return None

    violated = [t for t in ordered if t.rule_violation]
    clean = [t for t in ordered if not t.rule_violation]
    mistakes = Counter(t.mistake_tag for t in violated if t.mistake_tag)

    return ViolationAnalysis(
        violation_count=len(violated),
        violated=_partition_stats(violated),
        clean=_partition_stats(clean),
        violation_rate=build_rolling_rate(ordered, lambda t: t.rule_violation, window),
        top_mistakes=[MistakeCount(tag=tag, count=count) for tag, count in mistakes.most_common(top_n)],
        hidden_cost=sum((t.net_pl for t in violated), _ZERO),
    )


def summarize_days(trades: Iterable[Trade]) -> DaySummary | None:
    """Net P/L per calendar day reduced to green/red counts and the extremes."""
    by_day: dict[date, Decimal] = {}
    for trade in sort_trades(trades):
        by_day[trade.date] = by_day.get(trade.date, _ZERO) + trade.net_pl
    if not by_day:
        return None

    best_date = max(by_day, key=lambda d: by_day[d])
    worst_date = min(by_day, key=lambda d: by_day[d])
    values = list(by_day.values())
    return DaySummary(
        trading_days=len(values),
        green_days=sum(1 for v in values if v > 0),
        red_days=sum(1 for v in values if v < 0),
        flat_days=sum(1 for v in values if v == 0),
        best_day=by_day[best_date],
        best_day_date=best_date,
        worst_day=by_day[worst_date],
        worst_day_date=worst_date,
    )
