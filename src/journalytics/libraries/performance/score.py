"""Composite performance score.

Six metrics from `Stats` are each mapped linearly onto 0-100 between a
configurable lower and upper bound, then clamped. Scores are rounded to one
decimal place.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from journalytics.libraries.performance.models import ScoreDimension, Stats

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_TENTH = Decimal("0.1")

# key -> (lower bound, upper bound)
DEFAULT_SCORE_RANGES: dict[str, tuple[Decimal, Decimal]] = {
    "win_rate": (Decimal("20"), Decimal("85")),
    "profit_factor": (Decimal("0.5"), Decimal("3")),
    "expectancy": (Decimal("-300"), Decimal("500")),
    "sharpe": (Decimal("-2"), Decimal("3")),
    "consistency": (Decimal("0"), Decimal("100")),
    "payoff": (Decimal("0.5"), Decimal("4")),
}

DIMENSION_NAMES: dict[str, str] = {
    "win_rate": "Win Rate",
    "profit_factor": "Profit Factor",
    "expectancy": "Expectancy",
    "sharpe": "Sharpe",
    "consistency": "Consistency",
    "payoff": "Payoff",
}


def calculate_consistency(mean_pl: Decimal, std_dev: Decimal) -> Decimal:
    """
    Consistency = max(1 - std/mean, 0) x 100 for a profitable mean.

    A mean at or below zero scores 0; a positive mean with no dispersion
    scores 100.

    Example:
        >>> calculate_consistency(Decimal("50"), Decimal("25"))
        Decimal('50.00')
    """
    if mean_pl <= 0:
        return _ZERO.quantize(Decimal("0.01"))
    if std_dev == 0:
        return _HUNDRED.quantize(Decimal("0.01"))
    return (max(1 - std_dev / mean_pl, _ZERO) * _HUNDRED).quantize(Decimal("0.01"))


def normalize_score(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    """Map value onto 0-100 between low and high, clamped, rounded to 0.1."""
    if high <= low:
        raise ValueError(f"score range high must exceed low, got [{low}, {high}]")
    scaled = (value - low) / (high - low) * _HUNDRED
    return min(max(scaled, _ZERO), _HUNDRED).quantize(_TENTH, rounding=ROUND_HALF_UP)


def build_composite_score(
    stats: Stats | None,
    ranges: Mapping[str, tuple[Decimal, Decimal]] | None = None,
) -> list[ScoreDimension] | None:
    """
    Score the six performance dimensions.

    Args:
        stats: Output of compute_stats
        ranges: Bounds per dimension key; missing keys use DEFAULT_SCORE_RANGES

    Returns:
        Six ScoreDimension entries in fixed order, or None when stats is None
    """
    if stats is None:
        return None

    bounds = dict(DEFAULT_SCORE_RANGES)
    if ranges:
        bounds.update({key: (Decimal(str(low)), Decimal(str(high))) for key, (low, high) in ranges.items()})

    values = {
        "win_rate": stats.win_rate,
        "profit_factor": stats.profit_factor,
        "expectancy": stats.expectancy,
        "sharpe": stats.sharpe,
        "consistency": stats.consistency,
        "payoff": stats.payoff_ratio,
    }

    return [
        ScoreDimension(
            name=DIMENSION_NAMES[key],
            value=value,
            score=normalize_score(value, *bounds[key]),
        )
        for key, value in values.items()
    ]
