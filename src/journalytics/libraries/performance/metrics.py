"""Core statistics calculation functions.

Pure functions over sequences of trades (or their net P/L values). All
functions are stateless; none mutates its input.

Philosophy:
- One formula per metric, shared by every view (dashboard, analytics,
  reports, risk)
- `net_pl` sign alone classifies a trade as win, loss or breakeven
- Ratios never surface infinity or NaN: a zero denominator yields
  RATIO_SENTINEL when the numerator is positive, otherwise zero
- Cumulative metrics sort the trades chronologically first

Usage:
    >>> from journalytics.libraries.performance import metrics
    >>> stats = metrics.compute_stats(trades)
    >>> if stats is None:
    ...     print("no trades")
    >>> else:
    ...     print(stats.win_rate, stats.profit_factor, stats.max_drawdown)
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from journalytics.libraries.performance.calculators import DrawdownCalculator
from journalytics.libraries.performance.models import RATIO_SENTINEL, Stats, Trade
from journalytics.libraries.performance.score import calculate_consistency

_ZERO = Decimal("0")
_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")

DEFAULT_ANNUALIZATION_FACTOR = 252


def quantize(value: Decimal) -> Decimal:
    """Round to cents (0.01)."""
    return value.quantize(_CENT)


def sort_trades(trades: Iterable[Trade]) -> list[Trade]:
    """
    Return trades in chronological order.

    Sorts by date, then by creation time when known. The sort is stable, so
    trades with equal keys keep their input order.
    """
    return sorted(trades, key=lambda t: (t.date, t.created_at or datetime.min))


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Divide with the engine's zero-denominator policy.

    Returns:
        numerator / denominator when denominator > 0, RATIO_SENTINEL when the
        denominator is zero and the numerator positive, otherwise 0.
        Quantized to 0.01.

    Example:
        >>> safe_ratio(Decimal("200"), Decimal("50"))
        Decimal('4.00')
        >>> safe_ratio(Decimal("200"), Decimal("0"))
        Decimal('9999')
    """
    if denominator > 0:
        return quantize(numerator / denominator)
    if numerator > 0:
        return RATIO_SENTINEL
    return quantize(_ZERO)


def calculate_win_rate(trades: Sequence[Trade]) -> Decimal:
    """
    Percentage of trades with positive net P/L (0 for an empty sequence).

    Example:
        >>> calculate_win_rate(trades)  # +100, -50, +100
        Decimal('66.67')
    """
    if not trades:
        return quantize(_ZERO)
    wins = sum(1 for t in trades if t.is_winner)
    return quantize(Decimal(wins) / Decimal(len(trades)) * _HUNDRED)


def calculate_profit_factor(trades: Sequence[Trade]) -> Decimal:
    """Gross profit / absolute gross loss, with the sentinel policy."""
    gross_win = sum((t.net_pl for t in trades if t.is_winner), _ZERO)
    gross_loss = abs(sum((t.net_pl for t in trades if t.is_loser), _ZERO))
    return safe_ratio(gross_win, gross_loss)


def calculate_expectancy(trades: Sequence[Trade]) -> Decimal:
    """
    Expected value per trade.

    Expectancy = (Win% x AvgWin) - (1 - Win%) x AvgLoss

    Breakeven trades count toward (1 - Win%) but add nothing to AvgLoss.
    """
    if not trades:
        return quantize(_ZERO)

    winners = [t.net_pl for t in trades if t.is_winner]
    losers = [abs(t.net_pl) for t in trades if t.is_loser]

    win_fraction = Decimal(len(winners)) / Decimal(len(trades))
    avg_win = sum(winners, _ZERO) / len(winners) if winners else _ZERO
    avg_loss = sum(losers, _ZERO) / len(losers) if losers else _ZERO

    return quantize(win_fraction * avg_win - (1 - win_fraction) * avg_loss)


def calculate_std_dev(values: Sequence[Decimal]) -> Decimal:
    """
    Population standard deviation (divides by N).

    The trade set is treated as the complete dataset rather than a sample,
    so a single value has a standard deviation of 0.
    """
    if not values:
        return _ZERO
    mean = sum(values, _ZERO) / len(values)
    variance = sum(((v - mean) ** 2 for v in values), _ZERO) / len(values)
    return variance.sqrt()


def calculate_sharpe_ratio(
    values: Sequence[Decimal],
    annualization_factor: int = DEFAULT_ANNUALIZATION_FACTOR,
) -> Decimal:
    """
    Sharpe = mean(P/L) / std(P/L) x sqrt(annualization_factor)

    The factor is applied regardless of how often trades actually happen.
    Returns 0 when the standard deviation is 0 (including a single trade).
    """
    if not values:
        return quantize(_ZERO)
    std = calculate_std_dev(values)
    if std == 0:
        return quantize(_ZERO)
    mean = sum(values, _ZERO) / len(values)
    return quantize(mean / std * Decimal(annualization_factor).sqrt())


def calculate_sortino_ratio(
    values: Sequence[Decimal],
    annualization_factor: int = DEFAULT_ANNUALIZATION_FACTOR,
) -> Decimal:
    """
    Sortino = mean(P/L) / downside deviation x sqrt(annualization_factor)

    Downside deviation is sqrt(mean of squared negative P/L values). Without
    negative values the full standard deviation is used instead.
    """
    if not values:
        return quantize(_ZERO)

    negatives = [v for v in values if v < 0]
    if negatives:
        downside = (sum((v * v for v in negatives), _ZERO) / len(negatives)).sqrt()
    else:
        downside = calculate_std_dev(values)

    if downside == 0:
        return quantize(_ZERO)
    mean = sum(values, _ZERO) / len(values)
    return quantize(mean / downside * Decimal(annualization_factor).sqrt())


def calculate_max_drawdown(trades: Iterable[Trade]) -> Decimal:
    """
    Largest peak-to-trough decline of cumulative net P/L, as a positive figure.

    Trades are sorted chronologically first, so input order does not matter.

    Example:
        >>> calculate_max_drawdown(trades)  # cumulative 100 -> 50 -> 150
        Decimal('50')
    """
    calc = DrawdownCalculator()
    for trade in sort_trades(trades):
        calc.update(trade.net_pl)
    return calc.max_drawdown


def calculate_calmar_ratio(total_pl: Decimal, max_drawdown: Decimal) -> Decimal:
    """Calmar = total P/L / max drawdown, with the sentinel policy."""
    return safe_ratio(total_pl, max_drawdown)


def compute_stats(
    trades: Iterable[Trade],
    annualization_factor: int = DEFAULT_ANNUALIZATION_FACTOR,
) -> Stats | None:
    """
    Compute the core statistics bundle.

    Args:
        trades: Trades in any order
        annualization_factor: Multiplier under the square root for Sharpe/Sortino

    Returns:
        Stats, or None when there are no trades. Callers render an empty
        state for None rather than zeros.

    Example:
        >>> stats = compute_stats(trades)  # +100, -50, +100 on consecutive days
        >>> stats.total_pl, stats.profit_factor, stats.max_drawdown
        (Decimal('150'), Decimal('4.00'), Decimal('50'))
    """
    ordered = sort_trades(trades)
    if not ordered:
        return None

    total = len(ordered)
    values = [t.net_pl for t in ordered]
    winners = [v for v in values if v > 0]
    losers = [v for v in values if v < 0]

    total_pl = sum(values, _ZERO)
    gross_win = sum(winners, _ZERO)
    gross_loss = abs(sum(losers, _ZERO))
    avg_win = gross_win / len(winners) if winners else _ZERO
    avg_loss = gross_loss / len(losers) if losers else _ZERO

    r_values = [t.r_multiple for t in ordered if t.r_multiple is not None]
    if r_values:
        avg_r: Decimal | None = quantize(sum(r_values, _ZERO) / len(r_values))
        std_dev_r: Decimal | None = quantize(calculate_std_dev(r_values))
        best_r: Decimal | None = max(r_values)
        worst_r: Decimal | None = min(r_values)
    else:
        avg_r = std_dev_r = best_r = worst_r = None

    max_drawdown = calculate_max_drawdown(ordered)
    std_dev = calculate_std_dev(values)

    return Stats(
        total_trades=total,
        wins=len(winners),
        losses=len(losers),
        breakeven=total - len(winners) - len(losers),
        win_rate=calculate_win_rate(ordered),
        total_pl=total_pl,
        gross_win=gross_win,
        gross_loss=gross_loss,
        avg_win=quantize(avg_win),
        avg_loss=quantize(avg_loss),
        profit_factor=safe_ratio(gross_win, gross_loss),
        payoff_ratio=safe_ratio(avg_win, avg_loss),
        expectancy=calculate_expectancy(ordered),
        avg_r=avg_r,
        std_dev_r=std_dev_r,
        best_r=best_r,
        worst_r=worst_r,
        r_count=len(r_values),
        std_dev=quantize(std_dev),
        consistency=calculate_consistency(total_pl / total, std_dev),
        sharpe=calculate_sharpe_ratio(values, annualization_factor),
        sortino=calculate_sortino_ratio(values, annualization_factor),
        max_drawdown=max_drawdown,
        calmar=calculate_calmar_ratio(total_pl, max_drawdown),
        best_trade=max(values),
        worst_trade=min(values),
    )
