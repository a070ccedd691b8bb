"""Rich console formatters for statistics, analytics, reports and risk.

Provides terminal display of engine results with tables, colors, and
formatting using the Rich library.
"""

from decimal import Decimal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from journalytics.libraries.performance.models import (
    RATIO_SENTINEL,
    WEEKDAY_LABELS,
    DaySummary,
    GradeBucket,
    HourCell,
    RBucket,
    ScoreDimension,
    SegmentStats,
    Stats,
    StreakSummary,
    Trade,
    ViolationAnalysis,
    WeekdayPoint,
)
from journalytics.libraries.risk.models import RiskStatus, TradingStatus
from journalytics.services.reporting.report import AnalyticsBundle, Report

_STATUS_STYLE = {
    "ok": ("green", "SAFE"),
    "warn": ("yellow", "WARNING"),
    "breach": ("red", "BREACHED"),
    "reached": ("green", "REACHED"),
    "pending": ("yellow", "PENDING"),
}


def _format_pct(value: Decimal, precision: int = 2) -> str:
    """Format percentage."""
    return f"{float(value):.{precision}f}%"


def _format_currency(value: Decimal, precision: int = 2) -> str:
    """Format currency value with sign before the symbol."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(float(value)):,.{precision}f}"


def _format_ratio(value: Decimal) -> str:
    """Format a ratio; the sentinel is shown as infinity."""
    if value >= RATIO_SENTINEL:
        return "∞"
    return f"{float(value):.2f}"


def _format_r(value: Decimal | None) -> str:
    if value is None:
        return "—"
    return f"{float(value):+.2f}R"


def _get_color(value: Decimal) -> str:
    """Get color based on positive/negative value."""
    if value > 0:
        return "green"
    elif value < 0:
        return "red"
    return "white"


def _colored_currency(value: Decimal) -> str:
    color = _get_color(value)
    return f"[{color}]{_format_currency(value)}[/{color}]"


def _create_stats_table(stats: Stats) -> Table:
    """Create core statistics table."""
    table = Table(title="📊 Performance Summary", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Total Trades", f"{stats.total_trades:,}")
    outcomes = f"[green]{stats.wins}[/green] / [red]{stats.losses}[/red] / {stats.breakeven}"
    table.add_row("Wins / Losses / BE", outcomes)

    win_rate_color = (
        "green" if stats.win_rate > Decimal("50") else "yellow" if stats.win_rate > Decimal("40") else "red"
    )
    table.add_row("Win Rate", f"[{win_rate_color}]{_format_pct(stats.win_rate)}[/{win_rate_color}]")
    table.add_row("Net P/L", _colored_currency(stats.total_pl))
    table.add_row("Expectancy", _colored_currency(stats.expectancy))
    table.add_row("", "")  # Spacer

    pf_color = (
        "green" if stats.profit_factor > Decimal("2.0") else "yellow" if stats.profit_factor > Decimal("1.0") else "red"
    )
    table.add_row("Profit Factor", f"[{pf_color}]{_format_ratio(stats.profit_factor)}[/{pf_color}]")
    table.add_row("Payoff Ratio", _format_ratio(stats.payoff_ratio))
    table.add_row("Avg Win", f"[green]{_format_currency(stats.avg_win)}[/green]")
    table.add_row("Avg Loss", f"[red]{_format_currency(-stats.avg_loss)}[/red]")
    table.add_row("Best Trade", _colored_currency(stats.best_trade))
    table.add_row("Worst Trade", _colored_currency(stats.worst_trade))
    table.add_row("", "")  # Spacer

    sharpe_color = "green" if stats.sharpe > Decimal("1.0") else "yellow" if stats.sharpe > Decimal("0") else "red"
    table.add_row("Sharpe Ratio", f"[{sharpe_color}]{float(stats.sharpe):.2f}[/{sharpe_color}]")
    table.add_row("Sortino Ratio", f"{float(stats.sortino):.2f}")
    table.add_row("Calmar Ratio", _format_ratio(stats.calmar))
    table.add_row("Max Drawdown", f"[red]{_format_currency(-stats.max_drawdown)}[/red]")
    table.add_row("Std Dev (P/L)", _format_currency(stats.std_dev))

    if stats.r_count:
        table.add_row("", "")  # Spacer
        table.add_row("Avg R", _format_r(stats.avg_r))
        table.add_row("Best / Worst R", f"{_format_r(stats.best_r)} / {_format_r(stats.worst_r)}")
        table.add_row("Trades with R", f"{stats.r_count:,}")

    return table


def _create_segment_table(segments: list[SegmentStats], title: str, key_header: str) -> Table | None:
    """Create per-group aggregate table (instrument, direction, model, account)."""
    if not segments:
        return None

    table = Table(title=title, box=None, padding=(0, 1))

    table.add_column(key_header, style="cyan")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Net P/L", justify="right")
    table.add_column("Avg Win", justify="right", style="green")
    table.add_column("Avg Loss", justify="right", style="red")
    table.add_column("PF", justify="right")
    table.add_column("Avg R", justify="right")

    for segment in segments:
        table.add_row(
            segment.label,
            f"{segment.trades:,}",
            _format_pct(segment.win_rate, 1),
            _colored_currency(segment.total_pl),
            _format_currency(segment.avg_win),
            _format_currency(-segment.avg_loss),
            _format_ratio(segment.profit_factor),
            _format_r(segment.avg_r),
        )

    return table


def _create_long_short_table(long_short: dict[str, SegmentStats | None]) -> Table | None:
    sides = [side for side in long_short.values() if side is not None]
    return _create_segment_table(sides, "↕️  Long vs Short", "Direction")


def _create_weekday_table(points: list[WeekdayPoint]) -> Table | None:
    if not points:
        return None

    table = Table(title="📅 Day of Week", box=None, padding=(0, 1))
    table.add_column("Day", style="cyan")
    table.add_column("Trades", justify="right")
    table.add_column("Avg P/L", justify="right")
    table.add_column("Net P/L", justify="right")

    for point in points:
        table.add_row(
            point.label,
            f"{point.trade_count:,}",
            _colored_currency(point.avg_pl),
            _colored_currency(point.total_pl),
        )

    return table


def _create_r_histogram_table(buckets: list[RBucket]) -> Table | None:
    if not any(b.count for b in buckets):
        return None

    table = Table(title="📐 R-Multiple Distribution", box=None, padding=(0, 1))
    table.add_column("Range", style="cyan")
    table.add_column("Trades", justify="right")
    table.add_column("", justify="left")

    peak = max(b.count for b in buckets)
    for bucket in buckets:
        color = "green" if bucket.positive else "red"
        bar = "█" * round(bucket.count / peak * 20) if peak else ""
        table.add_row(bucket.label, f"{bucket.count:,}", f"[{color}]{bar}[/{color}]")

    return table


def _create_grade_table(grades: list[GradeBucket]) -> Table | None:
    if not any(g.count for g in grades):
        return None

    table = Table(title="🎓 Trade Grades", box=None, padding=(0, 1))
    table.add_column("Grade", style="cyan")
    table.add_column("Trades", justify="right")
    table.add_column("Avg P/L", justify="right")
    table.add_column("Net P/L", justify="right")

    for grade in grades:
        avg = _colored_currency(grade.avg_pl) if grade.avg_pl is not None else "—"
        table.add_row(grade.grade, f"{grade.count:,}", avg, _colored_currency(grade.total_pl))

    return table


def _create_streak_table(streaks: StreakSummary) -> Table:
    table = Table(title="🔥 Streaks", show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Best Win Streak", f"[green]{streaks.best_win_streak}[/green]")
    table.add_row("Worst Loss Streak", f"[red]{streaks.worst_loss_streak}[/red]")
    table.add_row("Avg Win Streak", f"{float(streaks.avg_win_streak):.1f}")
    table.add_row("Avg Loss Streak", f"{float(streaks.avg_loss_streak):.1f}")

    if streaks.current > 0:
        current = f"[green]{streaks.current}W[/green]"
    elif streaks.current < 0:
        current = f"[red]{-streaks.current}L[/red]"
    else:
        current = "—"
    table.add_row("Current", current)

    return table


def _create_violation_table(violations: ViolationAnalysis) -> Table:
    table = Table(title="🚫 Discipline", show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Rule Violations", f"{violations.violation_count:,}")
    if violations.violated is not None:
        table.add_row("Violated Avg P/L", _colored_currency(violations.violated.avg_pl))
        table.add_row("Violated Win Rate", _format_pct(violations.violated.win_rate, 1))
    if violations.clean is not None:
        table.add_row("Clean Avg P/L", _colored_currency(violations.clean.avg_pl))
        table.add_row("Clean Win Rate", _format_pct(violations.clean.win_rate, 1))
    table.add_row("Cost of Violations", _colored_currency(violations.hidden_cost))

    if violations.top_mistakes:
        mistakes = ", ".join(f"{m.tag} ({m.count})" for m in violations.top_mistakes)
        table.add_row("Top Mistakes", mistakes)

    return table


def _create_score_table(score: list[ScoreDimension]) -> Table:
    table = Table(title="🏅 Composite Score", box=None, padding=(0, 1))
    table.add_column("Dimension", style="cyan")
    table.add_column("Metric", justify="right")
    table.add_column("Score", justify="right")

    for dim in score:
        color = "green" if dim.score >= 60 else "yellow" if dim.score >= 30 else "red"
        table.add_row(dim.name, _format_ratio(dim.value), f"[{color}]{float(dim.score):.1f}[/{color}]")

    return table


def _create_day_table(days: DaySummary) -> Table:
    table = Table(title="🗓️  Trading Days", show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Trading Days", f"{days.trading_days:,}")
    outcomes = f"[green]{days.green_days}[/green] / [red]{days.red_days}[/red] / {days.flat_days}"
    table.add_row("Green / Red / Flat", outcomes)
    table.add_row("Best Day", f"{_colored_currency(days.best_day)} ({days.best_day_date})")
    table.add_row("Worst Day", f"{_colored_currency(days.worst_day)} ({days.worst_day_date})")

    return table


def _create_trade_table(trades: list[Trade]) -> Table:
    table = Table(title="💼 Trades", box=None, padding=(0, 1))
    table.add_column("Date", style="cyan")
    table.add_column("Time")
    table.add_column("Pair")
    table.add_column("Dir")
    table.add_column("Net P/L", justify="right")
    table.add_column("R", justify="right")
    table.add_column("Grade", justify="center")

    for trade in trades:
        table.add_row(
            str(trade.date),
            f"{trade.entry_time:%H:%M}" if trade.entry_time else "—",
            trade.pair,
            trade.direction,
            _colored_currency(trade.net_pl),
            _format_r(trade.r_multiple),
            trade.trade_grade or "—",
        )

    return table


def _hour_label(cell: HourCell) -> str:
    return f"{WEEKDAY_LABELS[cell.weekday]} {cell.hour:02d}:00 ({_colored_currency(cell.pl)})"


def _print(console: Console, renderable) -> None:
    if renderable is not None:
        console.print(renderable)
        console.print()


def _empty_panel(message: str) -> Panel:
    return Panel(f"[dim]{message}[/dim]", border_style="dim")


def display_stats(stats: Stats | None, console: Console | None = None) -> None:
    """Display the core statistics table, or an empty state for None."""
    if console is None:
        console = Console()

    console.print()
    if stats is None:
        _print(console, _empty_panel("No trades match the selection."))
        return
    _print(console, _create_stats_table(stats))


def display_analytics(bundle: AnalyticsBundle, console: Console | None = None) -> None:
    """
    Display the full analytics view.

    Args:
        bundle: Output of build_analytics
        console: Rich Console instance (creates new if None)
    """
    if console is None:
        console = Console()

    console.print()
    if bundle.is_empty or bundle.stats is None:
        _print(console, _empty_panel("No trades to analyze."))
        return

    _print(console, _create_stats_table(bundle.stats))
    if bundle.score:
        _print(console, _create_score_table(bundle.score))
    _print(console, _create_segment_table(bundle.pairs, "💱 Instruments", "Pair"))
    _print(console, _create_long_short_table(bundle.long_short))
    _print(console, _create_segment_table(bundle.models, "🧩 Models", "Model"))
    _print(console, _create_segment_table(bundle.accounts, "🏦 Accounts", "Account"))
    _print(console, _create_weekday_table(bundle.day_of_week))
    _print(console, _create_r_histogram_table(bundle.r_histogram))
    _print(console, _create_grade_table(bundle.grades))
    if bundle.streaks is not None:
        _print(console, _create_streak_table(bundle.streaks))
    if bundle.violations is not None:
        _print(console, _create_violation_table(bundle.violations))
    if bundle.hour_heatmap is not None and bundle.hour_heatmap.best is not None:
        best, worst = bundle.hour_heatmap.best, bundle.hour_heatmap.worst
        lines = [f"Best hour:  {_hour_label(best)}"]
        if worst is not None:
            lines.append(f"Worst hour: {_hour_label(worst)}")
        lines.append(f"[dim]{bundle.hour_heatmap.trades_excluded} trades without entry time excluded[/dim]")
        _print(console, Panel("\n".join(lines), title="⏰ Time of Day", border_style="cyan"))


def display_report(report: Report, console: Console | None = None, show_trades: bool = True) -> None:
    """
    Display a period report.

    Args:
        report: Output of ReportBuilder
        console: Rich Console instance (creates new if None)
        show_trades: Include the trade list
    """
    if console is None:
        console = Console()

    header = Text()
    header.append(report.title, style="bold")
    if report.subtitle:
        header.append(f"\n{report.subtitle}", style="dim")
    console.print()
    console.print(Panel(header, border_style="cyan"))
    console.print()

    if report.is_empty or report.stats is None:
        _print(console, _empty_panel("No trades in this period."))
        return

    _print(console, _create_stats_table(report.stats))
    _print(console, _create_long_short_table(report.long_short))
    if report.days is not None:
        _print(console, _create_day_table(report.days))
    if show_trades:
        _print(console, _create_trade_table(report.trades))

    summary = Text()
    summary.append("Net P/L: ", style="bold")
    summary.append(_format_currency(report.stats.total_pl), style=f"bold {_get_color(report.stats.total_pl)}")
    summary.append(f" over {report.stats.total_trades} trades")
    console.print(Panel(summary, border_style="green" if report.stats.total_pl > 0 else "red"))
    console.print()


def display_risk_status(
    status: RiskStatus,
    trading: TradingStatus | None = None,
    console: Console | None = None,
) -> None:
    """Display account risk limits and, optionally, the live trading status."""
    if console is None:
        console = Console()

    table = Table(title="🛡️  Risk Status", box=None, padding=(0, 1))
    table.add_column("Limit", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Detail", justify="right")
    table.add_column("Status", justify="center")

    def status_cell(key: str) -> str:
        color, label = _STATUS_STYLE[key]
        return f"[{color}]{label}[/{color}]"

    table.add_row(
        "Daily Drawdown",
        _format_pct(status.daily_drawdown_pct),
        f"{_colored_currency(status.today_pl)} today",
        status_cell(status.daily_status),
    )
    table.add_row(
        "Total Drawdown",
        _format_pct(status.total_drawdown_pct),
        _format_currency(-status.max_drawdown),
        status_cell(status.total_status),
    )
    table.add_row(
        "Profit Target",
        _format_pct(status.profit_pct),
        f"Target {_format_currency(status.profit_target)}",
        status_cell(status.profit_status),
    )
    table.add_row(
        "Consistency",
        _format_pct(status.consistency_score, 0),
        f"{status.inconsistent_days} of {status.trading_days} days over {_format_currency(status.max_daily_profit)}",
        status_cell(status.consistency_status),
    )

    console.print()
    _print(console, table)

    if trading is not None:
        if trading.can_trade:
            body = "[green]Trading Allowed[/green] · All rules OK"
        else:
            body = "[red]Trading Restricted[/red] · " + ", ".join(trading.reasons)
        body += f"\nToday: {trading.today_trades} trades, {_colored_currency(trading.today_pl)}"
        _print(console, Panel(body, title="📋 Trading Rules", border_style="green" if trading.can_trade else "red"))
