"""Period report command."""

import sys
from datetime import date, datetime
from pathlib import Path

import click
from rich.console import Console

from journalytics.cli.commands.common import as_date
from journalytics.services.data import CSVTradeStore
from journalytics.services.reporting import (
    Report,
    ReportBuilder,
    default_report_path,
    display_report,
    write_json_report,
)
from journalytics.system.config import get_system_config

console = Console()


def _build(builder: ReportBuilder, period: str, on: date | None, start: date | None, end: date | None) -> Report:
    if period == "daily":
        return builder.daily(on or date.today())
    if period == "weekly":
        return builder.weekly(on or start or date.today(), end)
    if period == "monthly":
        anchor = on or start or date.today()
        return builder.monthly(anchor.year, anchor.month)
    if start is None or end is None:
        raise ValueError("custom reports need both --start and --end")
    return builder.custom(start, end)


@click.command("report")
@click.option(
    "--file",
    "-f",
    "trades_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Trade journal export (CSV)",
)
@click.option(
    "--period",
    "-p",
    type=click.Choice(["daily", "weekly", "monthly", "custom"]),
    default="monthly",
    show_default=True,
    help="Report period",
)
@click.option(
    "--date",
    "on",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Day for daily, first day for weekly, any day of the month for monthly",
)
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), help="Custom range start (YYYY-MM-DD)")
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), help="Custom range end (YYYY-MM-DD)")
@click.option("--account", "-a", "account_id", help="Only trades of this account id")
@click.option(
    "--json",
    "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report as JSON to this file",
)
@click.option("--save", is_flag=True, help="Write the report as JSON to the configured reports directory")
@click.option("--no-trades", is_flag=True, help="Omit the trade list from the console output")
def report_command(
    trades_file: Path,
    period: str,
    on: datetime | None,
    start: datetime | None,
    end: datetime | None,
    account_id: str | None,
    json_path: Path | None,
    save: bool,
    no_trades: bool,
):
    """
    Build a daily, weekly, monthly or custom report.

    \b
    Examples:
        journalytics report -f trades.csv --period daily --date 2024-01-05
        journalytics report -f trades.csv --period monthly --date 2024-01-01
        journalytics report -f trades.csv --period custom \\
            --start 2024-01-01 --end 2024-03-31 --json output/q1.json
    """
    try:
        config = get_system_config()
        builder = ReportBuilder(
            CSVTradeStore(trades_file),
            account_id=account_id,
            annualization_factor=config.analytics.annualization_factor,
        )
        report = _build(builder, period, as_date(on), as_date(start), as_date(end))
        display_report(report, console, show_trades=not no_trades)

        if save and json_path is None:
            json_path = default_report_path(config.output.reports_dir, period, config.output.timestamp_format)
        if json_path is not None:
            written = write_json_report(report, json_path)
            console.print(f"[green]✓ Report written to[/green] {written}")
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]✗ Report failed:[/bold red] {e}")
        sys.exit(1)
