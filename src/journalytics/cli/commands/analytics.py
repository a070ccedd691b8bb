"""Full analytics command."""

import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console

from journalytics.cli.commands.common import as_date, load_trades, trade_source_options
from journalytics.services.reporting import build_analytics, display_analytics, write_json_report
from journalytics.system.config import get_system_config

console = Console()


@click.command("analytics")
@trade_source_options
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="End of the heatmap window and calendar month (default: latest trade date)",
)
@click.option(
    "--json",
    "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the analytics bundle as JSON",
)
def analytics_command(
    trades_file: Path,
    account_id: str | None,
    start: datetime | None,
    end: datetime | None,
    today: datetime | None,
    json_path: Path | None,
):
    """
    Show every analytics view of a trade journal.

    Covers instruments, direction, models, accounts, weekdays, R distribution,
    grades, streaks, discipline and the composite score.

    \b
    Examples:
        journalytics analytics -f trades.csv
        journalytics analytics -f trades.csv --json output/analytics.json
    """
    try:
        trades = load_trades(trades_file, account_id, start, end)
        bundle = build_analytics(trades, get_system_config(), today=as_date(today))
        display_analytics(bundle, console)

        if json_path is not None:
            written = write_json_report(bundle, json_path)
            console.print(f"[green]✓ Analytics written to[/green] {written}")
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]✗ Analytics failed:[/bold red] {e}")
        sys.exit(1)
