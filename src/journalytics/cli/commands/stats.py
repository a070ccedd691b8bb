"""Core statistics command."""

import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console

from journalytics.cli.commands.common import load_trades, trade_source_options
from journalytics.libraries.performance.metrics import compute_stats
from journalytics.services.reporting import display_stats
from journalytics.system.config import get_system_config

console = Console()


@click.command("stats")
@trade_source_options
def stats_command(trades_file: Path, account_id: str | None, start: datetime | None, end: datetime | None):
    """
    Show the core statistics of a trade journal.

    \b
    Examples:
        journalytics stats -f trades.csv
        journalytics stats -f trades.csv --account 2 --start 2024-01-01
    """
    try:
        trades = load_trades(trades_file, account_id, start, end)
        stats = compute_stats(trades, get_system_config().analytics.annualization_factor)
        display_stats(stats, console)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]✗ Stats failed:[/bold red] {e}")
        sys.exit(1)
