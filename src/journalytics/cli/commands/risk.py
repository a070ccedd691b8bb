"""Account risk command."""

import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import click
from rich.console import Console

from journalytics.cli.commands.common import DECIMAL, load_trades
from journalytics.libraries.risk import limits_from_settings, load_risk_limits, load_rules, rules_from_settings
from journalytics.libraries.risk.tools import limits
from journalytics.services.reporting import display_risk_status
from journalytics.system.config import get_system_config

console = Console()


@click.command("risk")
@click.option(
    "--file",
    "-f",
    "trades_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Trade journal export (CSV)",
)
@click.option("--account", "-a", "account_id", help="Only trades of this account id")
@click.option("--capital", type=DECIMAL, help="Starting capital (default: risk.capital from system.yaml)")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Day treated as today (default: the current date)",
)
@click.option(
    "--limits",
    "limits_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with a risk_limits section (default: system.yaml risk)",
)
@click.option(
    "--rules",
    "rules_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with a trading_rules section (default: system.yaml rules)",
)
def risk_command(
    trades_file: Path,
    account_id: str | None,
    capital: Decimal | None,
    today: datetime | None,
    limits_file: Path | None,
    rules_file: Path | None,
):
    """
    Check an account against its drawdown, profit and consistency limits.

    \b
    Examples:
        journalytics risk -f trades.csv --capital 25000
        journalytics risk -f trades.csv -a 2 --today 2024-01-05 --rules config/rules.yaml
    """
    try:
        config = get_system_config()
        risk_limits = load_risk_limits(limits_file) if limits_file else limits_from_settings(config.risk)
        rules = load_rules(rules_file) if rules_file else rules_from_settings(config.rules)

        now = datetime.now()
        if today is not None:
            now = datetime.combine(today.date(), now.time())

        trades = load_trades(trades_file, account_id)
        status = limits.evaluate_risk_status(
            trades,
            risk_limits,
            capital if capital is not None else config.risk.capital,
            today=now.date(),
        )
        trading = limits.evaluate_trading_status(trades, rules, now)
        display_risk_status(status, trading, console)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]✗ Risk check failed:[/bold red] {e}")
        sys.exit(1)
