"""Journalytics CLI main entry point."""

import sys
from pathlib import Path
from typing import Literal, cast

import click
import yaml
from rich.console import Console

from journalytics import __version__
from journalytics.cli.commands import analytics_command, report_command, risk_command, stats_command
from journalytics.system import LoggerFactory, reload_system_config

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="System configuration file (default: $JOURNALYTICS_CONFIG or config/system.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured logging level",
)
def main(config_path: Path | None, log_level: str | None):
    """Journalytics - Trading Journal Analytics"""
    try:
        system_config = reload_system_config(config_path)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        console.print(f"[bold red]✗ Invalid configuration:[/bold red] {e}")
        sys.exit(1)

    if log_level:
        # Type cast since click already validated the choice
        system_config.logging.level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR"], log_level.upper())
    LoggerFactory.configure(system_config.logging.to_logger_config())


# Register commands
main.add_command(stats_command)
main.add_command(analytics_command)
main.add_command(report_command)
main.add_command(risk_command)


if __name__ == "__main__":
    main()
