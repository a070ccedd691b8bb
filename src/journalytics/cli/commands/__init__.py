"""Commands __init__ - exports all commands."""

from journalytics.cli.commands.analytics import analytics_command
from journalytics.cli.commands.report import report_command
from journalytics.cli.commands.risk import risk_command
from journalytics.cli.commands.stats import stats_command

__all__ = ["analytics_command", "report_command", "risk_command", "stats_command"]
