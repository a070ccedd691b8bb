"""Reporting service for period reports and analytics views."""

from journalytics.services.reporting.formatters import (
    display_analytics,
    display_report,
    display_risk_status,
    display_stats,
)
from journalytics.services.reporting.report import (
    AnalyticsBundle,
    Report,
    ReportBuilder,
    ReportRequest,
    build_analytics,
)
from journalytics.services.reporting.writers import default_report_path, write_json_report

__all__ = [
    "ReportBuilder",
    "ReportRequest",
    "Report",
    "AnalyticsBundle",
    "build_analytics",
    "display_stats",
    "display_analytics",
    "display_report",
    "display_risk_status",
    "write_json_report",
    "default_report_path",
]
