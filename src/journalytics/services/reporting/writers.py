"""Report writers.

Serialize reports and analytics bundles to JSON files. Decimals are
written as strings and dates as ISO strings (pydantic JSON mode), so the
output round-trips without float rounding.
"""

import json
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from journalytics.system import LoggerFactory

logger = LoggerFactory.get_logger()


def write_json_report(report: BaseModel, path: Path | str) -> Path:
    """
    Write a report (or any result model) as indented JSON.

    Parent directories are created as needed; an existing file is replaced.

    Args:
        report: Report, AnalyticsBundle or another pydantic model
        path: Output file

    Returns:
        Path written
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = report.model_dump(mode="json")
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")

    logger.info("report.written", path=str(output_path))
    return output_path


def default_report_path(reports_dir: Path | str, period: str, timestamp_format: str = "%Y%m%d_%H%M%S") -> Path:
    """Output path like `<reports_dir>/monthly_20240131_170000.json`."""
    return Path(reports_dir) / f"{period}_{datetime.now().strftime(timestamp_format)}.json"
