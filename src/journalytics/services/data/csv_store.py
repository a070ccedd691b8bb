"""CSV trade store.

Reads a journal export with a header row. Recognized columns:
id,date,entry_time,pair,direction,net_pl,r_multiple,rule_violation,
mistake_tag,trade_grade,model_id,model_name,account_id,account_name,created_at

Only date, pair, direction and net_pl are required; other columns may be
absent. Header names are matched case-insensitively with surrounding
whitespace removed. Unknown columns are ignored.

Design Goals:
  - Zero third-party dependencies (uses Python csv module)
  - File is read once, on first query
"""

import csv
from pathlib import Path

from journalytics.libraries.performance.models import Trade
from journalytics.services.data.memory_store import newest_first
from journalytics.services.data.models import TradeFilter
from journalytics.services.data.normalize import normalize_record
from journalytics.system import LoggerFactory

logger = LoggerFactory.get_logger()

REQUIRED_COLUMNS = ("date", "pair", "direction", "net_pl")


class CSVTradeStore:
    """
    ITradeStore over a CSV file.

    Raises:
        FileNotFoundError: If the file does not exist (at construction)
        ValueError: If a required column is missing (on first query)

    Example:
        >>> store = CSVTradeStore("data/trades.csv")
        >>> trades = store.get_trades(TradeFilter(account_id=1))
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8-sig") -> None:
        self.path = Path(path).expanduser()
        self.encoding = encoding
        if not self.path.exists():
            raise FileNotFoundError(f"Trade CSV not found: {self.path}")
        self._trades: list[Trade] | None = None

    def _load(self) -> list[Trade]:
        trades: list[Trade] = []
        skipped = 0
        with self.path.open("r", newline="", encoding=self.encoding) as f:
            reader = csv.DictReader(f)
            columns = {(name or "").strip().lower() for name in reader.fieldnames or []}
            missing = [c for c in REQUIRED_COLUMNS if c not in columns]
            if missing:
                raise ValueError(f"Trade CSV {self.path} is missing required columns: {missing}")

            # Row 1 is the header, so data rows start at 2
            for row_number, row in enumerate(reader, start=2):
                record = {(k or "").strip().lower(): v for k, v in row.items()}
                trade = normalize_record(record, fallback_id=row_number)
                if trade is None:
                    skipped += 1
                    continue
                trades.append(trade)

        logger.info("trade_store.loaded", source=str(self.path), trades=len(trades), skipped=skipped)
        return trades

    def get_trades(self, filter: TradeFilter | None = None) -> list[Trade]:
        """Trades matching `filter`, newest first."""
        if self._trades is None:
            self._trades = self._load()
        selected = self._trades if filter is None else [t for t in self._trades if filter.matches(t)]
        return newest_first(selected)
