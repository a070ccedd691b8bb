"""In-memory trade store.

Holds normalized trades built from raw records, for tests, imports from a
JSON export and embedding in other tools.
"""

from datetime import datetime
from typing import Any, Iterable, Mapping

from journalytics.libraries.performance.models import Trade
from journalytics.services.data.models import TradeFilter
from journalytics.services.data.normalize import normalize_record
from journalytics.system import LoggerFactory

logger = LoggerFactory.get_logger()


def newest_first(trades: Iterable[Trade]) -> list[Trade]:
    """Order trades date DESC, created_at DESC (a journal's natural listing order)."""
    return sorted(trades, key=lambda t: (t.date, t.created_at or datetime.min), reverse=True)


class InMemoryTradeStore:
    """
    ITradeStore over a list of raw records.

    Records are normalized once at construction; records that cannot be
    normalized are skipped (and logged by normalize_record).

    Example:
        >>> store = InMemoryTradeStore([{"date": "2024-01-05", "pair": "EURUSD", "direction": "Long", "net_pl": 100}])
        >>> len(store.get_trades())
        1
    """

    def __init__(self, records: Iterable[Mapping[str, Any] | Trade] = ()) -> None:
        self._trades: list[Trade] = []
        skipped = 0
        for index, record in enumerate(records, start=1):
            if isinstance(record, Trade):
                self._trades.append(record)
                continue
            trade = normalize_record(record, fallback_id=index)
            if trade is None:
                skipped += 1
            else:
                self._trades.append(trade)

        logger.debug("trade_store.loaded", source="memory", trades=len(self._trades), skipped=skipped)

    def __len__(self) -> int:
        return len(self._trades)

    def get_trades(self, filter: TradeFilter | None = None) -> list[Trade]:
        """Trades matching `filter`, newest first."""
        selected = self._trades if filter is None else [t for t in self._trades if filter.matches(t)]
        return newest_first(selected)
