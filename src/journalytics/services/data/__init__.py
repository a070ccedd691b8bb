"""
Trade data service.

Boundary between raw journal records and the analytics engine: stores
normalize records into Trade objects and answer TradeFilter queries.
"""

from journalytics.services.data.csv_store import CSVTradeStore
from journalytics.services.data.interface import ITradeStore
from journalytics.services.data.memory_store import InMemoryTradeStore
from journalytics.services.data.models import TradeFilter
from journalytics.services.data.normalize import normalize_record

__all__ = [
    "ITradeStore",
    "TradeFilter",
    "InMemoryTradeStore",
    "CSVTradeStore",
    "normalize_record",
]
