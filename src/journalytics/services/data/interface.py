"""Trade store interface definition.

Defines the Protocol every trade store implements. The analytics, report
and risk layers depend only on this protocol, so stores are independently
testable and replaceable.
"""

from typing import Protocol

from journalytics.libraries.performance.models import Trade
from journalytics.services.data.models import TradeFilter

__all__ = ["ITradeStore"]


class ITradeStore(Protocol):
    """
    Read-only source of normalized trades.

    Responsibilities:
    - Apply TradeFilter criteria
    - Return Trade objects already normalized (typed, coerced)

    Does NOT:
    - Guarantee chronological order (the engine sorts for itself)
    - Compute statistics
    - Write or mutate trades

    Examples:
        >>> store: ITradeStore = CSVTradeStore("trades.csv")
        >>> trades = store.get_trades(TradeFilter(account_id=1))
    """

    def get_trades(self, filter: TradeFilter | None = None) -> list[Trade]:
        """
        Get trades matching a filter.

        Args:
            filter: Selection criteria (None = all trades)

        Returns:
            Matching trades, newest first
        """
        ...
