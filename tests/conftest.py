"""Root conftest - shared trade fixtures."""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from journalytics.libraries.performance.models import Trade


@pytest.fixture
def make_trade():
    """
    Factory fixture building Trade objects with sensible defaults.

    Usage:
        trade = make_trade("100", day=date(2024, 1, 2), r_multiple="2")
    """
    ids = count(1)

    def _make(
        net_pl="0",
        day: date = date(2024, 1, 2),
        pair: str = "EURUSD",
        direction: str = "Long",
        **kwargs,
    ) -> Trade:
        if "r_multiple" in kwargs and kwargs["r_multiple"] is not None:
            kwargs["r_multiple"] = Decimal(str(kwargs["r_multiple"]))
        return Trade(
            id=kwargs.pop("id", next(ids)),
            date=day,
            pair=pair,
            direction=direction,
            net_pl=Decimal(str(net_pl)),
            **kwargs,
        )

    return _make


@pytest.fixture
def three_trades(make_trade):
    """+100, -50, +100 on consecutive days (total 150, max drawdown 50)."""
    return [
        make_trade("100", day=date(2024, 1, 1)),
        make_trade("-50", day=date(2024, 1, 2)),
        make_trade("100", day=date(2024, 1, 3)),
    ]
