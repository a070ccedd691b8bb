"""
Trade store query models.

TradeFilter is the only query shape the stores accept: optional account and
model ids plus an inclusive date range. Empty criteria match every trade.
"""

from datetime import date
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from journalytics.libraries.performance.models import Trade


class TradeFilter(BaseModel):
    """
    Criteria for selecting trades from a store.

    Attributes:
        account_id: Only trades of this account
        model_id: Only trades of this model
        start_date: Earliest trade date (inclusive)
        end_date: Latest trade date (inclusive)

    Example:
        >>> f = TradeFilter(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))
        >>> f.matches(trade)
        True
    """

    model_config = ConfigDict(frozen=True)

    account_id: int | str | None = None
    model_id: int | str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def validate_range(self) -> Self:
        """Reject an inverted date range."""
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        return self

    def matches(self, trade: Trade) -> bool:
        """Whether a trade satisfies every set criterion. Ids compare as strings."""
        if self.account_id is not None and str(trade.account_id) != str(self.account_id):
            return False
        if self.model_id is not None and str(trade.model_id) != str(self.model_id):
            return False
        if self.start_date is not None and trade.date < self.start_date:
            return False
        if self.end_date is not None and trade.date > self.end_date:
            return False
        return True
