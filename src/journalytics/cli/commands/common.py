"""Options and helpers shared by the trade-reading commands."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable

import click

from journalytics.libraries.performance.models import Trade
from journalytics.services.data import CSVTradeStore, TradeFilter


def trade_source_options(func: Callable) -> Callable:
    """Add --file, --account, --start and --end to a command."""
    func = click.option(
        "--end",
        "end",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        help="Latest trade date, inclusive (YYYY-MM-DD)",
    )(func)
    func = click.option(
        "--start",
        "start",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        help="Earliest trade date, inclusive (YYYY-MM-DD)",
    )(func)
    func = click.option(
        "--account",
        "-a",
        "account_id",
        help="Only trades of this account id",
    )(func)
    func = click.option(
        "--file",
        "-f",
        "trades_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        required=True,
        help="Trade journal export (CSV)",
    )(func)
    return func


def as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


def load_trades(
    trades_file: Path,
    account_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[Trade]:
    """Read and filter trades from a CSV journal export."""
    store = CSVTradeStore(trades_file)
    return store.get_trades(TradeFilter(account_id=account_id, start_date=as_date(start), end_date=as_date(end)))


class DecimalType(click.ParamType):
    """Click parameter parsed as a Decimal."""

    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)


DECIMAL = DecimalType()
