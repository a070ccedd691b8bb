"""Raw trade record normalization.

Stores hand raw records (CSV rows, dicts from an export) to
`normalize_record`, which coerces every field to its typed form before a
Trade is built. Coercion is tolerant: a malformed optional value becomes
None (or 0 for net P/L) and is logged at WARNING, so one bad cell never
drops a trade. Only records without a usable date, pair or direction are
skipped.

Blank values ("", whitespace, None) are treated as absent and are not logged.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from journalytics.libraries.performance.models import GRADES, Trade
from journalytics.system import LoggerFactory
from journalytics.system.config import FALSE_WORDS, TRUE_WORDS

logger = LoggerFactory.get_logger()

_DIRECTIONS = {"long": "Long", "buy": "Long", "short": "Short", "sell": "Short"}


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerced(record_id: Any, field: str, value: Any, result: Any) -> Any:
    logger.warning(
        "trade_store.field_coerced",
        trade_id=record_id,
        field=field,
        value=repr(value),
        coerced_to=repr(result),
    )
    return result


def _skipped(record_id: Any, reason: str) -> None:
    logger.warning("trade_store.record_skipped", trade_id=record_id, reason=reason)


def parse_date(value: Any) -> date | None:
    """Parse a calendar date from a date, datetime or 'YYYY-MM-DD...' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def parse_time(value: Any) -> time | None:
    """Parse an 'HH:MM' (or 'HH:MM:SS') entry time."""
    if isinstance(value, time):
        return value
    text = str(value).strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


def parse_decimal(value: Any) -> Decimal | None:
    """Parse a finite Decimal, tolerating thousands separators and a currency sign."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = str(value).strip().replace(",", "").replace("$", "")
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    return result if result.is_finite() else None


def parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_WORDS:
        return True
    if text in FALSE_WORDS:
        return False
    return None


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse an ISO timestamp.

    Timezone-aware values are converted to naive UTC so they sort against
    naive ones.
    """
    if isinstance(value, datetime):
        result = value
    else:
        try:
            result = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def _text(value: Any) -> str | None:
    if _blank(value):
        return None
    return str(value).strip()


def _identifier(value: Any) -> int | str | None:
    if _blank(value):
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    return int(text) if text.isdigit() else text


def normalize_record(record: Mapping[str, Any], fallback_id: int | str | None = None) -> Trade | None:
    """
    Build a Trade from a raw record.

    Args:
        record: Raw field mapping (extra keys are ignored)
        fallback_id: Id to use when the record has none (e.g. CSV row number)

    Returns:
        Normalized Trade, or None when the record lacks a usable date, pair
        or direction

    Example:
        >>> normalize_record({"date": "2024-01-05", "pair": "EURUSD", "direction": "long", "net_pl": "120.5"})
        Trade(id='', date=datetime.date(2024, 1, 5), pair='EURUSD', direction='Long', ...)
    """
    record_id = _identifier(record.get("id"))
    if record_id is None:
        record_id = fallback_id

    raw_date = record.get("date")
    trade_date = None if _blank(raw_date) else parse_date(raw_date)
    if trade_date is None:
        _skipped(record_id, f"missing or invalid date {raw_date!r}")
        return None

    pair = _text(record.get("pair"))
    if pair is None:
        _skipped(record_id, "missing pair")
        return None

    raw_direction = record.get("direction")
    direction = _DIRECTIONS.get(str(raw_direction).strip().lower()) if not _blank(raw_direction) else None
    if direction is None:
        _skipped(record_id, f"missing or invalid direction {raw_direction!r}")
        return None

    raw_pl = record.get("net_pl")
    net_pl = parse_decimal(raw_pl) if not _blank(raw_pl) else None
    if net_pl is None:
        net_pl = _coerced(record_id, "net_pl", raw_pl, Decimal("0"))

    r_multiple = None
    raw_r = record.get("r_multiple")
    if not _blank(raw_r):
        r_multiple = parse_decimal(raw_r)
        if r_multiple is None:
            _coerced(record_id, "r_multiple", raw_r, None)

    entry_time = None
    raw_time = record.get("entry_time")
    if not _blank(raw_time):
        entry_time = parse_time(raw_time)
        if entry_time is None:
            _coerced(record_id, "entry_time", raw_time, None)

    rule_violation = False
    raw_violation = record.get("rule_violation")
    if not _blank(raw_violation):
        parsed = parse_bool(raw_violation)
        rule_violation = parsed if parsed is not None else _coerced(record_id, "rule_violation", raw_violation, False)

    trade_grade = None
    raw_grade = _text(record.get("trade_grade"))
    if raw_grade is not None:
        grade = raw_grade.upper()
        if grade in GRADES:
            trade_grade = grade
        else:
            _coerced(record_id, "trade_grade", raw_grade, None)

    created_at = None
    raw_created = record.get("created_at")
    if not _blank(raw_created):
        created_at = parse_datetime(raw_created)
        if created_at is None:
            _coerced(record_id, "created_at", raw_created, None)

    return Trade(
        id=record_id if record_id is not None else "",
        date=trade_date,
        pair=pair,
        direction=direction,
        net_pl=net_pl,
        entry_time=entry_time,
        r_multiple=r_multiple,
        rule_violation=rule_violation,
        mistake_tag=_text(record.get("mistake_tag")),
        trade_grade=trade_grade,
        model_id=_identifier(record.get("model_id")),
        model_name=_text(record.get("model_name")),
        account_id=_identifier(record.get("account_id")),
        account_name=_text(record.get("account_name")),
        created_at=created_at,
    )
