"""
Date Parsing Utility - lenient conversion of row values into datetimes

Used by the calendar, candlestick and gantt generators. Values that cannot be
read as a date come back as None so callers can skip the row.
"""

from datetime import datetime, date, timezone
from typing import Any, Optional

from dateutil import parser as date_parser
import structlog

logger = structlog.get_logger(__name__)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a row value into a naive UTC datetime.

    Numbers are treated as epoch milliseconds, strings go through dateutil,
    and aware datetimes are converted to UTC before the tzinfo is dropped so
    parsed values always compare with each other.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            logger.debug("Unparseable date value", value=text[:50])
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_iso_date(value: Any) -> Optional[str]:
    """Return the YYYY-MM-DD day key for a row value, or None when unparseable"""
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed else None


def to_epoch_ms(moment: datetime) -> int:
    """Milliseconds since the epoch for a naive UTC datetime"""
    return int(round(moment.replace(tzinfo=timezone.utc).timestamp() * 1000))
