from datetime import datetime, timezone
from typing import Optional

from dateutil.parser import parse


def normalize_ts(ts: datetime) -> datetime:
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive (the store hands back naive UTC values).
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def utc_now() -> datetime:
    # BSON dates keep millisecond precision; truncate so reads round-trip
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def parse_datetime(value) -> Optional[datetime]:
    """Parse a client supplied date/time, returning an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return normalize_ts(value).astimezone(timezone.utc)
    try:
        return normalize_ts(parse(str(value))).astimezone(timezone.utc)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid date: {value}") from exc
