"""Timezone utilities.

All series are bucketed into calendar days by their UTC date. Market-data
timestamps arrive as naive US/Eastern wall-clock strings and are converted
to UTC at the provider boundary.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.utc
EASTERN_TZ = pytz.timezone("US/Eastern")

# Synthetic points for days without samples are pinned here
MISSING_DAY_ANCHOR = time(16, 0)


def now_utc() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC. Naive datetimes are assumed to be UTC."""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_datetime_utc(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in UTC.

    If no timezone is present in the string, `default_tz` (UTC by default) is assumed.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or UTC
        dt = tz.localize(dt)
    return dt.astimezone(UTC)


def from_epoch_seconds(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, UTC)


def to_epoch_seconds(dt: datetime) -> int:
    return int(to_utc(dt).timestamp())


def day_key(dt: datetime) -> date:
    """Calendar day a timestamp belongs to (UTC convention)."""
    return to_utc(dt).date()


def day_anchor(day: date) -> datetime:
    """Timestamp used for a synthesized point on `day`."""
    return UTC.localize(datetime.combine(day, MISSING_DAY_ANCHOR))


def floor_to_hour(dt: datetime) -> datetime:
    return to_utc(dt).replace(minute=0, second=0, microsecond=0)


def iter_days(first: date, last: date):
    """Yield every calendar day from `first` to `last` inclusive."""
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)
