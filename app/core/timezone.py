"""Time handling shared by the models and views.

Timestamps are kept in a fixed reference zone (UTC) and only converted into the
display zone when something is shown to a person. The database stores them as
naive UTC values (TIMESTAMP WITHOUT TIME ZONE).
"""
import enum
from datetime import UTC, date, datetime, time, timedelta, tzinfo

import pytz
from dateutil import tz as dateutil_tz
from dateutil.relativedelta import relativedelta

from app.core.config import settings

REFERENCE_ZONE = UTC

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_WEEK_START_WEEKDAY = {"monday": 0, "sunday": 6}


class TimeZone(enum.Enum):
    UTC = "UTC"
    LOCAL = "LOCAL"

    @property
    def tzinfo(self) -> tzinfo:
        if self is TimeZone.UTC:
            return REFERENCE_ZONE
        if settings.display_timezone:
            return pytz.timezone(settings.display_timezone)
        return dateutil_tz.tzlocal()


ZoneLike = TimeZone | tzinfo | str


def resolve_zone(zone: ZoneLike) -> tzinfo:
    if isinstance(zone, TimeZone):
        return zone.tzinfo
    if isinstance(zone, str):
        return pytz.timezone(zone)
    return zone


def _localize(naive: datetime, zone: tzinfo) -> datetime:
    # pytz zones must go through localize() to pick the right DST offset
    localize = getattr(zone, "localize", None)
    if localize is not None:
        return localize(naive)
    return naive.replace(tzinfo=zone)


def normalize_to_reference_zone(ts: datetime) -> datetime:
    """Relabel the wall-clock fields of ``ts`` as UTC.

    No conversion happens: 02:30 at -05:00 becomes 02:30 UTC. Naive values are
    treated the same way, and the operation is idempotent.
    """
    return ts.replace(tzinfo=REFERENCE_ZONE)


def convert_time(ts: datetime, zone: ZoneLike) -> datetime:
    """Offset-aware conversion of a reference-zone timestamp into ``zone``."""
    if ts.tzinfo is None:
        ts = normalize_to_reference_zone(ts)
    return ts.astimezone(resolve_zone(zone))


def to_local_date(ts: datetime, zone: ZoneLike = TimeZone.LOCAL) -> date:
    return convert_time(ts, zone).date()


def to_local_time(ts: datetime, zone: ZoneLike = TimeZone.LOCAL) -> time:
    return convert_time(ts, zone).time()


def to_time_string(ts: datetime) -> str:
    """Format as ``h:mm a``, e.g. ``2:30 AM``."""
    hour = ts.hour % 12 or 12
    meridiem = "AM" if ts.hour < 12 else "PM"
    return f"{hour}:{ts.minute:02d} {meridiem}"


def to_display_string(ts: datetime) -> str:
    """Format as ``MMM d, yyyy h:mm a``, e.g. ``Mar 10, 2024 2:30 AM``."""
    return f"{_MONTH_ABBR[ts.month - 1]} {ts.day}, {ts.year} {to_time_string(ts)}"


def to_local_display_string(ts: datetime, zone: ZoneLike = TimeZone.LOCAL) -> str:
    return to_display_string(convert_time(ts, zone))


def to_storage(ts: datetime) -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(REFERENCE_ZONE)
    return ts.replace(tzinfo=None)


def from_storage(ts: datetime) -> datetime:
    return normalize_to_reference_zone(ts)


def utc_now() -> datetime:
    return datetime.now(REFERENCE_ZONE)


def _local_now(now: datetime | None, zone: tzinfo) -> datetime:
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = normalize_to_reference_zone(now)
    return now.astimezone(zone)


def _to_reference_bounds(start: datetime, end: datetime, zone: tzinfo) -> tuple[datetime, datetime]:
    return (
        _localize(start, zone).astimezone(REFERENCE_ZONE),
        _localize(end, zone).astimezone(REFERENCE_ZONE),
    )


def current_week_bounds(
    now: datetime | None = None,
    zone: ZoneLike = TimeZone.LOCAL,
    week_starts_on: str | None = None,
) -> tuple[datetime, datetime]:
    """UTC ``[start, end)`` of the calendar week containing ``now`` in the display zone.

    The week begins at local midnight of ``week_starts_on`` (``sunday`` or
    ``monday``, default from settings) and runs seven local days.
    """
    week_starts_on = (week_starts_on or settings.week_starts_on).lower()
    if week_starts_on not in _WEEK_START_WEEKDAY:
        raise ValueError(f"week_starts_on must be one of {sorted(_WEEK_START_WEEKDAY)}, got {week_starts_on!r}")
    tz = resolve_zone(zone)
    local_now = _local_now(now, tz)
    days_back = (local_now.weekday() - _WEEK_START_WEEKDAY[week_starts_on]) % 7
    start = datetime.combine(local_now.date() - timedelta(days=days_back), time.min)
    return _to_reference_bounds(start, start + timedelta(days=7), tz)


def current_month_bounds(
    now: datetime | None = None,
    zone: ZoneLike = TimeZone.LOCAL,
) -> tuple[datetime, datetime]:
    """UTC ``[start, end)`` of the calendar month containing ``now`` in the display zone."""
    tz = resolve_zone(zone)
    local_now = _local_now(now, tz)
    start = datetime.combine(local_now.date().replace(day=1), time.min)
    return _to_reference_bounds(start, start + relativedelta(months=1), tz)
