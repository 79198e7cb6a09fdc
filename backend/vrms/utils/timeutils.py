"""
Date/time helpers shared by the store, the overdue sweep and the API layer
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from vrms.config import settings

DEFAULT_MAX_VISIT_HOURS = 8.0

DISPLAY_FORMAT = "%d/%m/%Y, %H:%M:%S"


def site_timezone() -> tzinfo:
    """Timezone that visit dates and times are expressed in."""
    return ZoneInfo(settings.SITE_TIMEZONE)


def get_current_date_time() -> datetime:
    """Aware UTC now, used for every created/updated timestamp."""
    return datetime.now(timezone.utc)


def _as_aware(value: datetime, tz: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def _parse_iso(value: str) -> datetime:
    # Accept the trailing "Z" produced by JS clients
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def format_date_time(value: Union[datetime, str], tz: Optional[tzinfo] = None) -> str:
    """
    Render a timestamp as DD/MM/YYYY, HH:MM:SS (24h) in the site timezone.
    Naive values and strings without an offset are taken as UTC.
    """
    if isinstance(value, str):
        value = _parse_iso(value)
    value = _as_aware(value, timezone.utc)
    return value.astimezone(tz or site_timezone()).strftime(DISPLAY_FORMAT)


def visit_deadline(
    visit_date: date,
    visit_time: time,
    max_hours: float = DEFAULT_MAX_VISIT_HOURS,
    tz: Optional[tzinfo] = None,
) -> datetime:
    """End of the visit window: visit date + visit time + max_hours."""
    start = datetime.combine(visit_date, visit_time.replace(tzinfo=None), tzinfo=tz or site_timezone())
    return start + timedelta(hours=max_hours)


def is_visit_overdue(
    visit_date: date,
    visit_time: time,
    max_hours: float = DEFAULT_MAX_VISIT_HOURS,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """
    True once `now` is strictly past the end of the visit window.
    A naive `now` is read as site-local wall-clock time.
    """
    tz = tz or site_timezone()
    current = _as_aware(now, tz) if now is not None else datetime.now(tz)
    return current > visit_deadline(visit_date, visit_time, max_hours, tz=tz)


def is_expired(expiry_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Announcement expiry predicate; no expiry date means never expired."""
    if expiry_date is None:
        return False
    current = _as_aware(now, timezone.utc) if now is not None else get_current_date_time()
    return _as_aware(expiry_date, timezone.utc) < current
