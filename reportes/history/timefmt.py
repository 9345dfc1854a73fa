"""
Time renderings used by the history page and the export.

``time_ago`` walks seconds -> minutes -> hours -> days by integer division
and falls back to an absolute, locale-formatted date past one week.
"""
from __future__ import annotations

import datetime
import math

from babel.dates import format_date, format_datetime, format_time, get_datetime_format, get_timezone

from reportes.core.config import get_settings
from reportes.core.utils import as_utc, utc_now

_WEEK_DAYS = 7

# Numeric day/month/year layout of the Spanish locale.
_LOCAL_PATTERN = "d/M/yyyy, H:mm:ss"


def _zone(tz: str | None):
    return get_timezone(tz or get_settings().display_timezone)


def absolute_datetime(ts: datetime.datetime, locale: str | None = None, tz: str | None = None) -> str:
    """Medium date + short time, e.g. ``18 oct 2026, 14:05``."""
    locale = locale or get_settings().locale
    zone = _zone(tz)
    local = as_utc(ts).astimezone(zone)
    date_part = format_date(local.date(), format="medium", locale=locale)
    time_part = format_time(local, format="short", tzinfo=zone, locale=locale)
    return get_datetime_format("medium", locale=locale).format(time_part, date_part)


def time_ago(ts: datetime.datetime, now: datetime.datetime | None = None) -> str:
    now = as_utc(now) if now is not None else utc_now()
    ts = as_utc(ts)
    seconds = math.floor((now - ts).total_seconds())

    if seconds < 60:
        return "hace unos segundos"
    minutes = seconds // 60
    if minutes < 60:
        return f"hace {minutes} min"
    hours = minutes // 60
    if hours < 24:
        return f"hace {hours} h"
    days = hours // 24
    # exactly one week old still reads as relative
    if seconds <= _WEEK_DAYS * 86400:
        return f"hace {days} día{'s' if days > 1 else ''}"
    return absolute_datetime(ts)


def iso_utc(ts: datetime.datetime) -> str:
    """Strict ISO-8601 in UTC with milliseconds: ``2024-01-01T00:00:00.000Z``."""
    ts = as_utc(ts)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def local_datetime(ts: datetime.datetime, locale: str | None = None, tz: str | None = None) -> str:
    """Spanish short numeric rendering, e.g. ``1/1/2024, 0:00:00``."""
    locale = locale or get_settings().locale
    return format_datetime(as_utc(ts), _LOCAL_PATTERN, tzinfo=_zone(tz), locale=locale)
