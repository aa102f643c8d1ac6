"""Timezone helpers."""

from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "Asia/Jakarta"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def load_timezone(name: str | None, fallback: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    """Return a ``ZoneInfo`` for ``name``, falling back when it is unknown."""

    try:
        return ZoneInfo(name or fallback)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(fallback)


def format_local(value: dt.datetime | None, tz: ZoneInfo) -> str:
    """Render ``value`` in ``tz``; naive datetimes are taken as UTC."""

    if value is None:
        return "-"
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    local = value.astimezone(tz)
    return f"{local.strftime(TIMESTAMP_FORMAT)} ({tz.key})"
