from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dtp

_DAY_OFFSETS = {"today": 0, "tomorrow": 1, "yesterday": -1}


class TimestampFormatError(ValueError):
    def __init__(self, value: Any, timezone: str, reason: str = "") -> None:
        self.value = value
        self.timezone = timezone
        msg = f"Cannot format timestamp {value!r} in timezone {timezone!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


def _zone(timezone: str, value: Any) -> ZoneInfo:
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise TimestampFormatError(value, timezone, "unknown timezone") from exc


def _to_datetime(value: Any, tz: ZoneInfo, timezone: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        raise TimestampFormatError(value, timezone, "unsupported value type")

    text = value.strip()
    if not text:
        raise TimestampFormatError(value, timezone, "empty value")

    keyword = text.lower()
    if keyword == "now":
        return datetime.now(tz=tz)
    if keyword in _DAY_OFFSETS:
        local_midnight = datetime.now(tz=tz).replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
        return local_midnight + timedelta(days=_DAY_OFFSETS[keyword])

    try:
        return dtp.parse(text)
    except (ValueError, OverflowError) as exc:
        raise TimestampFormatError(value, timezone, str(exc)) from exc


def _format_utc(dt: datetime) -> str:
    # strftime("%Y") is not zero-padded below year 1000 on every platform.
    return (
        f"{dt.year:04d}{dt.month:02d}{dt.day:02d}"
        f"T{dt.hour:02d}{dt.minute:02d}{dt.second:02d}Z"
    )


def format_timestamp(value: Any, timezone: str) -> str:
    """Normalize ``value`` to the UTC form ``YYYYMMDDTHHMMSSZ``.

    Naive values are read as wall-clock time in ``timezone``. Values that carry
    their own offset (an ISO offset, or the trailing ``Z`` of an already
    normalized stamp) keep it, so normalizing twice gives the same text.
    """
    tz = _zone(timezone, value)
    dt = _to_datetime(value, tz, timezone)
    try:
        # utcoffset() raises ValueError for parsed offsets of 24h or more.
        if dt.tzinfo is None or dt.utcoffset() is None:
            dt = dt.replace(tzinfo=tz)
        utc = dt.astimezone(dt_timezone.utc)
    except (ValueError, OverflowError) as exc:
        raise TimestampFormatError(value, timezone, str(exc)) from exc
    return _format_utc(utc)
