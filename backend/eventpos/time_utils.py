from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Read a client-supplied instant (query string `as_of`) as UTC-naive.

    Blank or missing gives None. Offsets and a trailing "Z" are honoured;
    a value without an offset is taken as UTC. Raises ValueError when the
    text is not ISO-8601.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    return to_utc_naive(datetime.fromisoformat(text))


def to_utc_naive(dt: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are already UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def to_event_local(dt: datetime, tz_name: str) -> datetime:
    """UTC-naive (or aware) datetime -> aware datetime in the event timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(ZoneInfo(tz_name))


def event_day(dt: datetime, tz_name: str) -> date:
    """Calendar day of dt as seen at the venue."""
    return to_event_local(dt, tz_name).date()


def fractional_hour(dt: datetime, tz_name: str) -> float:
    """Local wall-clock hour with minutes as a fraction (13:30 -> 13.5)."""
    local = to_event_local(dt, tz_name)
    return local.hour + local.minute / 60
