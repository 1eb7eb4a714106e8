"""
Timestamp parsing helpers.
Curated files and provider feeds carry ISO-8601 strings with a trailing Z, an explicit
offset, or a bare date. Everything is normalized to aware UTC datetimes.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or date. Returns None when unparsable; naive values are UTC."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_range_end(value: Any) -> Optional[datetime]:
    """A bare end date covers the whole day (23:59:59Z); full timestamps are taken as-is."""
    if isinstance(value, str) and len(value.strip()) == 10:
        return parse_timestamp(value.strip() + "T23:59:59Z")
    return parse_timestamp(value)


def to_iso_z(dt: datetime) -> str:
    """Render an aware datetime as UTC ISO-8601 with a Z suffix."""
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return to_iso_z(utc_now())
