"""
time_utils.py — UTC timestamp helpers.

Supabase returns timestamptz columns as ISO-8601 strings, Firestore returns
datetime objects, and the admin frontend sends "Z"-suffixed ISO strings.
These helpers normalise all three.

Usage:
    from bestof_shared.time_utils import utc_now_iso, parse_timestamp

    row["updated_at"] = utc_now_iso()
    started = parse_timestamp(row.get("created_at"))
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def parse_timestamp(raw: Any) -> datetime | None:
    """
    Parse a timestamp value into an aware UTC datetime.

    Accepts datetime objects, dates, and ISO-8601 strings (including the
    JavaScript "Z" suffix). Naive values are assumed to be UTC.
    Returns None for empty or unparseable input.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, date):
        dt = datetime(raw.year, raw.month, raw.day)
    elif isinstance(raw, str):
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(value: Any) -> str | None:
    """Serialise a datetime-like value for JSON responses."""
    dt = parse_timestamp(value)
    return dt.isoformat() if dt else None
