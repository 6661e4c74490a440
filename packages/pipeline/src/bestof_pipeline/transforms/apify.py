"""
transforms/apify.py — Map the stored Apify Google Maps payload onto record columns.

Records keep the raw scraper payload in `apify_output`. Columns that the
extraction left empty can be back-filled from it without another scrape.

Usage:
    from bestof_pipeline.transforms.apify import map_apify_fields, missing_field_updates

    mapped = map_apify_fields(row["apify_output"])
    updates = missing_field_updates(row, mapped)
"""

from __future__ import annotations

import re
from typing import Any

PRICE_LEVELS: dict[str, int] = {"$": 1, "$$": 2, "$$$": 3, "$$$$": 4}

DAY_KEYS: dict[str, str] = {
    "monday": "mon",
    "tuesday": "tue",
    "wednesday": "wed",
    "thursday": "thu",
    "friday": "fri",
    "saturday": "sat",
    "sunday": "sun",
}

_RANGE_SEPARATOR = re.compile(r"\s+to\s+|\s*[–-]\s*")
_TIME = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])?$")


def map_price_level(price: str | None) -> int | None:
    """Map "$" .. "$$$$" to 1..4. Unknown values map to None, never 0."""
    if not price:
        return None
    return PRICE_LEVELS.get(price.strip())


def to_24_hour(value: str) -> str | None:
    """Convert "8 AM" to "08:00" and "10:30 PM" to "22:30". Unparseable input gives None."""
    match = _TIME.match(value.strip().replace("\u202f", " "))
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    period = (match.group(3) or "").upper()
    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def normalize_hours(entries: Any) -> dict[str, dict[str, Any]] | None:
    """Apify openingHours [{day, hours}] -> {"mon": {open, close, closed}, ...}."""
    if not isinstance(entries, list):
        return None

    hours: dict[str, dict[str, Any]] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        day = DAY_KEYS.get(str(entry.get("day", "")).lower())
        text = str(entry.get("hours") or "")
        if day is None or not text:
            continue
        if "closed" in text.lower():
            hours[day] = {"open": None, "close": None, "closed": True}
            continue
        parts = _RANGE_SEPARATOR.split(text.replace("\u202f", " "))
        if len(parts) != 2:
            continue
        opens, closes = to_24_hour(parts[0]), to_24_hour(parts[1])
        if opens and closes:
            hours[day] = {"open": opens, "close": closes, "closed": False}
    return hours or None


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def map_apify_fields(payload: dict[str, Any] | None) -> dict[str, Any]:
    """Column values derivable from an Apify payload; missing values are omitted."""
    if not payload:
        return {}

    location = payload.get("location") or {}
    mapped = {
        "phone": _first(payload, "phone", "phoneUnformatted"),
        "website": _first(payload, "website", "url"),
        "email": _first(payload, "email"),
        "address": _first(payload, "address", "fullAddress"),
        "area": _first(payload, "neighborhood", "city", "area"),
        "latitude": location.get("lat") or payload.get("latitude"),
        "longitude": location.get("lng") or payload.get("longitude"),
        "google_rating": _first(payload, "totalScore", "rating"),
        "google_review_count": _first(payload, "reviewsCount"),
        "price_level": map_price_level(payload.get("price")),
        "hours": normalize_hours(payload.get("openingHours")),
    }
    return {k: v for k, v in mapped.items() if v is not None}


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def missing_field_updates(row: dict[str, Any], mapped: dict[str, Any]) -> dict[str, Any]:
    """Only the mapped values whose column is currently empty on the record."""
    return {k: v for k, v in mapped.items() if _is_empty(row.get(k))}
