"""
transforms/duplicates.py — Group records that look like the same place.

Two strategies:
  - identical google_place_id
  - identical normalized name ("The Fisherman's Wharf Restaurant" and
    "Fishermans Wharf" both normalize to "fishermans wharf")
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Any

_LEADING_THE = re.compile(r"^the\s+")
_GENERIC_SUFFIX = re.compile(
    r"\s+(restaurant|resto|cafe|café|coffee|coffeeshop|shop|grill|kitchen|bistro|lounge|bar|pub)$"
)
_APOSTROPHES = re.compile(r"['’]")
_PUNCTUATION = re.compile(r"[.,\-_]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    value = (name or "").lower().strip()
    value = _LEADING_THE.sub("", value)
    value = _GENERIC_SUFFIX.sub("", value)
    value = value.replace("&", "and")
    value = _APOSTROPHES.sub("", value)
    value = _PUNCTUATION.sub(" ", value)
    return _WHITESPACE.sub(" ", value).strip()


def _summary(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "slug": row.get("slug"),
        "area": row.get("area"),
    }


def find_duplicates(rows: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """
    Return {"by_place_id": [...], "by_name": [...]} groups of two or more records.

    Each group is {"key": ..., "records": [{id, name, slug, area}, ...]}.
    """
    by_place_id: dict[str, list[dict[str, Any]]] = defaultdict(list)
    by_name: dict[str, list[dict[str, Any]]] = defaultdict(list)

    for row in rows:
        place_id = row.get("google_place_id")
        if place_id:
            by_place_id[place_id].append(_summary(row))
        key = normalize_name(row.get("name"))
        if key:
            by_name[key].append(_summary(row))

    def _groups(index: dict[str, list[dict[str, Any]]]) -> list[dict[str, Any]]:
        return [
            {"key": key, "records": records}
            for key, records in sorted(index.items())
            if len(records) > 1
        ]

    return {"by_place_id": _groups(by_place_id), "by_name": _groups(by_name)}
