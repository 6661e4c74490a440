"""transforms/scoring.py — Completeness score for records that never finished extraction."""

from __future__ import annotations

from typing import Any

# Place ids that were never resolved
PLACEHOLDER_PLACE_IDS = frozenset({"", "NEEDS_LOOKUP"})

# Below this score a record without Apify data holds nothing worth keeping
DELETE_THRESHOLD = 30


def lacks_place_id(row: dict[str, Any]) -> bool:
    place_id = row.get("google_place_id")
    return place_id is None or place_id in PLACEHOLDER_PLACE_IDS


def incomplete_score(row: dict[str, Any]) -> dict[str, Any]:
    """
    Score 0-100: Apify payload 40, description 30, hero image 20, and
    2 per photo up to 10.
    """
    has_apify = bool(row.get("apify_output"))
    has_description = bool(row.get("description"))
    has_hero_image = row.get("hero_image") is not None
    photos = len(row.get("photos") or [])

    score = (
        (40 if has_apify else 0)
        + (30 if has_description else 0)
        + (20 if has_hero_image else 0)
        + min(10, photos * 2)
    )
    return {
        "has_apify": has_apify,
        "has_description": has_description,
        "has_hero_image": has_hero_image,
        "photos_count": photos,
        "completeness": score,
    }


def should_delete(score: dict[str, Any]) -> bool:
    return not score["has_apify"] and score["completeness"] < DELETE_THRESHOLD
