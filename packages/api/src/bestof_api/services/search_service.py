"""Public search over the Firestore mirror of every category."""

from __future__ import annotations

from typing import Any

import structlog
from firebase_admin import firestore

from bestof_shared.constants import (
    FIRESTORE_IN_QUERY_LIMIT,
    MIN_SEARCH_QUERY_LENGTH,
    SEARCH_RESULT_KEYS,
    UNIVERSAL_SEARCH_RESULTS_PER_CATEGORY,
    UNIVERSAL_SEARCH_SCAN_LIMIT,
)
from bestof_shared.db import get_firestore_client

from bestof_api.utils.cache import search_cache
from bestof_api.utils.filtering import text_matches

logger = structlog.get_logger(__name__)

SHORT_QUERY_MESSAGE = f"Query must be at least {MIN_SEARCH_QUERY_LENGTH} characters"
UNIVERSAL_FIELDS = ("name", "description", "short_description", "area")
RESTAURANT_FIELDS = ("name", "description", "area")
ATTRACTION_FIELDS = ("name", "short_description", "description", "area")

# Collection -> singular result type
RESULT_TYPES: dict[str, str] = {
    "restaurants": "restaurant",
    "hotels": "hotel",
    "malls": "mall",
    "attractions": "attraction",
    "schools": "school",
    "fitness_places": "fitness",
}


def is_short_query(q: str | None) -> bool:
    return len((q or "").strip()) < MIN_SEARCH_QUERY_LENGTH


def _docs(query) -> list[dict[str, Any]]:
    return [{"id": s.id, **(s.to_dict() or {})} for s in query.stream()]


def _chunks(values: list[str], size: int = FIRESTORE_IN_QUERY_LIMIT) -> list[list[str]]:
    return [values[i : i + size] for i in range(0, len(values), size)]


def _lookup(collection: str, ids: set[str]) -> dict[str, dict[str, Any]]:
    """Fetch documents by their `id` field with chunked "in" queries."""
    db = get_firestore_client()
    found: dict[str, dict[str, Any]] = {}
    for chunk in _chunks(sorted(ids)):
        for doc in _docs(db.collection(collection).where("id", "in", chunk)):
            found[str(doc["id"])] = doc
    return found


def _universal_result(doc: dict[str, Any], result_type: str) -> dict[str, Any]:
    description = doc.get("description") or ""
    images = doc.get("images") or []
    return {
        "id": doc["id"],
        "slug": doc.get("slug"),
        "name": doc.get("name"),
        "short_description": doc.get("short_description") or description[:100],
        "area": doc.get("area"),
        "hero_image": doc.get("hero_image") or (images[0] if images else None),
        "rating": doc.get("google_rating") or doc.get("overall_rating"),
        "type": result_type,
    }


def universal_search(q: str | None) -> dict[str, Any]:
    """Top matches per category across every public collection."""
    empty: dict[str, Any] = {key: [] for key in SEARCH_RESULT_KEYS.values()}
    if is_short_query(q):
        return {**empty, "totalResults": 0, "message": SHORT_QUERY_MESSAGE}

    term = (q or "").strip()
    cache_key = f"universal:{term.lower()}"
    cached = search_cache.get(cache_key)
    if cached is not None:
        return cached

    db = get_firestore_client()
    results: dict[str, Any] = dict(empty)
    total = 0
    for collection, key in SEARCH_RESULT_KEYS.items():
        docs = _docs(
            db.collection(collection)
            .where("active", "==", True)
            .limit(UNIVERSAL_SEARCH_SCAN_LIMIT)
        )
        matches = [
            _universal_result(doc, RESULT_TYPES[collection])
            for doc in docs
            if text_matches(doc, UNIVERSAL_FIELDS, term)
        ][:UNIVERSAL_SEARCH_RESULTS_PER_CATEGORY]
        results[key] = matches
        total += len(matches)

    results["totalResults"] = total
    logger.info("universal_search", query=term, total=total)
    search_cache.set(cache_key, results)
    return results


def search_restaurants(
    q: str | None = None,
    *,
    cuisine: str | None = None,
    area: str | None = None,
    limit: int = 20,
) -> dict[str, Any]:
    """Restaurants ordered by overall rating, optionally filtered by cuisine id and area."""
    if q is not None and is_short_query(q):
        return {"results": [], "total": 0, "message": SHORT_QUERY_MESSAGE}

    cache_key = f"restaurants:{(q or '').strip().lower()}:{cuisine}:{area}:{limit}"
    return search_cache.get_or_compute(
        cache_key, lambda: _search_restaurants(q, cuisine=cuisine, area=area, limit=limit)
    )


def _search_restaurants(
    q: str | None, *, cuisine: str | None, area: str | None, limit: int
) -> dict[str, Any]:
    db = get_firestore_client()
    query = db.collection("restaurants")
    if cuisine:
        query = query.where("restaurant_cuisine_ids", "array_contains", cuisine)
    if area:
        query = query.where("area", "==", area)
    query = query.order_by("overall_rating", direction=firestore.Query.DESCENDING).limit(
        UNIVERSAL_SEARCH_SCAN_LIMIT
    )

    docs = _docs(query)
    if q:
        docs = [d for d in docs if text_matches(d, RESTAURANT_FIELDS, q)]
    docs = docs[:limit]

    cuisine_ids = {str(c) for d in docs for c in d.get("restaurant_cuisine_ids") or []}
    cuisines = _lookup("restaurants_cuisines", cuisine_ids) if cuisine_ids else {}
    for doc in docs:
        doc["cuisines"] = [
            cuisines[str(c)]
            for c in doc.get("restaurant_cuisine_ids") or []
            if str(c) in cuisines
        ]

    return {"results": docs, "total": len(docs)}


def search_attractions(
    q: str | None,
    *,
    category: str | None = None,
    area: str | None = None,
    limit: int = 20,
) -> dict[str, Any]:
    """Active attractions matching the query, best rated first."""
    if is_short_query(q):
        return {"results": [], "total": 0, "message": SHORT_QUERY_MESSAGE}

    cache_key = f"attractions:{(q or '').strip().lower()}:{category}:{area}:{limit}"
    return search_cache.get_or_compute(
        cache_key, lambda: _search_attractions(q or "", category=category, area=area, limit=limit)
    )


def _search_attractions(
    q: str, *, category: str | None, area: str | None, limit: int
) -> dict[str, Any]:
    db = get_firestore_client()
    query = db.collection("attractions").where("active", "==", True)
    if area:
        query = query.where("area", "==", area)
    docs = [
        d for d in _docs(query.limit(100)) if text_matches(d, ATTRACTION_FIELDS, q)
    ]

    category_ids = {str(c) for d in docs for c in d.get("attraction_category_ids") or []}
    categories = _lookup("attraction_categories", category_ids) if category_ids else {}
    for doc in docs:
        doc["categories"] = [
            categories[str(c)]
            for c in doc.get("attraction_category_ids") or []
            if str(c) in categories
        ]

    if category:
        docs = [
            d
            for d in docs
            if any(c.get("slug") == category or str(c.get("id")) == category for c in d["categories"])
        ]

    docs.sort(key=lambda d: d.get("google_rating") or 0, reverse=True)
    docs = docs[:limit]
    return {"results": docs, "total": len(docs)}
