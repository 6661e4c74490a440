"""Admin dashboard counts per category."""

from __future__ import annotations

from typing import Any

from bestof_shared.constants import CATEGORIES, CATEGORY_TABLES, FIRESTORE_CATEGORIES
from bestof_shared.db import get_firestore_client, get_supabase_client
from bestof_shared.status import display_status

from bestof_api.utils.cache import stats_cache

STATUS_BUCKETS = ("published", "draft", "processing", "failed", "pending")


def _rows(category: str) -> list[dict[str, Any]]:
    table = CATEGORY_TABLES[category]
    if category in FIRESTORE_CATEGORIES:
        query = get_firestore_client().collection(table).select(["active", "verified", "status"])
        return [s.to_dict() or {} for s in query.stream()]
    result = (
        get_supabase_client(service_role=True)
        .table(table)
        .select("active, verified, extraction_status")
        .execute()
    )
    return result.data or []


def category_counts(category: str) -> dict[str, int]:
    counts = {bucket: 0 for bucket in STATUS_BUCKETS}
    rows = _rows(category)
    for row in rows:
        counts[display_status(row, category)] += 1
    return {"total": len(rows), **counts}


def _compute_dashboard_stats() -> dict[str, Any]:
    by_category = {category: category_counts(category) for category in CATEGORIES}
    totals = {
        key: sum(c[key] for c in by_category.values())
        for key in ("total", *STATUS_BUCKETS)
    }
    return {"categories": by_category, "totals": totals}


def dashboard_stats() -> dict[str, Any]:
    return stats_cache.get_or_compute("dashboard", _compute_dashboard_stats)
