"""
pipelines/reports.py — Read-only reports over place records.

Aggregation is done with polars on a frame built from the fetched rows.
"""

from __future__ import annotations

from typing import Any

import polars as pl

from bestof_shared.constants import CATEGORIES
from bestof_shared.status import extraction_status_field
from bestof_shared.time_utils import parse_timestamp

from bestof_pipeline.loaders.place_store import PlaceStore
from bestof_pipeline.transforms.completeness import completeness_report, field_groups_for
from bestof_pipeline.transforms.duplicates import find_duplicates


def _created_day(row: dict[str, Any]) -> str | None:
    ts = parse_timestamp(row.get("created_at"))
    return ts.date().isoformat() if ts else None


def _status_frame(rows: list[dict[str, Any]], category: str) -> pl.DataFrame:
    field = extraction_status_field(category)
    return pl.DataFrame(
        {
            "status": [row.get(field) or "pending" for row in rows],
            "area": [row.get("area") or "Unknown" for row in rows],
            "day": [_created_day(row) for row in rows],
        },
        schema={"status": pl.String, "area": pl.String, "day": pl.String},
    )


def _counts(frame: pl.DataFrame, column: str) -> dict[str, int]:
    grouped = (
        frame.drop_nulls(column)
        .group_by(column)
        .agg(pl.len().alias("n"))
        .sort(["n", column], descending=[True, False])
    )
    return {row[column]: row["n"] for row in grouped.to_dicts()}


def status_counts(store: PlaceStore) -> dict[str, dict[str, int]]:
    """{category: {status: count}} across every category. Missing status counts as pending."""
    report = {}
    for category in CATEGORIES:
        field = extraction_status_field(category)
        rows = store.fetch(category, columns=["id", field])
        report[category] = _counts(_status_frame(rows, category), "status")
    return report


def progress(store: PlaceStore, category: str) -> dict[str, Any]:
    """Status counts, area distribution and records created per day."""
    rows = store.fetch(category)
    frame = _status_frame(rows, category)
    by_status = _counts(frame, "status")
    per_day = dict(sorted(_counts(frame, "day").items()))
    total = len(rows)
    completed = by_status.get("completed", 0) + (
        by_status.get("active", 0) if category == "restaurant" else 0
    )
    return {
        "category": category,
        "total": total,
        "by_status": by_status,
        "completed_percent": round(completed / total * 100, 1) if total else 0.0,
        "by_area": _counts(frame, "area"),
        "per_day": per_day,
        "daily_rate": round(total / len(per_day), 1) if per_day else 0.0,
    }


def audit(store: PlaceStore, category: str) -> dict[str, Any]:
    report = completeness_report(store.fetch(category), field_groups_for(category))
    return {"category": category, **report}


def duplicates(store: PlaceStore, category: str) -> dict[str, Any]:
    rows = store.fetch(category, columns=["id", "name", "slug", "area", "google_place_id"])
    return {"category": category, **find_duplicates(rows)}
