"""
transforms/completeness.py — Field-population audit for a category.

Records are reduced to a boolean frame (one column per audited field, True
when the value is populated) and aggregated with polars.

Usage:
    from bestof_pipeline.transforms.completeness import completeness_report, field_groups_for

    report = completeness_report(rows, field_groups_for("hotel"))
    for group in report["groups"]:
        ...
"""

from __future__ import annotations

from typing import Any

import polars as pl

AUDIT_FIELD_GROUPS: dict[str, tuple[str, ...]] = {
    "Identity": ("name", "slug", "google_place_id"),
    "Location": ("address", "area", "latitude", "longitude"),
    "Contact": ("phone", "email", "website"),
    "Social Media": ("instagram", "facebook", "twitter", "tiktok"),
    "Ratings": ("google_rating", "google_review_count"),
    "Descriptions": ("description", "short_description"),
    "Images": ("hero_image", "photos"),
    "Admin Flags": ("active", "verified"),
    "Raw Data Sources": ("apify_output", "firecrawl_output"),
}

RESTAURANT_FIELD_GROUPS: dict[str, tuple[str, ...]] = {
    "Pricing": ("price_level",),
    "Hours": ("hours",),
}


def field_groups_for(category: str) -> dict[str, tuple[str, ...]]:
    if category == "restaurant":
        return {**AUDIT_FIELD_GROUPS, **RESTAURANT_FIELD_GROUPS}
    return dict(AUDIT_FIELD_GROUPS)


def is_populated(value: Any) -> bool:
    """None, "", [] and {} are empty. False and 0 count as populated."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, dict)):
        return len(value) > 0
    return True


def populated_frame(rows: list[dict[str, Any]], fields: list[str]) -> pl.DataFrame:
    return pl.DataFrame(
        {f: [is_populated(row.get(f)) for row in rows] for f in fields},
        schema={f: pl.Boolean for f in fields},
    )


def completeness_report(
    rows: list[dict[str, Any]],
    field_groups: dict[str, tuple[str, ...]],
) -> dict[str, Any]:
    """
    Returns:
        {"total": n, "groups": [{"group", "fields": [{"field", "populated", "percent"}],
        "percent"}]} where a group's percent is the mean of its fields.
    """
    fields = list(dict.fromkeys(f for group in field_groups.values() for f in group))
    total = len(rows)
    frame = populated_frame(rows, fields)

    counts = (
        frame.select([pl.col(f).cast(pl.Int64).sum().alias(f) for f in fields]).to_dicts()[0]
        if total
        else {f: 0 for f in fields}
    )

    def _percent(n: int) -> float:
        return round(n / total * 100, 1) if total else 0.0

    groups = []
    for name, group_fields in field_groups.items():
        field_stats = [
            {"field": f, "populated": counts[f], "percent": _percent(counts[f])}
            for f in group_fields
        ]
        mean = sum(s["percent"] for s in field_stats) / len(field_stats) if field_stats else 0.0
        groups.append({"group": name, "fields": field_stats, "percent": round(mean, 1)})

    return {"total": total, "groups": groups}
