"""
pipelines/cleanup.py — Data repair jobs.

Every job plans its changes first and only writes when apply=True, so a
dry run prints exactly what would change.

    fixes, result = fix_slugs(store, "fitness", apply=True)
    print(result.records_updated, result.records_failed)
"""

from __future__ import annotations

from typing import Any

import structlog

from bestof_shared.constants import SOCIAL_URL_PREFIXES
from bestof_shared.time_utils import utc_now_iso

from bestof_pipeline.loaders.place_store import PlaceStore, UpdateResult
from bestof_pipeline.transforms.apify import map_apify_fields, missing_field_updates
from bestof_pipeline.transforms.scoring import incomplete_score, lacks_place_id, should_delete
from bestof_pipeline.transforms.slugs import plan_slug_fixes
from bestof_pipeline.transforms.social import social_link_fixes

log = structlog.get_logger(__name__)

SOCIAL_COLUMNS = tuple(SOCIAL_URL_PREFIXES)


def _stamped(values: dict[str, Any]) -> dict[str, Any]:
    return {**values, "updated_at": utc_now_iso()}


# ---------------------------------------------------------------------------
# Incomplete records
# ---------------------------------------------------------------------------

def find_incomplete(store: PlaceStore, category: str) -> list[dict[str, Any]]:
    """Score every record without a resolved place id, worst first."""
    report = []
    for row in store.fetch(category):
        if not lacks_place_id(row):
            continue
        score = incomplete_score(row)
        report.append(
            {
                "id": str(row["id"]),
                "name": row.get("name"),
                "slug": row.get("slug"),
                **score,
                "delete": should_delete(score),
            }
        )
    report.sort(key=lambda r: r["completeness"])
    log.info(
        "incomplete_scored",
        category=category,
        incomplete=len(report),
        deletable=sum(1 for r in report if r["delete"]),
    )
    return report


def delete_incomplete(
    store: PlaceStore,
    category: str,
    report: list[dict[str, Any]],
    *,
    dry_run: bool = False,
) -> UpdateResult:
    return store.delete_many(
        category,
        [r["id"] for r in report if r["delete"]],
        dry_run=dry_run,
    )


# ---------------------------------------------------------------------------
# Slugs / social links / Apify back-fill
# ---------------------------------------------------------------------------

def fix_slugs(
    store: PlaceStore,
    category: str,
    *,
    apply: bool = False,
) -> tuple[list[dict[str, Any]], UpdateResult]:
    rows = store.fetch(category, columns=["id", "name", "slug"])
    fixes = plan_slug_fixes(rows)
    result = store.update_many(
        category,
        {fix["id"]: _stamped({"slug": fix["new"]}) for fix in fixes},
        dry_run=not apply,
    )
    return fixes, result


def fix_social_links(
    store: PlaceStore,
    category: str,
    *,
    apply: bool = False,
) -> tuple[list[dict[str, Any]], UpdateResult]:
    fixes = []
    for row in store.fetch(category):
        changes = social_link_fixes(row, SOCIAL_COLUMNS)
        if changes:
            fixes.append({"id": str(row["id"]), "name": row.get("name"), "changes": changes})
    result = store.update_many(
        category,
        {fix["id"]: _stamped(fix["changes"]) for fix in fixes},
        dry_run=not apply,
    )
    return fixes, result


def populate_fields(
    store: PlaceStore,
    category: str,
    *,
    apply: bool = False,
) -> tuple[list[dict[str, Any]], UpdateResult]:
    """Fill empty columns from each record's stored apify_output."""
    fixes = []
    for row in store.fetch(category):
        updates = missing_field_updates(row, map_apify_fields(row.get("apify_output")))
        if updates:
            fixes.append({"id": str(row["id"]), "name": row.get("name"), "changes": updates})
    result = store.update_many(
        category,
        {fix["id"]: _stamped(fix["changes"]) for fix in fixes},
        dry_run=not apply,
    )
    return fixes, result
