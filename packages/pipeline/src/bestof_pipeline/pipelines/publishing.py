"""
pipelines/publishing.py — Bulk publish, backup and rollback of draft records.

A draft is a record whose extraction finished but that an admin has not
verified yet:
  - restaurants: status == "active" and verified == False
  - hotels:      extraction_status == "completed" and verified == False

Always take a backup before publishing; rollback() restores the visibility
flags recorded in that file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from bestof_shared.status import publish_values
from bestof_shared.time_utils import utc_now

from bestof_pipeline.loaders.place_store import PlaceStore, UpdateResult

log = structlog.get_logger(__name__)

DRAFT_CRITERIA: dict[str, dict[str, Any]] = {
    "restaurant": {"status": "active", "verified": False},
    "hotel": {"extraction_status": "completed", "verified": False},
}

# Backup file section per category
BACKUP_SECTIONS: dict[str, str] = {"restaurant": "restaurants", "hotel": "hotels"}

VISIBILITY_FLAGS = ("active", "verified", "published")


def find_drafts(store: PlaceStore) -> dict[str, list[dict[str, Any]]]:
    return {
        category: store.fetch(category, filters=criteria)
        for category, criteria in DRAFT_CRITERIA.items()
    }


def backup_drafts(store: PlaceStore, directory: str | Path = ".") -> Path:
    """Write every draft record to draft-backup-<timestamp>.json and return its path."""
    now = utc_now()
    drafts = find_drafts(store)

    payload: dict[str, Any] = {
        "timestamp": now.isoformat(),
        "purpose": "Backup before bulk publish of draft records",
    }
    for category, rows in drafts.items():
        payload[BACKUP_SECTIONS[category]] = {
            "count": len(rows),
            "criteria": DRAFT_CRITERIA[category],
            "data": rows,
        }

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"draft-backup-{now.strftime('%Y%m%dT%H%M%S')}.json"
    path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")

    log.info(
        "drafts_backed_up",
        path=str(path),
        **{BACKUP_SECTIONS[c]: len(rows) for c, rows in drafts.items()},
    )
    return path


def publish_drafts(store: PlaceStore, *, dry_run: bool = False) -> dict[str, UpdateResult]:
    """Publish every draft restaurant and hotel."""
    results: dict[str, UpdateResult] = {}
    for category, rows in find_drafts(store).items():
        values = publish_values()
        results[category] = store.update_many(
            category,
            {str(row["id"]): dict(values) for row in rows},
            dry_run=dry_run,
        )
    return results


def load_backup(path: str | Path) -> dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "timestamp" not in data:
        raise ValueError(f"{path} is not a draft backup file")
    return data


def rollback_values(row: dict[str, Any], now: str) -> dict[str, Any]:
    """
    Undo publish_values() for one backed-up row.

    Flags missing from the backup were unset on the draft, so they go back
    to False; published_at returns to its backed-up value (usually None).
    """
    values: dict[str, Any] = {flag: bool(row.get(flag)) for flag in VISIBILITY_FLAGS}
    values["published_at"] = row.get("published_at")
    values["updated_at"] = now
    return values


def rollback(store: PlaceStore, backup: dict[str, Any]) -> dict[str, UpdateResult]:
    """Restore the visibility state of every record listed in a backup."""
    results: dict[str, UpdateResult] = {}
    now = utc_now().isoformat()
    for category, section in BACKUP_SECTIONS.items():
        records = (backup.get(section) or {}).get("data") or []
        updates = {str(row["id"]): rollback_values(row, now) for row in records}
        results[category] = store.update_many(category, updates)
    log.info("rollback_complete", backup_timestamp=backup.get("timestamp"))
    return results


def top_candidates(store: PlaceStore, category: str, limit: int) -> list[dict[str, Any]]:
    """The `limit` most-reviewed records that have a rating and a place id."""
    rows = [
        row
        for row in store.fetch(category)
        if row.get("google_rating") is not None and row.get("google_place_id")
    ]
    rows.sort(key=lambda row: row.get("google_review_count") or 0, reverse=True)
    return rows[:limit]


def publish_top(
    store: PlaceStore,
    category: str,
    limit: int,
    *,
    dry_run: bool = False,
) -> tuple[list[dict[str, Any]], UpdateResult]:
    selected = top_candidates(store, category, limit)
    values = publish_values()
    result = store.update_many(
        category,
        {str(row["id"]): dict(values) for row in selected},
        dry_run=dry_run,
    )
    return selected, result
