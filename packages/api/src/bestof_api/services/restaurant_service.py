"""Restaurant records stored in Firestore.

Documents live in the `restaurants` collection keyed by slug. The
extraction state is kept in `status` ("importing", "processing",
"active", "failed") with per-step progress in `job_progress`.

Functions mirror place_service so the admin routes can dispatch on category.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog

from bestof_shared.constants import CATEGORY_TABLES, EXTRACTION_STEPS
from bestof_shared.db import get_firestore_client
from bestof_shared.status import (
    display_status,
    extraction_status_field,
    initial_progress,
    progress_summary,
    publish_values,
    unpublish_values,
)
from bestof_shared.text import generate_place_slug, is_probable_duplicate, make_unique_slug
from bestof_shared.time_utils import parse_timestamp, utc_now_iso

from bestof_api.errors import ConflictError, NotFoundError, ValidationError
from bestof_api.services.place_service import filter_update_fields
from bestof_api.utils.filtering import status_matches, text_matches

logger = structlog.get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _collection(category: str):
    return get_firestore_client().collection(CATEGORY_TABLES[category])


def _to_row(snapshot) -> dict[str, Any]:
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


def _snapshot(category: str, doc_id: str):
    """Look up by document id, then by the `slug` field."""
    snapshot = _collection(category).document(doc_id).get()
    if snapshot.exists:
        return snapshot
    for match in _collection(category).where("slug", "==", doc_id).limit(1).stream():
        return match
    return None


def _created_key(row: dict[str, Any]) -> datetime:
    return parse_timestamp(row.get("created_at")) or _EPOCH


# ---------------------------------------------------------------------------
# Single record
# ---------------------------------------------------------------------------

def get_place(category: str, place_id: str) -> dict[str, Any] | None:
    snapshot = _snapshot(category, place_id)
    if snapshot is None:
        return None
    row = _to_row(snapshot)
    row["display_status"] = display_status(row, category)
    return row


def get_many(category: str, ids: list[str]) -> list[dict[str, Any]]:
    rows = []
    for doc_id in ids:
        snapshot = _collection(category).document(doc_id).get()
        if snapshot.exists:
            rows.append(_to_row(snapshot))
    return rows


def update_place(category: str, place_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    values = filter_update_fields(category, payload)
    if not values:
        raise ValidationError("No editable fields supplied")
    values["updated_at"] = utc_now_iso()

    snapshot = _snapshot(category, place_id)
    if snapshot is None:
        raise NotFoundError("Restaurant not found", details={"id": place_id})
    snapshot.reference.update(values)
    logger.info("place_updated", category=category, id=snapshot.id, fields=sorted(values))
    return {**_to_row(snapshot), **values}


def delete_place(category: str, place_id: str) -> dict[str, Any]:
    snapshot = _snapshot(category, place_id)
    if snapshot is None:
        raise NotFoundError("Restaurant not found", details={"id": place_id})
    snapshot.reference.delete()
    logger.info("place_deleted", category=category, id=snapshot.id)
    return {"id": snapshot.id, "deleted": True, "child_tables": {}}


def set_published(category: str, place_id: str, published: bool) -> dict[str, Any]:
    snapshot = _snapshot(category, place_id)
    if snapshot is None:
        raise NotFoundError("Restaurant not found", details={"id": place_id})
    values = publish_values() if published else unpublish_values()
    snapshot.reference.update(values)
    logger.info(
        "place_published" if published else "place_unpublished",
        category=category,
        id=snapshot.id,
    )
    row = {**_to_row(snapshot), **values}
    row["display_status"] = display_status(row, category)
    return row


# ---------------------------------------------------------------------------
# Listings (filtered in memory; Firestore has no ilike)
# ---------------------------------------------------------------------------

def _all_rows(category: str) -> list[dict[str, Any]]:
    rows = [_to_row(s) for s in _collection(category).stream()]
    rows.sort(key=_created_key, reverse=True)
    return rows


def list_places(
    category: str,
    *,
    status: str | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    rows = []
    for row in _all_rows(category):
        row["display_status"] = display_status(row, category)
        if not status_matches(row, status, extraction_status_field(category)):
            continue
        if search and not text_matches(row, ("name",), search):
            continue
        row.pop("job_progress", None)
        row.pop("apify_output", None)
        row.pop("firecrawl_output", None)
        rows.append(row)
    return rows[offset : offset + limit], len(rows)


def list_queue(
    category: str,
    *,
    status: str | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    steps = EXTRACTION_STEPS[category]
    items = []
    for row in _all_rows(category):
        row_status = row.get("status")
        if status and status != "all":
            wanted = {"processing", "importing"} if status == "processing" else {status}
            if row_status not in wanted:
                continue
        if search and not text_matches(row, ("name",), search):
            continue
        summary = progress_summary(row.get("job_progress"), steps)
        items.append(
            {
                "id": row["id"],
                "name": row.get("name"),
                "slug": row.get("slug"),
                "area": row.get("area"),
                "extraction_status": row_status,
                "created_at": row.get("created_at"),
                "updated_at": row.get("updated_at"),
                "progress_percentage": summary["progress_percentage"],
                "completed_steps": summary["completed_steps"],
                "total_steps": summary["total_steps"],
                "current_step": summary["current_step"],
                "error_message": summary["error_message"],
            }
        )
    return items[offset : offset + limit], len(items)


def extraction_status(category: str, place_id: str) -> dict[str, Any]:
    snapshot = _snapshot(category, place_id)
    if snapshot is None:
        raise NotFoundError("Restaurant not found", details={"id": place_id})
    row = _to_row(snapshot)
    summary = progress_summary(row.get("job_progress"), EXTRACTION_STEPS[category])
    return {
        "id": row["id"],
        "name": row.get("name"),
        "slug": row.get("slug"),
        "status": row.get("status") or "pending",
        "updated_at": row.get("updated_at"),
        **summary,
    }


# ---------------------------------------------------------------------------
# Duplicates and extraction start
# ---------------------------------------------------------------------------

def find_by_place_id(category: str, google_place_id: str) -> dict[str, Any] | None:
    query = _collection(category).where("google_place_id", "==", google_place_id).limit(1)
    for snapshot in query.stream():
        return _to_row(snapshot)
    return None


def existing_place_ids(category: str, place_ids: list[str]) -> dict[str, dict[str, Any]]:
    found: dict[str, dict[str, Any]] = {}
    for place_id in place_ids:
        row = find_by_place_id(category, place_id)
        if row is not None:
            found[place_id] = {
                "id": row["id"],
                "name": row.get("name"),
                "slug": row.get("slug"),
                "google_place_id": place_id,
                "extraction_status": row.get("status"),
            }
    return found


def find_duplicates(
    category: str,
    *,
    google_place_id: str,
    name: str,
    area: str | None,
) -> dict[str, Any]:
    exact = find_by_place_id(category, google_place_id)
    if exact is not None:
        return {"is_duplicate": True, "match_type": "exact", "matches": [_summary(exact)]}

    candidates = _collection(category).select(["name", "area", "slug", "google_place_id"])
    fuzzy = []
    for snapshot in candidates.stream():
        row = _to_row(snapshot)
        if is_probable_duplicate(name, area, row.get("name", ""), row.get("area")):
            fuzzy.append(_summary(row))
    if fuzzy:
        return {"is_duplicate": True, "match_type": "fuzzy", "matches": fuzzy}
    return {"is_duplicate": False, "match_type": None, "matches": []}


def _summary(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "slug": row.get("slug"),
        "area": row.get("area"),
        "google_place_id": row.get("google_place_id"),
        "status": row.get("status"),
    }


def slug_exists(category: str, slug: str) -> bool:
    return _collection(category).document(slug).get().exists


def start_extraction(
    category: str,
    *,
    google_place_id: str,
    name: str,
    area: str | None = None,
    address: str | None = None,
    override: bool = False,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create the restaurant document (id = slug) with status "importing".

    A record that is still importing/processing always conflicts; a
    finished one conflicts unless `override`, which deletes it first.
    """
    existing = find_by_place_id(category, google_place_id)
    overridden = False
    if existing is not None:
        if existing.get("status") in ("importing", "processing"):
            raise ConflictError(
                "Extraction already in progress",
                details={"existing": _summary(existing)},
            )
        if not override:
            raise ConflictError(
                "Restaurant already exists",
                details={"existing": _summary(existing)},
            )
        _collection(category).document(existing["id"]).delete()
        overridden = True
        logger.info("extraction_override_deleted", category=category, id=existing["id"])

    slug = make_unique_slug(
        generate_place_slug(name, area, address),
        lambda candidate: slug_exists(category, candidate),
    )
    now = utc_now_iso()
    record = {
        **(extra or {}),
        "name": name,
        "slug": slug,
        "google_place_id": google_place_id,
        "area": area,
        "address": address,
        "status": "importing",
        "job_progress": initial_progress(category),
        "active": False,
        "verified": False,
        "created_at": now,
        "updated_at": now,
    }
    _collection(category).document(slug).set(record)
    logger.info("extraction_started", category=category, slug=slug, place_id=google_place_id)
    return {"id": slug, **record, "overridden": overridden}
