"""Directory records stored in Supabase (hotels, malls, schools, attractions, fitness)."""

from __future__ import annotations

from typing import Any

import structlog
from postgrest.exceptions import APIError

from bestof_shared.constants import (
    CATEGORY_TABLES,
    CHILD_FOREIGN_KEYS,
    CHILD_TABLES,
    EDITABLE_FIELDS,
    EXTRACTION_STEPS,
    PROTECTED_FIELDS,
)
from bestof_shared.db import get_supabase_client
from bestof_shared.models import CATEGORY_MODELS
from bestof_shared.status import (
    display_status,
    initial_progress,
    progress_summary,
    publish_values,
    unpublish_values,
)
from bestof_shared.text import generate_place_slug, is_probable_duplicate, make_unique_slug
from bestof_shared.time_utils import utc_now_iso

from bestof_api.errors import ConflictError, NotFoundError, UpstreamError, ValidationError
from bestof_api.utils.filtering import apply_status_filter, apply_text_search

logger = structlog.get_logger(__name__)

LIST_COLUMNS = (
    "id, name, slug, area, google_place_id, google_rating, google_review_count, "
    "hero_image, active, verified, extraction_status, created_at, updated_at, published_at"
)
QUEUE_COLUMNS = (
    "id, name, slug, area, extraction_status, extraction_progress, created_at, updated_at"
)


def _client():
    return get_supabase_client(service_role=True)


def filter_update_fields(category: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Drop system columns and, where a category has one, anything outside its allow-list."""
    allowed = EDITABLE_FIELDS.get(category)
    return {
        k: v
        for k, v in payload.items()
        if k not in PROTECTED_FIELDS and (allowed is None or k in allowed)
    }


# ---------------------------------------------------------------------------
# Single record
# ---------------------------------------------------------------------------

def get_place(category: str, place_id: str) -> dict[str, Any] | None:
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("*")
        .eq("id", place_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        return None
    row = result.data[0]
    row["display_status"] = display_status(row, category)
    return row


def get_many(category: str, ids: list[str]) -> list[dict[str, Any]]:
    if not ids:
        return []
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("*")
        .in_("id", ids)
        .execute()
    )
    return result.data or []


def update_place(category: str, place_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    values = filter_update_fields(category, payload)
    if not values:
        raise ValidationError("No editable fields supplied")
    values["updated_at"] = utc_now_iso()

    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .update(values)
        .eq("id", place_id)
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"{category.title()} not found", details={"id": place_id})
    logger.info("place_updated", category=category, id=place_id, fields=sorted(values))
    return result.data[0]


def delete_place(category: str, place_id: str) -> dict[str, Any]:
    """Delete child rows first, then the record. Child failures are logged and skipped."""
    if get_place(category, place_id) is None:
        raise NotFoundError(f"{category.title()} not found", details={"id": place_id})

    client = _client()
    fk = CHILD_FOREIGN_KEYS[category]
    children: dict[str, str] = {}
    for table in CHILD_TABLES[category]:
        try:
            client.table(table).delete().eq(fk, place_id).execute()
            children[table] = "deleted"
        except APIError as exc:
            logger.warning(
                "child_delete_failed", category=category, table=table, id=place_id,
                error=exc.message,
            )
            children[table] = "failed"

    try:
        client.table(CATEGORY_TABLES[category]).delete().eq("id", place_id).execute()
    except APIError as exc:
        raise UpstreamError(
            f"Failed to delete {category}", details={"id": place_id, "error": exc.message}
        ) from exc

    logger.info("place_deleted", category=category, id=place_id, children=children)
    return {"id": place_id, "deleted": True, "child_tables": children}


def set_published(category: str, place_id: str, published: bool) -> dict[str, Any]:
    values = publish_values() if published else unpublish_values()
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .update(values)
        .eq("id", place_id)
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"{category.title()} not found", details={"id": place_id})
    logger.info(
        "place_published" if published else "place_unpublished",
        category=category,
        id=place_id,
    )
    row = result.data[0]
    row["display_status"] = display_status(row, category)
    return row


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def list_places(
    category: str,
    *,
    status: str | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    query = _client().table(CATEGORY_TABLES[category]).select(LIST_COLUMNS, count="exact")
    query = apply_status_filter(query, status)
    query = apply_text_search(query, "name", search)
    result = (
        query.order("created_at", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )
    rows = result.data or []
    for row in rows:
        row["display_status"] = display_status(row, category)
    return rows, result.count


def list_queue(
    category: str,
    *,
    status: str | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    query = _client().table(CATEGORY_TABLES[category]).select(QUEUE_COLUMNS, count="exact")
    if status and status != "all":
        query = query.eq("extraction_status", status)
    query = apply_text_search(query, "name", search)
    result = (
        query.order("created_at", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )
    steps = EXTRACTION_STEPS[category]
    items = []
    for row in result.data or []:
        summary = progress_summary(row.pop("extraction_progress", None), steps)
        items.append(
            {
                **row,
                "progress_percentage": summary["progress_percentage"],
                "completed_steps": summary["completed_steps"],
                "total_steps": summary["total_steps"],
                "current_step": summary["current_step"],
                "error_message": summary["error_message"],
            }
        )
    return items, result.count


def extraction_status(category: str, place_id: str) -> dict[str, Any]:
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("id, name, slug, extraction_status, extraction_progress, updated_at")
        .eq("id", place_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"{category.title()} not found", details={"id": place_id})
    row = result.data[0]
    summary = progress_summary(row.get("extraction_progress"), EXTRACTION_STEPS[category])
    return {
        "id": row["id"],
        "name": row.get("name"),
        "slug": row.get("slug"),
        "status": row.get("extraction_status") or "pending",
        "updated_at": row.get("updated_at"),
        **summary,
    }


# ---------------------------------------------------------------------------
# Duplicates and extraction start
# ---------------------------------------------------------------------------

def find_by_place_id(category: str, google_place_id: str) -> dict[str, Any] | None:
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("id, name, slug, area, extraction_status, active, verified")
        .eq("google_place_id", google_place_id)
        .limit(1)
        .execute()
    )
    return result.data[0] if result.data else None


def existing_place_ids(category: str, place_ids: list[str]) -> dict[str, dict[str, Any]]:
    """Map google_place_id -> existing row for any ids already imported."""
    if not place_ids:
        return {}
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("id, name, slug, google_place_id, extraction_status")
        .in_("google_place_id", place_ids)
        .execute()
    )
    return {row["google_place_id"]: row for row in result.data or []}


def find_duplicates(
    category: str,
    *,
    google_place_id: str,
    name: str,
    area: str | None,
) -> dict[str, Any]:
    """Exact match on place id first, then a fuzzy name + area match."""
    exact = find_by_place_id(category, google_place_id)
    if exact is not None:
        return {"is_duplicate": True, "match_type": "exact", "matches": [exact]}

    first_word = name.strip().split()[0] if name.strip() else name
    candidates = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("id, name, slug, area, google_place_id")
        .ilike("name", f"%{first_word}%")
        .limit(50)
        .execute()
    )
    fuzzy = [
        row
        for row in candidates.data or []
        if is_probable_duplicate(name, area, row.get("name", ""), row.get("area"))
    ]
    if fuzzy:
        return {"is_duplicate": True, "match_type": "fuzzy", "matches": fuzzy}
    return {"is_duplicate": False, "match_type": None, "matches": []}


def slug_exists(category: str, slug: str) -> bool:
    result = (
        _client()
        .table(CATEGORY_TABLES[category])
        .select("id")
        .eq("slug", slug)
        .limit(1)
        .execute()
    )
    return bool(result.data)


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
    Create a record with its initial progress blob.

    With override, an existing record for the same place id is deleted
    (children included) and a fresh unpublished one takes its place. The
    enrichment itself runs elsewhere; this only records the job.
    """
    existing = find_by_place_id(category, google_place_id)
    overridden = False
    if existing is not None:
        if not override:
            raise ConflictError(
                f"{category.title()} already exists",
                details={"existing": existing},
            )
        delete_place(category, existing["id"])
        overridden = True
        logger.info("extraction_override_deleted", category=category, id=existing["id"])

    table = CATEGORY_TABLES[category]
    job_fields = {
        "extraction_status": "processing",
        "extraction_progress": initial_progress(category),
        "updated_at": utc_now_iso(),
    }

    slug = make_unique_slug(
        generate_place_slug(name, area, address),
        lambda candidate: slug_exists(category, candidate),
    )
    model = CATEGORY_MODELS[category](
        name=name,
        slug=slug,
        google_place_id=google_place_id,
        area=area,
        address=address,
        active=False,
        verified=False,
        **(extra or {}),
    )
    record = {**model.to_insert_dict(), **job_fields}
    result = _client().table(table).insert(record).execute()
    if not result.data:
        raise UpstreamError(f"Failed to create {category}", details={"slug": slug})
    logger.info("extraction_started", category=category, slug=slug, place_id=google_place_id)
    return {**result.data[0], "overridden": overridden}
