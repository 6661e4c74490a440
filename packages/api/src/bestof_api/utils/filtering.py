"""Supabase filter builders and in-memory matching for Firestore results.

apply_status_filter and status_matches implement the same admin list rule,
one as a PostgREST query and one over plain rows:

    published  -> active and verified
    draft      -> extraction completed, not live (active and verified not both set)
    processing -> extraction processing (or importing)
    pending    -> extraction pending or not started
    failed     -> extraction failed
    all / None -> no filter
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from bestof_shared.status import COMPLETED_STATUSES

PROCESSING_STATUSES = ("processing", "importing")


def apply_status_filter(
    query: Any,
    status: str | None,
    status_column: str = "extraction_status",
) -> Any:
    """Apply an admin list status filter to a Supabase query."""
    if status is None or status == "all":
        return query
    if status == "published":
        return query.eq("active", True).eq("verified", True)
    if status == "draft":
        return query.eq(status_column, "completed").or_(
            "active.not.is.true,verified.not.is.true"
        )
    if status == "processing":
        return query.in_(status_column, list(PROCESSING_STATUSES))
    if status == "pending":
        return query.or_(f"{status_column}.is.null,{status_column}.eq.pending")
    return query.eq(status_column, status)


def status_matches(row: dict[str, Any], status: str | None, status_field: str) -> bool:
    """In-memory twin of apply_status_filter."""
    if status is None or status == "all":
        return True
    live = bool(row.get("active")) and bool(row.get("verified"))
    value = row.get(status_field)
    if status == "published":
        return live
    if status == "draft":
        return value in COMPLETED_STATUSES and not live
    if status == "processing":
        return value in PROCESSING_STATUSES
    if status == "pending":
        return value in (None, "pending")
    return value == status


def apply_text_search(
    query: Any,
    column: str,
    search_term: str | None,
) -> Any:
    """Apply a case-insensitive substring match using ilike."""
    if search_term:
        query = query.ilike(column, f"%{search_term}%")
    return query


def text_matches(doc: dict[str, Any], fields: Iterable[str], term: str) -> bool:
    """Case-insensitive substring match of `term` against any string field of `doc`."""
    needle = term.strip().lower()
    if not needle:
        return True
    for field in fields:
        value = doc.get(field)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False
