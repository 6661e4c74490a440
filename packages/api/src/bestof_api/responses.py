"""Response envelopes shared by every v1 route.

Success: {"data": ..., "meta": {...}, "links": {...}}; meta keys with no
value are omitted. Errors: {"error": {"code", "message", "details"?}}.
"""

from __future__ import annotations

from typing import Any

from bestof_api.utils.pagination import PaginationParams, build_links


def wrap_response(
    data: Any,
    *,
    total_count: int | None = None,
    limit: int | None = None,
    offset: int | None = None,
    source: str | None = None,
    links: dict[str, str] | None = None,
) -> dict[str, Any]:
    meta = {
        "total_count": total_count,
        "limit": limit,
        "offset": offset,
        "source": source,
    }
    return {
        "data": data,
        "meta": {k: v for k, v in meta.items() if v is not None},
        "links": links or {},
    }


def paginated_response(
    data: list[Any],
    *,
    total: int,
    pagination: PaginationParams,
    path: str,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Envelope for an admin listing page, with self/next/prev links."""
    return wrap_response(
        data,
        total_count=total,
        limit=pagination.limit,
        offset=pagination.offset,
        links=build_links(path, params or {}, total, pagination.limit, pagination.offset),
    )


def error_response(
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return {"error": err}
