"""Offset-based pagination helpers for admin listings."""

from __future__ import annotations

from typing import Any

from fastapi import Query


class PaginationParams:
    """Dependency for extracting limit/offset query params."""

    def __init__(
        self,
        limit: int = Query(100, ge=1, le=500, description="Number of results per page"),
        offset: int = Query(0, ge=0, description="Number of results to skip"),
    ) -> None:
        self.limit = limit
        self.offset = offset

    @property
    def range_end(self) -> int:
        """Inclusive end index for Supabase .range()."""
        return self.offset + self.limit - 1


def build_links(
    path: str,
    params: dict[str, Any],
    total: int | None,
    limit: int,
    offset: int,
) -> dict[str, str]:
    """Build self/next/prev links for a paginated response."""

    def _url(page_offset: int) -> str:
        query_params = {**params, "limit": limit, "offset": page_offset}
        query = "&".join(f"{k}={v}" for k, v in query_params.items() if v is not None)
        return f"{path}?{query}"

    links: dict[str, str] = {"self": _url(offset)}
    if total is not None and offset + limit < total:
        links["next"] = _url(offset + limit)
    if offset > 0:
        links["prev"] = _url(max(0, offset - limit))
    return links
