"""Public search endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from bestof_api.responses import wrap_response
from bestof_api.services import search_service

router = APIRouter(prefix="/search", tags=["search"])


@router.get("")
async def universal_search(q: str | None = Query(None, description="Search query")):
    """Top matches in every category. Queries under 2 characters return empty groups."""
    return wrap_response(search_service.universal_search(q))


@router.get("/restaurants")
async def search_restaurants(
    q: str | None = Query(None),
    cuisine: str | None = Query(None, description="Cuisine id"),
    area: str | None = Query(None),
    limit: int = Query(20, ge=1, le=50),
):
    data = search_service.search_restaurants(q, cuisine=cuisine, area=area, limit=limit)
    return wrap_response(data, total_count=data["total"])


@router.get("/attractions")
async def search_attractions(
    q: str | None = Query(None),
    category: str | None = Query(None, description="Attraction category slug or id"),
    area: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
):
    data = search_service.search_attractions(q, category=category, area=area, limit=limit)
    return wrap_response(data, total_count=data["total"])
