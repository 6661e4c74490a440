"""Admin endpoints for directory records, shared by every category.

Paths take the plural category segment used by the dashboard:
/v1/admin/{restaurants|hotels|malls|schools|attractions|fitness}/...
"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from bestof_api.dependencies import PaginationParams, require_admin
from bestof_api.responses import paginated_response, wrap_response
from bestof_api.services import places_search_service
from bestof_api.services.registry import category_from_path, service_for
from bestof_api.utils.cache import search_cache, stats_cache

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

ListStatus = Literal["all", "published", "draft", "pending", "processing", "failed"]
QueueStatus = Literal["all", "pending", "processing", "completed", "failed"]


def resolve_category(category: str) -> str:
    return category_from_path(category)


def _invalidate_public_caches() -> None:
    search_cache.clear()
    stats_cache.clear()


class CheckDuplicateRequest(BaseModel):
    google_place_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    area: str = Field(min_length=1)


class SearchPlacesRequest(BaseModel):
    query: str = ""


class StartExtractionRequest(BaseModel):
    google_place_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    area: str | None = None
    address: str | None = None
    override: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

@router.get("/{category}/list")
async def list_records(
    category: str,
    cat: str = Depends(resolve_category),
    pagination: PaginationParams = Depends(),
    status: ListStatus = Query("all"),
    search: str | None = Query(None),
):
    data, total = service_for(cat).list_places(
        cat,
        status=status,
        search=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return paginated_response(
        data, total=total, pagination=pagination,
        path=f"/v1/admin/{category}/list", params={"status": status, "search": search},
    )


@router.get("/{category}/queue")
async def extraction_queue(
    category: str,
    cat: str = Depends(resolve_category),
    pagination: PaginationParams = Depends(),
    status: QueueStatus = Query("all"),
    search: str | None = Query(None),
):
    data, total = service_for(cat).list_queue(
        cat,
        status=status,
        search=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return paginated_response(
        data, total=total, pagination=pagination,
        path=f"/v1/admin/{category}/queue", params={"status": status, "search": search},
    )


@router.post("/{category}/check-duplicate")
async def check_duplicate(
    body: CheckDuplicateRequest,
    cat: str = Depends(resolve_category),
):
    data = service_for(cat).find_duplicates(
        cat, google_place_id=body.google_place_id, name=body.name, area=body.area,
    )
    return wrap_response(data)


@router.post("/{category}/search-places")
async def search_places(
    body: SearchPlacesRequest,
    cat: str = Depends(resolve_category),
):
    data = await places_search_service.search_places(cat, body.query)
    return wrap_response(data, total_count=len(data), source="Google Places")


@router.post("/{category}/start-extraction", status_code=201)
async def start_extraction(
    body: StartExtractionRequest,
    cat: str = Depends(resolve_category),
):
    data = service_for(cat).start_extraction(
        cat,
        google_place_id=body.google_place_id,
        name=body.name,
        area=body.area,
        address=body.address,
        override=body.override,
        extra=body.extra,
    )
    stats_cache.clear()
    return wrap_response(data)


# ---------------------------------------------------------------------------
# Single record
# ---------------------------------------------------------------------------

@router.get("/{category}/{place_id}")
async def get_record(place_id: str, cat: str = Depends(resolve_category)):
    data = service_for(cat).get_place(cat, place_id)
    if data is None:
        raise HTTPException(status_code=404, detail=f"{cat.title()} not found")
    return wrap_response(data)


@router.put("/{category}/{place_id}")
async def update_record(
    place_id: str,
    payload: dict[str, Any] = Body(...),
    cat: str = Depends(resolve_category),
):
    data = service_for(cat).update_place(cat, place_id, payload)
    _invalidate_public_caches()
    return wrap_response(data)


@router.delete("/{category}/{place_id}")
async def delete_record(place_id: str, cat: str = Depends(resolve_category)):
    data = service_for(cat).delete_place(cat, place_id)
    _invalidate_public_caches()
    return wrap_response(data)


@router.post("/{category}/{place_id}/publish")
async def publish_record(place_id: str, cat: str = Depends(resolve_category)):
    data = service_for(cat).set_published(cat, place_id, True)
    _invalidate_public_caches()
    return wrap_response(data)


@router.post("/{category}/{place_id}/unpublish")
async def unpublish_record(place_id: str, cat: str = Depends(resolve_category)):
    data = service_for(cat).set_published(cat, place_id, False)
    _invalidate_public_caches()
    return wrap_response(data)


@router.get("/{category}/{place_id}/extraction-status")
async def extraction_status(place_id: str, cat: str = Depends(resolve_category)):
    data = service_for(cat).extraction_status(cat, place_id)
    return wrap_response(data)
