"""Signed-in user's favorites."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from bestof_api.dependencies import AuthUser, require_user
from bestof_api.responses import wrap_response
from bestof_api.services import favorites_service

router = APIRouter(prefix="/me/favorites", tags=["favorites"])


class FavoriteRequest(BaseModel):
    item_type: str
    item_id: str


@router.get("")
async def list_favorites(user: AuthUser = Depends(require_user)):
    data = favorites_service.list_favorites(user.user_id)
    return wrap_response(data, total_count=len(data))


@router.post("", status_code=201)
async def add_favorite(body: FavoriteRequest, user: AuthUser = Depends(require_user)):
    data = favorites_service.add_favorite(user.user_id, body.item_type, body.item_id)
    return wrap_response(data)


@router.delete("")
async def remove_favorite(
    item_type: str = Query(...),
    item_id: str = Query(...),
    user: AuthUser = Depends(require_user),
):
    removed = favorites_service.remove_favorite(user.user_id, item_type, item_id)
    return wrap_response({"removed": removed})
