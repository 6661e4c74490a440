"""Admin dashboard counts."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from bestof_api.dependencies import require_admin
from bestof_api.responses import wrap_response
from bestof_api.services import stats_service

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/stats")
async def dashboard_stats():
    return wrap_response(stats_service.dashboard_stats())
