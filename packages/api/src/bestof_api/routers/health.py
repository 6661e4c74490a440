"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from bestof_shared.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": "0.1.0"}


@router.get("/ready")
async def ready():
    missing = [
        name
        for name, value in (
            ("SUPABASE_SERVICE_KEY", settings.supabase_service_key),
            ("FIREBASE_PROJECT_ID", settings.firebase_project_id),
        )
        if not value
    ]
    if missing:
        return JSONResponse(status_code=503, content={"status": "not_ready", "missing": missing})
    return {"status": "ready"}
