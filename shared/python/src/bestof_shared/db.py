"""
db.py — Supabase and Firestore client singletons.

Usage:
    from bestof_shared.db import get_supabase_client, get_firestore_client

    supabase = get_supabase_client()                    # anon key (public reads)
    supabase = get_supabase_client(service_role=True)   # service key (admin, scripts)
    firestore_db = get_firestore_client()
"""

from __future__ import annotations

import threading
from typing import Any, Optional

import firebase_admin
import structlog
from firebase_admin import credentials, firestore
from supabase import Client, create_client

from bestof_shared.config import settings

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Supabase — one client per role per process (thread-safe via lock)
# ---------------------------------------------------------------------------
_supabase_lock = threading.Lock()
_supabase_anon: Optional[Client] = None
_supabase_service: Optional[Client] = None


def get_supabase_client(*, service_role: bool = False) -> Client:
    """
    Return a singleton Supabase client.

    Args:
        service_role: If True, uses the service role key (full DB access).
                      If False (default), uses the anon key (RLS applies).

    Returns:
        supabase.Client instance.
    """
    global _supabase_anon, _supabase_service

    with _supabase_lock:
        if service_role:
            if _supabase_service is None:
                if not settings.supabase_service_key:
                    raise RuntimeError(
                        "SUPABASE_SERVICE_KEY is not set. "
                        "Set it in .env before using service_role=True."
                    )
                _supabase_service = create_client(
                    settings.supabase_url,
                    settings.supabase_service_key,
                )
                logger.info("supabase_client_created", role="service_role")
            return _supabase_service
        else:
            if _supabase_anon is None:
                if not settings.supabase_anon_key:
                    raise RuntimeError(
                        "SUPABASE_ANON_KEY is not set. Set it in .env."
                    )
                _supabase_anon = create_client(
                    settings.supabase_url,
                    settings.supabase_anon_key,
                )
                logger.info("supabase_client_created", role="anon")
            return _supabase_anon


# ---------------------------------------------------------------------------
# Firestore — initialised once through firebase_admin
# ---------------------------------------------------------------------------
_firestore_lock = threading.Lock()
_firestore_client: Optional[Any] = None


def get_firestore_client() -> Any:
    """
    Return a singleton Firestore client.

    Uses the service-account file at settings.firebase_credentials_path when
    set, otherwise Application Default Credentials.
    """
    global _firestore_client

    with _firestore_lock:
        if _firestore_client is None:
            try:
                firebase_admin.get_app()
            except ValueError:
                options = (
                    {"projectId": settings.firebase_project_id}
                    if settings.firebase_project_id
                    else None
                )
                if settings.firebase_credentials_path:
                    cred = credentials.Certificate(settings.firebase_credentials_path)
                else:
                    cred = credentials.ApplicationDefault()
                firebase_admin.initialize_app(cred, options)
            _firestore_client = firestore.client()
            logger.info(
                "firestore_client_created",
                project_id=settings.firebase_project_id or None,
            )
        return _firestore_client


def reset_clients() -> None:
    """Reset singleton clients (useful in tests)."""
    global _supabase_anon, _supabase_service, _firestore_client
    with _supabase_lock:
        _supabase_anon = None
        _supabase_service = None
    with _firestore_lock:
        _firestore_client = None
