"""Shared FastAPI dependencies."""

from __future__ import annotations

from bestof_api.middleware.auth import (
    AuthUser,
    get_current_user,
    require_admin,
    require_auth,
    require_user,
)
from bestof_api.utils.pagination import PaginationParams

__all__ = [
    "AuthUser",
    "PaginationParams",
    "get_current_user",
    "require_admin",
    "require_auth",
    "require_user",
]
