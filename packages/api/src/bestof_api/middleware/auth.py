"""API key and JWT authentication middleware."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, HTTPException, Request
from jose import JWTError
from jose import jwt as jose_jwt

from bestof_shared.config import settings
from bestof_shared.db import get_supabase_client

ROLE_ORDER: dict[str, int] = {
    "user": 0,
    "editor": 1,
    "admin": 2,
}


@dataclass
class AuthUser:
    user_id: str
    role: str = "user"
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _validate_jwt(token: str) -> dict[str, Any] | None:
    """Validate a Supabase JWT and return its claims."""
    try:
        return jose_jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except JWTError:
        return None


def _role_for(email: str | None, profile_role: str | None) -> str:
    if email and email.lower() in settings.admin_emails_list:
        return "admin"
    return profile_role or "user"


async def get_current_user(request: Request) -> AuthUser | None:
    """Extract and validate user from API key or JWT.

    Returns None if no credentials are provided (public access).
    Raises 401 if credentials are invalid.
    """
    # Check API key first
    api_key = request.headers.get("X-API-Key")
    if api_key:
        supabase = get_supabase_client(service_role=True)
        result = (
            supabase.table("api_keys")
            .select("user_id, role, email, metadata")
            .eq("key", api_key)
            .eq("active", True)
            .limit(1)
            .execute()
        )
        if not result.data:
            raise HTTPException(status_code=401, detail="Invalid API key")
        row = result.data[0]
        return AuthUser(
            user_id=row["user_id"],
            role=_role_for(row.get("email"), row.get("role")),
            email=row.get("email"),
            metadata=row.get("metadata") or {},
        )

    # Check JWT
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:]
        claims = _validate_jwt(token)
        if claims is None:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        user_id = claims.get("sub", "")
        # Look up profile for role
        supabase = get_supabase_client(service_role=True)
        result = (
            supabase.table("profiles")
            .select("role, email")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        email = claims.get("email")
        profile_role = None
        if result.data:
            profile_role = result.data[0].get("role")
            email = result.data[0].get("email") or email
        return AuthUser(user_id=user_id, role=_role_for(email, profile_role), email=email)

    return None


def require_auth(min_role: str = "user"):
    """Dependency factory that requires authentication at a minimum role."""

    async def _dependency(
        request: Request,
        user: AuthUser | None = Depends(get_current_user),
    ) -> AuthUser:
        if user is None:
            raise HTTPException(
                status_code=401,
                detail="Authentication required",
            )
        user_level = ROLE_ORDER.get(user.role, 0)
        required_level = ROLE_ORDER.get(min_role, 0)
        if user_level < required_level:
            raise HTTPException(
                status_code=403,
                detail=f"This endpoint requires the '{min_role}' role. "
                f"Your current role is '{user.role}'.",
            )
        request.state.user = user
        return user

    return _dependency


require_user = require_auth()
require_admin = require_auth("admin")
