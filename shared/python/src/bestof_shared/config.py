"""
config.py — pydantic-settings Settings class.

All environment variables for the Best of Goa backend are declared here.
The API, the maintenance CLI, and the shared clients import `settings`
from this module.

Usage:
    from bestof_shared.config import settings
    print(settings.supabase_url)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Supabase (hotels, malls, schools, attractions, fitness, contact, favorites)
    # -------------------------------------------------------------------------
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_anon_key: str = Field(default="")
    supabase_service_key: str = Field(default="")

    # -------------------------------------------------------------------------
    # Firebase / Firestore (restaurants, public search mirror, newsletter)
    # -------------------------------------------------------------------------
    firebase_project_id: str = Field(default="")
    firebase_credentials_path: str = Field(default="")

    # -------------------------------------------------------------------------
    # Enrichment providers
    # -------------------------------------------------------------------------
    google_places_api_key: str = Field(default="")
    google_places_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api/place"
    )
    google_places_region: str = Field(default="in")
    apify_api_token: str = Field(default="")
    firecrawl_api_key: str = Field(default="")

    # -------------------------------------------------------------------------
    # Email (Resend)
    # -------------------------------------------------------------------------
    resend_api_key: str = Field(default="")
    resend_base_url: str = Field(default="https://api.resend.com")
    email_from: str = Field(default="Best of Goa <hello@bestofgoa.com>")
    contact_notification_email: str = Field(default="")

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:3001")
    jwt_secret: str = Field(default="change-me-in-production")
    admin_emails: str = Field(default="")

    # Requests per minute
    rate_limit_public: int = Field(default=120)
    rate_limit_admin: int = Field(default=1200)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def admin_emails_list(self) -> list[str]:
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    @field_validator(
        "supabase_url", "google_places_base_url", "resend_base_url", mode="before"
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton: import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
