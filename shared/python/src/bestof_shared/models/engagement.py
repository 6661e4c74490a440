"""
models/engagement.py — Contact submissions, newsletter subscribers, and user favorites.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from bestof_shared.constants import ContactReason, ContactStatus

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _validate_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class ContactSubmission(BaseModel):
    """Matches the contact_submissions table row."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=200)
    email: str
    reason: ContactReason
    subject: str = Field(min_length=1, max_length=300)
    message: str = Field(min_length=1, max_length=5000)
    status: ContactStatus = "new"
    admin_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ContactSubmission":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "reason": self.reason,
            "subject": self.subject,
            "message": self.message,
            "status": self.status,
        }


class NewsletterSubscriber(BaseModel):
    """Firestore `newsletter_subscribers` document, keyed by email."""

    email: str
    status: str = "active"
    source: str = "homepage"
    subscribed_at: datetime | None = None
    unsubscribed_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _validate_email(v)

    def to_insert_dict(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "status": self.status,
            "source": self.source,
            "subscribed_at": self.subscribed_at,
            "unsubscribed_at": self.unsubscribed_at,
        }


class Favorite(BaseModel):
    """Matches the favorites table row."""

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    item_type: str
    item_id: str
    created_at: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Favorite":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "item_type": self.item_type,
            "item_id": self.item_id,
        }
