"""
models/places.py — Pydantic models for directory records.

The six category tables share one column set; per-category models add the
few columns that only exist on that table. Unknown columns are kept
(extra="allow") because the enrichment payload columns vary per table.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bestof_shared.constants import PROTECTED_FIELDS


class Place(BaseModel):
    """Columns common to restaurants, hotels, malls, schools, attractions, fitness_places."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str
    slug: str | None = None
    google_place_id: str | None = None

    area: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    phone: str | None = None
    email: str | None = None
    website: str | None = None
    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    tiktok: str | None = None

    google_rating: float | None = None
    google_review_count: int | None = None

    description: str | None = None
    short_description: str | None = None
    hero_image: str | None = None

    active: bool = False
    verified: bool = False
    published_at: datetime | None = None

    extraction_status: str | None = None
    extraction_progress: dict[str, Any] | list[Any] = Field(default_factory=dict)
    apify_output: dict[str, Any] | None = None
    firecrawl_output: dict[str, Any] | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Place":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True)
        for key in ("id", "created_at"):
            data.pop(key, None)
        return data

    def to_update_dict(self) -> dict[str, Any]:
        """Dump only the fields an admin may edit."""
        data = self.model_dump(mode="json", exclude_unset=True)
        return {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}


class Restaurant(Place):
    """Firestore `restaurants` document; extraction state lives in `status` / `job_progress`."""

    cuisine: list[str] | str | None = None
    restaurant_cuisine_ids: list[str] = Field(default_factory=list)
    neighborhood: str | None = None
    price_level: int | None = None
    overall_rating: float | None = None
    status: str | None = None
    job_progress: dict[str, Any] = Field(default_factory=dict)


class Hotel(Place):
    star_rating: float | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None


class Mall(Place):
    total_stores: int | None = None
    parking_spaces: int | None = None


class School(Place):
    published: bool = False
    school_type: str | None = None
    curriculum: list[str] | str | None = None
    gender_policy: str | None = None


class Attraction(Place):
    attraction_type: str | None = None
    attraction_category_ids: list[str] = Field(default_factory=list)


class FitnessPlace(Place):
    fitness_types: list[str] = Field(default_factory=list)
    gender_policy: str | None = None


CATEGORY_MODELS: dict[str, type[Place]] = {
    "restaurant": Restaurant,
    "hotel": Hotel,
    "mall": Mall,
    "school": School,
    "attraction": Attraction,
    "fitness": FitnessPlace,
}

