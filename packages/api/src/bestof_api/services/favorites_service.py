"""Per-user favorites with item details joined from each category's store."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

import structlog

from bestof_shared.constants import FAVORITE_ITEM_TYPES
from bestof_shared.db import get_supabase_client
from bestof_shared.models import Favorite

from bestof_api.errors import ConflictError, ValidationError
from bestof_api.services.registry import service_for

logger = structlog.get_logger(__name__)

TABLE = "favorites"


def _item_details(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {
        "name": row.get("name"),
        "slug": row.get("slug"),
        "hero_image": row.get("hero_image"),
        "area": row.get("area"),
        "rating": row.get("bok_score") or row.get("google_rating"),
    }


def list_favorites(user_id: str) -> list[dict[str, Any]]:
    supabase = get_supabase_client(service_role=True)
    result = (
        supabase.table(TABLE)
        .select("id, item_type, item_id, created_at")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .execute()
    )
    rows = result.data or []

    ids_by_type: dict[str, list[str]] = defaultdict(list)
    for row in rows:
        ids_by_type[row["item_type"]].append(str(row["item_id"]))

    details: dict[tuple[str, str], dict[str, Any]] = {}
    for item_type, ids in ids_by_type.items():
        if item_type not in FAVORITE_ITEM_TYPES:
            continue
        for item in service_for(item_type).get_many(item_type, ids):
            details[(item_type, str(item["id"]))] = item

    return [
        {
            **row,
            "item": _item_details(details.get((row["item_type"], str(row["item_id"])))),
        }
        for row in rows
    ]


def add_favorite(user_id: str, item_type: str, item_id: str) -> dict[str, Any]:
    if item_type not in FAVORITE_ITEM_TYPES:
        raise ValidationError(
            f"Invalid item type '{item_type}'",
            details={"allowed": list(FAVORITE_ITEM_TYPES)},
        )

    supabase = get_supabase_client(service_role=True)
    existing = (
        supabase.table(TABLE)
        .select("id")
        .eq("user_id", user_id)
        .eq("item_type", item_type)
        .eq("item_id", item_id)
        .limit(1)
        .execute()
    )
    if existing.data:
        raise ConflictError("Item is already in favorites")

    favorite = Favorite(user_id=user_id, item_type=item_type, item_id=item_id)
    result = supabase.table(TABLE).insert(favorite.to_insert_dict()).execute()
    logger.info("favorite_added", item_type=item_type)
    return result.data[0] if result.data else favorite.to_insert_dict()


def remove_favorite(user_id: str, item_type: str, item_id: str) -> bool:
    supabase = get_supabase_client(service_role=True)
    result = (
        supabase.table(TABLE)
        .delete()
        .eq("user_id", user_id)
        .eq("item_type", item_type)
        .eq("item_id", item_id)
        .execute()
    )
    removed = bool(result.data)
    logger.info("favorite_removed", item_type=item_type, removed=removed)
    return removed
