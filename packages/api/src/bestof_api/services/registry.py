"""Category -> storage backend dispatch."""

from __future__ import annotations

from types import ModuleType

from bestof_shared.constants import CATEGORIES, CATEGORY_PATHS, FIRESTORE_CATEGORIES

from bestof_api.errors import NotFoundError
from bestof_api.services import place_service, restaurant_service


def service_for(category: str) -> ModuleType:
    """Return the service module that owns a category's records."""
    if category not in CATEGORIES:
        raise NotFoundError(f"Unknown category '{category}'")
    return restaurant_service if category in FIRESTORE_CATEGORIES else place_service


def category_from_path(segment: str) -> str:
    """Resolve an admin URL segment ("hotels", "fitness") to a category."""
    category = CATEGORY_PATHS.get(segment)
    if category is None:
        raise NotFoundError(
            f"Unknown category '{segment}'",
            details={"allowed": sorted(CATEGORY_PATHS)},
        )
    return category
