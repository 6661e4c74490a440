"""
bestof_shared.models — Pydantic models matching each table / collection.

These models are used by:
- packages/api: validate request bodies before writing
- packages/pipeline: validate rows read by the maintenance commands

Table-backed models provide:
  .from_db_row(row: dict) -> Model
  .to_insert_dict() -> dict
"""

from bestof_shared.models.engagement import (
    ContactSubmission,
    Favorite,
    NewsletterSubscriber,
)
from bestof_shared.models.places import (
    CATEGORY_MODELS,
    Attraction,
    FitnessPlace,
    Hotel,
    Mall,
    Place,
    Restaurant,
    School,
)

__all__ = [
    "Place",
    "Restaurant",
    "Hotel",
    "Mall",
    "School",
    "Attraction",
    "FitnessPlace",
    "CATEGORY_MODELS",
    "ContactSubmission",
    "NewsletterSubscriber",
    "Favorite",
]
