"""Google Places lookup for the admin "add place" flow."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from bestof_shared.google_places import GooglePlacesClient, PlacesApiError

from bestof_api.errors import ConfigurationError, UpstreamError, ValidationError
from bestof_api.services.registry import service_for

logger = structlog.get_logger(__name__)

# Places "type" filter per category
PLACE_TYPES: dict[str, str | None] = {
    "restaurant": "restaurant",
    "hotel": "lodging",
    "mall": "shopping_mall",
    "school": "school",
    "attraction": "tourist_attraction",
    "fitness": "gym",
}


async def search_places(
    category: str,
    query: str,
    *,
    client: GooglePlacesClient | None = None,
) -> list[dict[str, Any]]:
    """
    Text-search Google Places and flag results that are already imported.

    Each result carries `exists_in_db` and, when true, `existing` with the
    stored record's id/slug/status.
    """
    if not query or not query.strip():
        raise ValidationError("Search query is required")

    client = client or GooglePlacesClient()
    if not client.configured:
        raise ConfigurationError("GOOGLE_PLACES_API_KEY is not configured")

    try:
        results = await client.text_search(query.strip(), place_type=PLACE_TYPES.get(category))
    except PlacesApiError as exc:
        raise ValidationError(
            f"Google Places API error: {exc.status}",
            details={"status": exc.status, "message": exc.message},
        ) from exc
    except httpx.HTTPError as exc:
        raise UpstreamError("Google Places request failed", details={"error": str(exc)}) from exc

    place_ids = [r["place_id"] for r in results if r.get("place_id")]
    existing = service_for(category).existing_place_ids(category, place_ids)
    for result in results:
        match = existing.get(result.get("place_id"))
        result["exists_in_db"] = match is not None
        result["existing"] = match

    logger.info(
        "places_search_complete",
        category=category,
        query=query,
        results=len(results),
        existing=len(existing),
    )
    return results
