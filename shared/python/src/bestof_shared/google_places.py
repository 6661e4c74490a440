"""
google_places.py — Google Places (legacy web service) client.

Used by the admin "search places" step before an extraction is started and
by the place-id backfill command.

Endpoints used:
  GET /textsearch/json          — free-text search, optionally restricted to a type
  GET /findplacefromtext/json   — best single match for "name, address"

Usage:
    from bestof_shared.google_places import GooglePlacesClient

    client = GooglePlacesClient(api_key=settings.google_places_api_key)
    results = await client.text_search("Thalassa Vagator", place_type="restaurant")
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from bestof_shared.config import settings
from bestof_shared.retry import with_retry

log = structlog.get_logger(__name__)

OK_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


class PlacesApiError(Exception):
    """Google answered with a status other than OK / ZERO_RESULTS."""

    def __init__(self, status: str, message: str | None = None) -> None:
        super().__init__(f"Google Places error: {status}" + (f" ({message})" if message else ""))
        self.status = status
        self.message = message


def area_from_address(address: str | None) -> str:
    """Best-effort area name: first address component that is not the state itself."""
    if not address:
        return "Goa"
    parts = [p.strip() for p in address.split(",") if p.strip()]
    for part in parts:
        lowered = part.lower()
        if "goa" not in lowered and not any(ch.isdigit() for ch in part):
            return part
    return parts[0] if parts else "Goa"


def map_place(result: dict[str, Any]) -> dict[str, Any]:
    """Flatten a Places result into the shape the admin UI consumes."""
    location = (result.get("geometry") or {}).get("location") or {}
    address = result.get("formatted_address") or result.get("vicinity")
    return {
        "place_id": result.get("place_id"),
        "name": result.get("name"),
        "address": address,
        "area": area_from_address(address),
        "latitude": location.get("lat"),
        "longitude": location.get("lng"),
        "rating": result.get("rating"),
        "review_count": result.get("user_ratings_total"),
        "types": result.get("types") or [],
        "business_status": result.get("business_status"),
    }


class GooglePlacesClient:
    """Thin async wrapper over the Places web service."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        region: str | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.google_places_api_key
        self._base_url = base_url or settings.google_places_base_url
        self._region = region or settings.google_places_region
        self._timeout = timeout
        self._log = log.bind(provider="google_places")

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @with_retry(max_attempts=3, base_delay=1.0)
    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                f"{self._base_url}/{path}",
                params={**params, "key": self._api_key},
            )
            response.raise_for_status()
            payload = response.json()

        status = payload.get("status", "UNKNOWN_ERROR")
        if status not in OK_STATUSES:
            raise PlacesApiError(status, payload.get("error_message"))
        return payload

    async def text_search(
        self,
        query: str,
        *,
        place_type: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a text search and return mapped results (possibly empty)."""
        params: dict[str, Any] = {"query": query, "region": self._region}
        if place_type:
            params["type"] = place_type
        payload = await self._get("textsearch/json", params)
        results = [map_place(r) for r in payload.get("results", [])]
        self._log.info("text_search_complete", query=query, results=len(results))
        return results

    async def find_place_id(self, name: str, address: str | None = None) -> str | None:
        """Return the place_id of the best match for name (+ address), or None."""
        text = f"{name}, {address}" if address else name
        payload = await self._get(
            "findplacefromtext/json",
            {
                "input": text,
                "inputtype": "textquery",
                "fields": "place_id,name,formatted_address",
            },
        )
        candidates = payload.get("candidates") or []
        if not candidates:
            self._log.info("place_not_found", input=text)
            return None
        return candidates[0].get("place_id")
