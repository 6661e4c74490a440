"""
pipelines/place_ids.py — Resolve missing google_place_id values via Google Places.

Lookups run sequentially with a pause between requests to stay inside the
Places API quota.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from bestof_shared.google_places import GooglePlacesClient, PlacesApiError
from bestof_shared.time_utils import utc_now_iso

from bestof_pipeline.loaders.place_store import PlaceStore, UpdateResult
from bestof_pipeline.transforms.scoring import lacks_place_id

log = structlog.get_logger(__name__)

DEFAULT_ADDRESS = "Goa"


async def fetch_place_ids(
    store: PlaceStore,
    category: str,
    *,
    client: GooglePlacesClient | None = None,
    apply: bool = False,
    limit: int | None = None,
    delay: float = 0.5,
) -> tuple[list[dict[str, Any]], UpdateResult]:
    """
    Look up a place id for every record that lacks one.

    Returns the lookup report ({id, name, place_id}) and the update result;
    records with no match are reported with place_id None and not written.
    """
    client = client or GooglePlacesClient()
    if not client.configured:
        raise RuntimeError("GOOGLE_PLACES_API_KEY is not set.")

    rows = [row for row in store.fetch(category) if lacks_place_id(row)]
    if limit is not None:
        rows = rows[:limit]

    report: list[dict[str, Any]] = []
    for i, row in enumerate(rows):
        name = row.get("name") or ""
        try:
            place_id = await client.find_place_id(name, row.get("address") or DEFAULT_ADDRESS)
        except PlacesApiError as exc:
            log.error("place_lookup_failed", id=row["id"], name=name, status=exc.status)
            place_id = None
        report.append({"id": str(row["id"]), "name": name, "place_id": place_id})
        if delay and i < len(rows) - 1:
            await asyncio.sleep(delay)

    found = {
        r["id"]: {"google_place_id": r["place_id"], "updated_at": utc_now_iso()}
        for r in report
        if r["place_id"]
    }
    log.info("place_ids_resolved", category=category, looked_up=len(report), found=len(found))
    result = store.update_many(category, found, dry_run=not apply)
    return report, result
