"""
status.py — Lifecycle flags and extraction progress rules.

The admin "display status" is derived from the visibility flags and the
extraction state; it is never stored. Publish/unpublish write a fixed
combination of flags and timestamps so every caller (API route, bulk
script) produces the same row shape.

Usage:
    from bestof_shared.status import display_status, publish_values

    row["display_status"] = display_status(row, "hotel")
    supabase.table("hotels").update(publish_values()).eq("id", hotel_id).execute()
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from bestof_shared.constants import EXTRACTION_STEPS, FIRESTORE_CATEGORIES
from bestof_shared.time_utils import to_iso, utc_now


# Extraction finished: "completed" in Supabase, "active" on restaurant documents
COMPLETED_STATUSES = frozenset({"completed", "active"})


def extraction_status_field(category: str) -> str:
    """Restaurants keep their extraction state in `status`; other tables use `extraction_status`."""
    return "status" if category in FIRESTORE_CATEGORIES else "extraction_status"


def progress_field(category: str) -> str:
    return "job_progress" if category in FIRESTORE_CATEGORIES else "extraction_progress"


def display_status(row: dict[str, Any], category: str) -> str:
    """
    Derive the admin label for a record.

    A draft is a finished extraction that is not live (active and verified
    not both set), so an unpublished record that stays verified is a draft
    too. A missing extraction status reads as pending.
    """
    if row.get("active") and row.get("verified"):
        return "published"

    status = row.get(extraction_status_field(category))
    if status in ("processing", "importing"):
        return "processing"
    if status == "failed":
        return "failed"
    if status in COMPLETED_STATUSES:
        return "draft"
    return "pending"


def publish_values(now: datetime | None = None) -> dict[str, Any]:
    """Column values that make a record visible on public pages."""
    ts = (now or utc_now()).isoformat()
    return {
        "active": True,
        "verified": True,
        "published": True,
        "published_at": ts,
        "updated_at": ts,
    }


def unpublish_values(now: datetime | None = None) -> dict[str, Any]:
    """Column values that hide a record. `verified` is left untouched."""
    ts = (now or utc_now()).isoformat()
    return {
        "active": False,
        "published": False,
        "published_at": None,
        "updated_at": ts,
    }


def normalize_progress(progress: Any) -> dict[str, dict[str, Any]]:
    """
    Coerce a stored progress blob into {step_name: step_dict}.

    Malls store a list of {"name": ..., "status": ...} entries; the other
    tables store a mapping keyed by step name.
    """
    if not progress:
        return {}
    if isinstance(progress, dict):
        return {k: v for k, v in progress.items() if isinstance(v, dict)}
    if isinstance(progress, list):
        return {
            item["name"]: item
            for item in progress
            if isinstance(item, dict) and item.get("name")
        }
    return {}


def initial_progress(category: str, now: datetime | None = None) -> dict[str, dict[str, Any]]:
    """Progress blob for a freshly created record: creation done, everything else pending."""
    ts = (now or utc_now()).isoformat()
    steps = EXTRACTION_STEPS[category]
    progress: dict[str, dict[str, Any]] = {}
    for step in steps:
        if step == "initial_creation":
            progress[step] = {"status": "completed", "started_at": ts, "completed_at": ts}
        else:
            progress[step] = {"status": "pending"}
    return progress


def _step_error(step: dict[str, Any]) -> str | None:
    return step.get("error_message") or step.get("error")


def progress_summary(progress: Any, steps: tuple[str, ...] | list[str]) -> dict[str, Any]:
    """
    Summarise extraction progress against a fixed step list.

    Returns per-step status (defaulting to "pending"), the completed count,
    a rounded percentage, the current step label, and the failing step's
    error when nothing is running.
    """
    by_name = normalize_progress(progress)

    step_rows: list[dict[str, Any]] = []
    completed = 0
    running: str | None = None
    failed: tuple[str, str | None] | None = None

    for name in steps:
        step = by_name.get(name, {})
        status = step.get("status", "pending")
        if status == "completed":
            completed += 1
        elif status == "running" and running is None:
            running = name
        elif status == "failed":
            failed = (name, _step_error(step))
        step_rows.append(
            {
                "name": name,
                "status": status,
                "started_at": to_iso(step.get("started_at")),
                "completed_at": to_iso(step.get("completed_at")),
                "error": _step_error(step),
            }
        )

    # Half-up, so 1 of 8 steps reads as 13%
    percentage = int(completed * 100 / len(steps) + 0.5) if steps else 0

    current_step: str | None = None
    error_message: str | None = None
    if running is not None:
        current_step = running.replace("_", " ").title()
    elif failed is not None:
        current_step = f"Failed at: {failed[0].replace('_', ' ').title()}"
        error_message = failed[1]

    return {
        "steps": step_rows,
        "completed_steps": completed,
        "total_steps": len(steps),
        "progress_percentage": percentage,
        "current_step": current_step,
        "error_message": error_message,
    }
