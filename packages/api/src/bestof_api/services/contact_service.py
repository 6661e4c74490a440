"""Contact form submissions."""

from __future__ import annotations

from typing import Any

import structlog

from bestof_shared.constants import CONTACT_STATUSES
from bestof_shared.db import get_supabase_client
from bestof_shared.models import ContactSubmission
from bestof_shared.time_utils import utc_now_iso

from bestof_api.errors import NotFoundError, UpstreamError, ValidationError

logger = structlog.get_logger(__name__)

TABLE = "contact_submissions"


def create_submission(submission: ContactSubmission) -> dict[str, Any]:
    supabase = get_supabase_client(service_role=True)
    result = supabase.table(TABLE).insert(submission.to_insert_dict()).execute()
    if not result.data:
        raise UpstreamError("Failed to save contact submission")
    logger.info("contact_submission_created", reason=submission.reason)
    return result.data[0]


def list_submissions(
    *,
    status: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    supabase = get_supabase_client(service_role=True)
    query = supabase.table(TABLE).select("*", count="exact")
    if status and status != "all":
        query = query.eq("status", status)
    result = (
        query.order("created_at", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )
    return result.data, result.count


def get_submission(submission_id: str) -> dict[str, Any] | None:
    supabase = get_supabase_client(service_role=True)
    result = (
        supabase.table(TABLE)
        .select("*")
        .eq("id", submission_id)
        .limit(1)
        .execute()
    )
    return result.data[0] if result.data else None


def update_submission(
    submission_id: str,
    *,
    status: str | None = None,
    admin_notes: str | None = None,
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if status is not None:
        if status not in CONTACT_STATUSES:
            raise ValidationError(
                f"Invalid status '{status}'",
                details={"allowed": list(CONTACT_STATUSES)},
            )
        values["status"] = status
    if admin_notes is not None:
        values["admin_notes"] = admin_notes
    if not values:
        raise ValidationError("Nothing to update")
    values["updated_at"] = utc_now_iso()

    supabase = get_supabase_client(service_role=True)
    result = supabase.table(TABLE).update(values).eq("id", submission_id).execute()
    if not result.data:
        raise NotFoundError("Submission not found", details={"id": submission_id})
    return result.data[0]


def delete_submission(submission_id: str) -> None:
    if get_submission(submission_id) is None:
        raise NotFoundError("Submission not found", details={"id": submission_id})
    supabase = get_supabase_client(service_role=True)
    supabase.table(TABLE).delete().eq("id", submission_id).execute()
    logger.info("contact_submission_deleted", id=submission_id)
