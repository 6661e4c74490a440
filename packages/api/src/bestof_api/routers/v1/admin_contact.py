"""Admin triage of contact form submissions."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from bestof_api.dependencies import PaginationParams, require_admin
from bestof_api.responses import paginated_response, wrap_response
from bestof_api.services import contact_service

router = APIRouter(
    prefix="/admin/contact",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


class SubmissionUpdate(BaseModel):
    status: str | None = None
    admin_notes: str | None = None


@router.get("")
async def list_submissions(
    pagination: PaginationParams = Depends(),
    status: Literal["all", "new", "read", "responded", "archived"] = Query("all"),
):
    data, total = contact_service.list_submissions(
        status=status, limit=pagination.limit, offset=pagination.offset,
    )
    return paginated_response(
        data, total=total, pagination=pagination,
        path="/v1/admin/contact", params={"status": status},
    )


@router.get("/{submission_id}")
async def get_submission(submission_id: str):
    data = contact_service.get_submission(submission_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return wrap_response(data)


@router.patch("/{submission_id}")
async def update_submission(submission_id: str, body: SubmissionUpdate):
    data = contact_service.update_submission(
        submission_id, status=body.status, admin_notes=body.admin_notes,
    )
    return wrap_response(data)


@router.delete("/{submission_id}")
async def delete_submission(submission_id: str):
    contact_service.delete_submission(submission_id)
    return wrap_response({"id": submission_id, "deleted": True})
