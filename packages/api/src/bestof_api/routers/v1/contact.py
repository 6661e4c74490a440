"""Public contact form."""

from __future__ import annotations

import pydantic
from fastapi import APIRouter
from pydantic import BaseModel

from bestof_shared.models import ContactSubmission

from bestof_api.errors import ValidationError
from bestof_api.responses import wrap_response
from bestof_api.services import contact_service, notification_service

router = APIRouter(tags=["contact"])


class ContactForm(BaseModel):
    name: str = ""
    email: str = ""
    reason: str = ""
    subject: str = ""
    message: str = ""


@router.post("/contact", status_code=201)
async def submit_contact(form: ContactForm):
    try:
        submission = ContactSubmission(**form.model_dump())
    except pydantic.ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(
            "Invalid contact submission", details={"fields": fields},
        ) from exc

    row = contact_service.create_submission(submission)
    emailed = await notification_service.notify_contact_submission(row)
    return wrap_response({"id": row.get("id"), "status": "received", "notified": emailed})
