"""Newsletter signup."""

from __future__ import annotations

import pydantic
from fastapi import APIRouter
from pydantic import BaseModel

from bestof_shared.models import NewsletterSubscriber

from bestof_api.errors import ValidationError
from bestof_api.responses import wrap_response
from bestof_api.services import newsletter_service, notification_service

router = APIRouter(tags=["newsletter"])


class NewsletterSignup(BaseModel):
    email: str = ""
    source: str = "homepage"


@router.post("/newsletter")
async def subscribe(body: NewsletterSignup):
    try:
        subscriber = NewsletterSubscriber(email=body.email, source=body.source)
    except pydantic.ValidationError as exc:
        raise ValidationError("Please enter a valid email address") from exc

    outcome = newsletter_service.subscribe(subscriber)
    if outcome == "subscribed":
        await notification_service.send_welcome_email(subscriber.email)
    return wrap_response({"email": subscriber.email, "status": outcome})
