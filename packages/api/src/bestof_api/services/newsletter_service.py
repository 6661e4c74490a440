"""Newsletter subscriptions (Firestore `newsletter_subscribers`, keyed by email)."""

from __future__ import annotations

import structlog

from bestof_shared.db import get_firestore_client
from bestof_shared.models import NewsletterSubscriber
from bestof_shared.time_utils import utc_now_iso

from bestof_api.errors import ValidationError

logger = structlog.get_logger(__name__)

COLLECTION = "newsletter_subscribers"


def subscribe(subscriber: NewsletterSubscriber) -> str:
    """
    Create or reactivate a subscription.

    Returns "subscribed" for a new address and "reactivated" for one that
    had unsubscribed. An already-active address is rejected.
    """
    doc_ref = get_firestore_client().collection(COLLECTION).document(subscriber.email)
    snapshot = doc_ref.get()

    if snapshot.exists:
        current = snapshot.to_dict() or {}
        if current.get("status") == "active":
            raise ValidationError("This email is already subscribed")
        doc_ref.update(
            {
                "status": "active",
                "subscribed_at": utc_now_iso(),
                "unsubscribed_at": None,
            }
        )
        logger.info("newsletter_reactivated")
        return "reactivated"

    record = subscriber.to_insert_dict()
    record["subscribed_at"] = utc_now_iso()
    doc_ref.set(record)
    logger.info("newsletter_subscribed", source=subscriber.source)
    return "subscribed"
