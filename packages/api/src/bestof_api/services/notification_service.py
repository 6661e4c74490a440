"""Transactional e-mail through Resend. Best effort: failures are logged, never raised."""

from __future__ import annotations

from html import escape
from typing import Any

import httpx
import structlog

from bestof_shared.config import settings

logger = structlog.get_logger(__name__)


async def send_email(
    to: str | list[str],
    subject: str,
    html: str,
    *,
    reply_to: str | None = None,
) -> bool:
    """POST /emails to Resend. Returns True when the message was accepted."""
    if not settings.resend_api_key:
        logger.info("email_skipped", reason="resend_not_configured", subject=subject)
        return False

    payload: dict[str, Any] = {
        "from": settings.email_from,
        "to": [to] if isinstance(to, str) else to,
        "subject": subject,
        "html": html,
    }
    if reply_to:
        payload["reply_to"] = reply_to

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(
                f"{settings.resend_base_url}/emails",
                json=payload,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
            )
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("email_failed", subject=subject, error=str(exc))
        return False

    logger.info("email_sent", subject=subject)
    return True


async def notify_contact_submission(submission: dict[str, Any]) -> bool:
    if not settings.contact_notification_email:
        return False
    html = (
        f"<h2>New contact submission</h2>"
        f"<p><strong>From:</strong> {escape(submission['name'])} "
        f"&lt;{escape(submission['email'])}&gt;</p>"
        f"<p><strong>Reason:</strong> {escape(submission['reason'])}</p>"
        f"<p><strong>Subject:</strong> {escape(submission['subject'])}</p>"
        f"<p>{escape(submission['message'])}</p>"
    )
    return await send_email(
        settings.contact_notification_email,
        f"[Contact] {submission['subject']}",
        html,
        reply_to=submission["email"],
    )


async def send_welcome_email(email: str) -> bool:
    html = (
        "<h2>Welcome to Best of Goa</h2>"
        "<p>Thanks for subscribing. We'll send you the best new restaurants, "
        "stays and things to do in Goa.</p>"
    )
    return await send_email(email, "Welcome to Best of Goa", html)
