"""
Mail transport using Resend
Docs: https://resend.com/docs
"""
import logging
from typing import Optional

import resend

from ..config import Settings
from ..exceptions import DependencyFailure

logger = logging.getLogger(__name__)


def is_email_service_configured(settings: Settings) -> bool:
    """Check that an API key is available before talking to Resend."""
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not configured, outgoing email is disabled")
        return False
    return True


def get_email_config_info(settings: Settings) -> dict:
    """Email configuration summary for the health endpoint (no secrets)."""
    return {
        "api_key_configured": bool(settings.resend_api_key),
        "from_email": settings.email_from,
        "reply_to": settings.email_reply_to,
        "configured": bool(settings.resend_api_key),
    }


async def deliver_email(
    settings: Settings,
    to: str,
    subject: str,
    html: str,
    reply_to: Optional[str] = None,
) -> str:
    """
    Send a single HTML email through Resend.

    Args:
        settings: Application settings (API key, sender, default Reply-To)
        to: Recipient address
        subject: Subject line
        html: Rendered HTML body
        reply_to: Overrides the default Reply-To (e.g. the submitter's address)

    Returns:
        str: Resend message id

    Raises:
        DependencyFailure: the service is not configured or Resend rejected the call
    """
    if not is_email_service_configured(settings):
        raise DependencyFailure("email", "email service not configured")

    resend.api_key = settings.resend_api_key

    params = {
        "from": settings.email_from,
        "to": [to],
        "subject": subject,
        "html": html,
    }

    reply = reply_to or settings.email_reply_to
    if reply:
        params["reply_to"] = [reply]

    try:
        response = resend.Emails.send(params)
    except Exception as e:
        raise DependencyFailure("email", str(e)) from e

    message_id = response.get("id", "N/A") if isinstance(response, dict) else getattr(response, "id", "N/A")
    logger.info(f"Email sent to {to}. ID: {message_id}")
    return message_id
