"""
Team chat webhook (Slack incoming-webhook format).
Used to ping the founders when a new investment inquiry arrives.
"""
import logging
from typing import Any, Dict

import httpx

from ..exceptions import DependencyFailure

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_LENGTH = 200


async def post_webhook(url: str, payload: Dict[str, Any]) -> None:
    """
    POST a JSON message to the webhook.

    Raises:
        DependencyFailure: timeout, network error or non-2xx answer
    """
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(url, json=payload)
    except httpx.TimeoutException as e:
        raise DependencyFailure("webhook", "timeout") from e
    except httpx.HTTPError as e:
        raise DependencyFailure("webhook", str(e)) from e

    if response.status_code >= 300:
        raise DependencyFailure("webhook", f"status {response.status_code}: {response.text[:200]}")

    logger.info("[Webhook] Message delivered")


def _preview(message: str) -> str:
    if len(message) <= MESSAGE_PREVIEW_LENGTH:
        return message
    return message[:MESSAGE_PREVIEW_LENGTH] + "..."


def build_investment_message(brand_name: str, site_url: str, inquiry) -> Dict[str, Any]:
    """Block Kit summary of an investment inquiry with a link to the admin view."""
    not_provided = "Not provided"
    not_specified = "Not specified"
    return {
        "text": "🚀 NEW INVESTMENT INQUIRY",
        "blocks": [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": f"🚀 New Investment Inquiry - {brand_name}"},
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Name:* {inquiry.name}"},
                    {"type": "mrkdwn", "text": f"*Company:* {inquiry.company or not_provided}"},
                    {"type": "mrkdwn", "text": f"*Email:* {inquiry.email}"},
                    {"type": "mrkdwn", "text": f"*Investment Size:* {inquiry.investment_size or not_specified}"},
                    {"type": "mrkdwn", "text": f"*Fund Type:* {inquiry.fund_type or not_specified}"},
                    {"type": "mrkdwn", "text": f"*Timeline:* {inquiry.timeline or not_specified}"},
                ],
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*Message:*\n{_preview(inquiry.message)}"},
            },
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": "View Details"},
                        "url": f"{site_url}/admin/investments/{inquiry.id}",
                        "style": "primary",
                    }
                ],
            },
        ],
    }
