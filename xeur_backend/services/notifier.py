"""
Notification dispatcher.

One method per channel (email, webhook, analytics). Every method catches
and logs its own failures and reports success as a bool, so the intake
services can fire side effects one after another without try blocks.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..exceptions import DependencyFailure
from ..utils import RequestContext
from . import analytics_service, email_service, webhook_service
from .email_templates import EmailTemplate

logger = logging.getLogger(__name__)

EmailSender = Callable[..., Awaitable[Any]]
WebhookSender = Callable[[str, Dict[str, Any]], Awaitable[None]]


class Notifier:
    def __init__(
        self,
        settings: Settings,
        email_sender: Optional[EmailSender] = None,
        webhook_sender: Optional[WebhookSender] = None,
    ):
        self.settings = settings
        self._email_sender = email_sender or email_service.deliver_email
        self._webhook_sender = webhook_sender or webhook_service.post_webhook

    async def send_email(self, to: str, template: EmailTemplate, reply_to: Optional[str] = None) -> bool:
        try:
            await self._email_sender(self.settings, to, template.subject, template.html, reply_to=reply_to)
            return True
        except DependencyFailure as e:
            logger.error(f"[Notifier] Email to {to} failed: {e.detail}")
        except Exception as e:
            logger.error(f"[Notifier] Unexpected error sending email to {to}: {e}", exc_info=True)
        return False

    async def send_bulk_email(self, recipients: Iterable[str], template: EmailTemplate) -> int:
        """
        Send the same email to each recipient, one at a time.
        Waits `investor_notify_delay` seconds between sends to stay under
        the provider rate limit. Returns the number of successful sends.
        """
        sent = 0
        for index, recipient in enumerate(recipients):
            if index and self.settings.investor_notify_delay > 0:
                await asyncio.sleep(self.settings.investor_notify_delay)
            if await self.send_email(recipient, template):
                sent += 1
        return sent

    async def post_webhook(self, payload: Dict[str, Any]) -> bool:
        url = self.settings.slack_webhook_url
        if not url:
            logger.info("[Notifier] SLACK_WEBHOOK_URL not set, skipping webhook")
            return False
        try:
            await self._webhook_sender(url, payload)
            return True
        except DependencyFailure as e:
            logger.error(f"[Notifier] Webhook failed: {e.detail}")
        except Exception as e:
            logger.error(f"[Notifier] Unexpected webhook error: {e}", exc_info=True)
        return False

    def track_event(
        self,
        db: Session,
        event: str,
        page: Optional[str],
        data: Optional[Dict[str, Any]],
        context: RequestContext,
    ) -> bool:
        try:
            analytics_service.record_event(db, event, page, data, context)
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"[Notifier] Could not record analytics event {event}: {e}", exc_info=True)
            return False


def get_notifier(settings: Settings = Depends(get_settings)) -> Notifier:
    """FastAPI dependency; tests override it with fake transports."""
    return Notifier(settings)
