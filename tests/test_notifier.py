"""
Tests for the notification dispatcher and its transports.
"""

import asyncio

import pytest
import resend

from xeur_backend.config import Settings
from xeur_backend.exceptions import DependencyFailure
from xeur_backend.models.analytics_event import AnalyticsEvent
from xeur_backend.services import email_service, notifier as notifier_module
from xeur_backend.services.email_templates import EmailTemplate
from xeur_backend.services.notifier import Notifier
from xeur_backend.utils import RequestContext

TEMPLATE = EmailTemplate(subject="Hello", html="<p>Hello</p>")


class TestNotifierEmail:
    def test_send_email_reports_success(self, notifier, emails):
        assert asyncio.run(notifier.send_email("a@b.com", TEMPLATE, reply_to="c@d.com")) is True
        assert emails.sent == [{"to": "a@b.com", "subject": "Hello", "html": "<p>Hello</p>", "reply_to": "c@d.com"}]

    def test_send_email_swallows_transport_failures(self, notifier, emails):
        emails.failing.add("a@b.com")
        assert asyncio.run(notifier.send_email("a@b.com", TEMPLATE)) is False

    def test_send_email_swallows_unexpected_errors(self, settings):
        async def broken(*args, **kwargs):
            raise RuntimeError("socket closed")

        notifier = Notifier(settings, email_sender=broken)
        assert asyncio.run(notifier.send_email("a@b.com", TEMPLATE)) is False

    def test_bulk_email_waits_between_sends(self, settings, emails, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr(notifier_module.asyncio, "sleep", fake_sleep)
        settings.investor_notify_delay = 0.1
        notifier = Notifier(settings, email_sender=emails)

        emails.failing.add("two@xeur.ai")
        sent = asyncio.run(notifier.send_bulk_email(["one@xeur.ai", "two@xeur.ai", "three@xeur.ai"], TEMPLATE))

        assert sent == 2
        assert delays == [0.1, 0.1]
        assert [m["to"] for m in emails.sent] == ["one@xeur.ai", "three@xeur.ai"]


class TestNotifierWebhook:
    def test_skipped_without_url(self, notifier, webhooks):
        assert asyncio.run(notifier.post_webhook({"text": "hi"})) is False
        assert webhooks.posted == []

    def test_posts_to_configured_url(self, notifier, settings, webhooks):
        settings.slack_webhook_url = "https://hooks.slack.test/x"
        assert asyncio.run(notifier.post_webhook({"text": "hi"})) is True
        assert webhooks.posted == [{"url": "https://hooks.slack.test/x", "payload": {"text": "hi"}}]

    def test_failure_is_swallowed(self, notifier, settings, webhooks):
        settings.slack_webhook_url = "https://hooks.slack.test/x"
        webhooks.fail = True
        assert asyncio.run(notifier.post_webhook({"text": "hi"})) is False


class TestNotifierAnalytics:
    def test_track_event_writes_a_row(self, notifier, db):
        context = RequestContext(user_agent="pytest", ip_address="10.1.1.1")
        assert notifier.track_event(db, "signup", "/waitlist", {"a": 1}, context) is True
        row = db.query(AnalyticsEvent).one()
        assert (row.event, row.page, row.data, row.ip_address) == ("signup", "/waitlist", {"a": 1}, "10.1.1.1")

    def test_track_event_failure_is_swallowed(self, notifier, db, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(notifier_module.analytics_service, "record_event", broken)
        assert notifier.track_event(db, "signup", None, None, RequestContext()) is False


class TestResendTransport:
    def test_unconfigured_service_raises_dependency_failure(self):
        settings = Settings(resend_api_key=None)
        with pytest.raises(DependencyFailure):
            asyncio.run(email_service.deliver_email(settings, "a@b.com", "s", "<p>x</p>"))

    def test_sends_through_resend(self, monkeypatch):
        captured = {}

        def fake_send(params):
            captured.update(params)
            return {"id": "email_123"}

        monkeypatch.setattr(resend.Emails, "send", fake_send)
        settings = Settings(resend_api_key="re_test", email_from="XEUR.AI <noreply@xeur.ai>", email_reply_to=None)

        message_id = asyncio.run(
            email_service.deliver_email(settings, "a@b.com", "Subject", "<p>x</p>", reply_to="team@xeur.ai")
        )

        assert message_id == "email_123"
        assert captured["to"] == ["a@b.com"]
        assert captured["from"] == "XEUR.AI <noreply@xeur.ai>"
        assert captured["reply_to"] == ["team@xeur.ai"]
        assert resend.api_key == "re_test"

    def test_resend_errors_become_dependency_failures(self, monkeypatch):
        def fake_send(params):
            raise ValueError("invalid from address")

        monkeypatch.setattr(resend.Emails, "send", fake_send)
        settings = Settings(resend_api_key="re_test")
        with pytest.raises(DependencyFailure) as excinfo:
            asyncio.run(email_service.deliver_email(settings, "a@b.com", "s", "<p>x</p>"))
        assert excinfo.value.channel == "email"

    def test_config_info_hides_the_key(self):
        info = email_service.get_email_config_info(Settings(resend_api_key="re_secret"))
        assert info["configured"] is True
        assert "re_secret" not in str(info)
