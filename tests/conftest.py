"""
Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database and a client whose
email and webhook transports only record what they were asked to send.
"""

import os

# Keep the import-time engine in memory instead of creating ./xeur.db
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from xeur_backend.config import Settings, get_settings  # noqa: E402
from xeur_backend.database import Base, build_engine, get_db  # noqa: E402
from xeur_backend.exceptions import DependencyFailure  # noqa: E402
from xeur_backend.main import app  # noqa: E402
from xeur_backend.services.notifier import Notifier, get_notifier  # noqa: E402


class RecordingEmailSender:
    """Stands in for the Resend transport."""

    def __init__(self):
        self.sent = []
        self.failing = set()

    async def __call__(self, settings, to, subject, html, reply_to=None):
        if to in self.failing:
            raise DependencyFailure("email", "mailbox unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html, "reply_to": reply_to})
        return f"msg-{len(self.sent)}"

    def to(self, address):
        return [m for m in self.sent if m["to"] == address]


class RecordingWebhookSender:
    def __init__(self):
        self.posted = []
        self.fail = False

    async def __call__(self, url, payload):
        if self.fail:
            raise DependencyFailure("webhook", "status 500")
        self.posted.append({"url": url, "payload": payload})


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return Settings(
        resend_api_key="re_test",
        admin_email="admin@xeur.ai",
        slack_webhook_url=None,
        investor_relations_emails=["investors@xeur.ai", "founders@xeur.ai"],
        investor_notify_delay=0,
        site_url="https://xeur.ai",
        brand_name="XEUR.AI",
    )


@pytest.fixture
def emails():
    return RecordingEmailSender()


@pytest.fixture
def webhooks():
    return RecordingWebhookSender()


@pytest.fixture
def notifier(settings, emails, webhooks):
    return Notifier(settings, email_sender=emails, webhook_sender=webhooks)


@pytest.fixture
def client(session_factory, settings, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
