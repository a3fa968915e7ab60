"""
Tests for the newsletter endpoints.
"""

from xeur_backend.models.analytics_event import AnalyticsEvent
from xeur_backend.models.newsletter_subscription import NewsletterSubscription
from xeur_backend.services import newsletter_service

EMAIL = "reader@gmail.com"


def _subscribe(client, **extra):
    body = {"email": EMAIL}
    body.update(extra)
    return client.post("/api/newsletter", json=body)


class TestSubscribe:
    """Tests for POST /api/newsletter."""

    def test_new_subscription_gets_default_preferences(self, client, db):
        response = _subscribe(client)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["reactivated"] is False
        assert data["preferences"] == {"frequency": "monthly", "topics": ["platform-updates", "industry-news"]}
        assert db.query(NewsletterSubscription).one().source == "website"

    def test_active_duplicate_is_a_conflict(self, client):
        _subscribe(client)
        response = _subscribe(client)
        assert response.status_code == 409

    def test_concurrent_duplicate_hits_the_unique_constraint(self, client, db, monkeypatch):
        monkeypatch.setattr(newsletter_service, "_find", lambda db, email: None)
        assert _subscribe(client).status_code == 200

        response = _subscribe(client)
        assert response.status_code == 409
        assert response.json()["message"] == "Email is already subscribed to our newsletter"
        assert db.query(NewsletterSubscription).count() == 1

    def test_invalid_frequency_is_rejected(self, client):
        response = _subscribe(client, preferences={"frequency": "daily"})
        assert response.status_code == 400

    def test_unknown_preference_keys_are_ignored(self, client):
        response = _subscribe(client, preferences={"frequency": "weekly", "color": "blue"})
        assert response.status_code == 200
        assert response.json()["data"]["preferences"]["frequency"] == "weekly"
        assert "color" not in response.json()["data"]["preferences"]

    def test_new_subscription_side_effects(self, client, db, emails):
        _subscribe(client, name="Reader")
        assert len(emails.to(EMAIL)) == 1
        assert len(emails.to("admin@xeur.ai")) == 1
        event = db.query(AnalyticsEvent).one()
        assert event.event == "newsletter_signup"
        assert event.data["reactivated"] is False


class TestResubscribe:
    def test_unsubscribe_then_subscribe_reactivates_same_row(self, client, db, emails):
        original_id = _subscribe(client).json()["data"]["id"]
        assert client.delete("/api/newsletter", params={"email": EMAIL}).status_code == 200
        sent_before = len(emails.sent)

        response = _subscribe(client, preferences={"frequency": "weekly"}, source="footer")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == original_id
        assert data["reactivated"] is True
        # Only the supplied key changes
        assert data["preferences"] == {"frequency": "weekly", "topics": ["platform-updates", "industry-news"]}

        rows = db.query(NewsletterSubscription).all()
        assert len(rows) == 1
        assert rows[0].is_active is True
        assert rows[0].source == "footer"

        # No welcome or admin email when reactivating
        assert len(emails.sent) == sent_before
        signups = db.query(AnalyticsEvent).filter(AnalyticsEvent.event == "newsletter_signup").all()
        assert [e.data["reactivated"] for e in signups] == [False, True]


class TestUnsubscribe:
    """Tests for DELETE /api/newsletter."""

    def test_unsubscribe_keeps_the_row(self, client, db):
        _subscribe(client)
        response = client.delete("/api/newsletter", params={"email": EMAIL, "token": "anything"})
        assert response.status_code == 200
        assert response.json()["data"] == {"email": EMAIL, "unsubscribed": True}

        row = db.query(NewsletterSubscription).one()
        assert row.is_active is False
        event = db.query(AnalyticsEvent).filter(AnalyticsEvent.event == "newsletter_unsubscribe").one()
        assert event.page == "/unsubscribe"

    def test_second_unsubscribe_is_not_found(self, client):
        _subscribe(client)
        client.delete("/api/newsletter", params={"email": EMAIL})
        assert client.delete("/api/newsletter", params={"email": EMAIL}).status_code == 404

    def test_missing_email_is_rejected(self, client):
        assert client.delete("/api/newsletter").status_code == 400


class TestUpdatePreferences:
    """Tests for PATCH /api/newsletter."""

    def test_only_supplied_fields_change(self, client):
        _subscribe(client, name="Reader")
        response = client.patch(
            "/api/newsletter",
            json={"email": EMAIL, "preferences": {"frequency": "quarterly", "topics": ["ai"]}},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["preferences"] == {"frequency": "quarterly", "topics": ["ai"]}
        assert data["name"] == "Reader"
        assert data["isActive"] is True

    def test_is_active_can_be_toggled(self, client):
        _subscribe(client)
        data = client.patch("/api/newsletter", json={"email": EMAIL, "isActive": False}).json()["data"]
        assert data["isActive"] is False

    def test_unknown_email_is_not_found(self, client):
        response = client.patch("/api/newsletter", json={"email": "ghost@gmail.com", "name": "x"})
        assert response.status_code == 404


class TestListSubscriptions:
    def test_active_filter_and_stats(self, client):
        for i in range(3):
            client.post("/api/newsletter", json={"email": f"reader{i}@gmail.com"})
        client.delete("/api/newsletter", params={"email": "reader0@gmail.com"})

        data = client.get("/api/newsletter", params={"active": "true"}).json()["data"]
        assert data["pagination"]["total"] == 2
        assert all(item["isActive"] for item in data["items"])
        assert data["stats"] == {"active": 2, "inactive": 1}
