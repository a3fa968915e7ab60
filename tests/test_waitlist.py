"""
Tests for the waitlist endpoints.
"""

from datetime import datetime, timedelta

from xeur_backend.models.analytics_event import AnalyticsEvent
from xeur_backend.models.waitlist_entry import WaitlistEntry
from xeur_backend.services import waitlist_service


def _signup(client, email="player@gmail.com", **extra):
    body = {"email": email, "name": "Player One", "gameTypes": "rpg, puzzle ,rpg,"}
    body.update(extra)
    return client.post("/api/waitlist", json=body)


def _add_entry(db, email, priority, created_at):
    entry = WaitlistEntry(email=email, game_types=["rpg"], priority=priority, created_at=created_at)
    db.add(entry)
    db.commit()
    return entry


class TestJoinWaitlist:
    """Tests for POST /api/waitlist."""

    def test_signup_returns_id_email_and_position(self, client):
        response = _signup(client)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == "player@gmail.com"
        assert body["data"]["position"] == 1
        assert body["data"]["id"]
        assert "timestamp" in body

    def test_game_types_are_split_trimmed_and_deduplicated(self, client, db):
        _signup(client)
        entry = db.query(WaitlistEntry).one()
        assert entry.game_types == ["rpg", "puzzle"]
        assert entry.source == "website"
        assert entry.experience == "BEGINNER"
        assert entry.priority == 0

    def test_game_types_accept_a_list(self, client, db):
        response = _signup(client, gameTypes=["shooter", "racing"])
        assert response.status_code == 200
        assert db.query(WaitlistEntry).one().game_types == ["shooter", "racing"]

    def test_duplicate_email_is_a_conflict(self, client, db):
        assert _signup(client).status_code == 200

        response = _signup(client)
        assert response.status_code == 409
        assert response.json()["success"] is False
        assert db.query(WaitlistEntry).count() == 1

    def test_concurrent_duplicate_hits_the_unique_constraint(self, client, db, monkeypatch):
        # Both requests pass the lookup, the second insert must still fail
        monkeypatch.setattr(waitlist_service, "_email_registered", lambda db, email: False)
        assert _signup(client).status_code == 200

        response = _signup(client)
        assert response.status_code == 409
        assert response.json()["message"] == "Email already registered for waitlist"
        assert db.query(WaitlistEntry).count() == 1

    def test_email_match_is_case_sensitive(self, client, db):
        _signup(client, email="player@gmail.com")
        response = _signup(client, email="Player@gmail.com")
        assert response.status_code == 200
        assert db.query(WaitlistEntry).count() == 2

    def test_email_domain_is_stored_as_sent(self, client, db):
        response = _signup(client, email="player@Gmail.com")
        assert response.json()["data"]["email"] == "player@Gmail.com"

        assert _signup(client, email="player@gmail.com").status_code == 200
        stored = {e.email for e in db.query(WaitlistEntry).all()}
        assert stored == {"player@Gmail.com", "player@gmail.com"}

    def test_blank_game_types_are_rejected(self, client):
        response = _signup(client, gameTypes=" , ,")
        assert response.status_code == 400
        assert "at least one game type" in response.json()["message"]

    def test_every_invalid_field_is_reported(self, client):
        response = client.post(
            "/api/waitlist",
            json={"email": "not-an-email", "experience": "GODLIKE"},
        )
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["data"]["errors"]}
        assert {"email", "gameTypes", "experience"} <= fields

    def test_side_effects_are_sent(self, client, db, emails):
        _signup(client, source="twitter")

        assert len(emails.to("player@gmail.com")) == 1
        assert "#1" in emails.to("player@gmail.com")[0]["html"]
        assert len(emails.to("admin@xeur.ai")) == 1

        event = db.query(AnalyticsEvent).one()
        assert event.event == "waitlist_signup"
        assert event.page == "/waitlist"
        assert event.data == {"gameTypes": ["rpg", "puzzle"], "experience": "BEGINNER", "source": "twitter"}

    def test_failing_email_does_not_fail_the_signup(self, client, db, emails):
        emails.failing.add("player@gmail.com")
        response = _signup(client)
        assert response.status_code == 200
        assert db.query(WaitlistEntry).count() == 1
        # The other side effects still run
        assert len(emails.to("admin@xeur.ai")) == 1
        assert db.query(AnalyticsEvent).count() == 1

    def test_admin_notification_skipped_without_admin_email(self, client, settings, emails):
        settings.admin_email = None
        _signup(client)
        assert [m["to"] for m in emails.sent] == ["player@gmail.com"]

    def test_client_ip_comes_from_forwarded_header(self, client, db):
        client.post(
            "/api/waitlist",
            json={"email": "ip@gmail.com", "gameTypes": "rpg"},
            headers={"x-forwarded-for": "203.0.113.7"},
        )
        assert db.query(AnalyticsEvent).one().ip_address == "203.0.113.7"


class TestWaitlistStatus:
    """Tests for GET /api/waitlist?email=."""

    def test_single_entry_percentile_is_100(self, client):
        _signup(client)
        data = client.get("/api/waitlist", params={"email": "player@gmail.com"}).json()["data"]
        assert data["position"] == 1
        assert data["totalCount"] == 1
        assert data["percentile"] == 100
        assert data["status"] == "PENDING"
        assert "createdAt" in data

    def test_percentile_rounds_half_up(self, client, db):
        base = datetime(2026, 1, 1, 12, 0, 0)
        for i in range(8):
            _add_entry(db, f"user{i}@gmail.com", 0, base + timedelta(minutes=i))
        # position 1 of 8 -> 12.5 -> 13
        data = client.get("/api/waitlist", params={"email": "user0@gmail.com"}).json()["data"]
        assert data["percentile"] == 13

    def test_position_orders_by_priority_then_creation(self, client, db):
        t1 = datetime(2026, 1, 1, 10, 0, 0)
        _add_entry(db, "a@gmail.com", 5, t1)
        _add_entry(db, "b@gmail.com", 5, t1 + timedelta(hours=1))
        _add_entry(db, "c@gmail.com", 10, t1 + timedelta(hours=2))

        def position(email):
            return client.get("/api/waitlist", params={"email": email}).json()["data"]["position"]

        assert position("c@gmail.com") == 1
        assert position("a@gmail.com") == 2
        assert position("b@gmail.com") == 3

    def test_missing_email_is_rejected(self, client):
        response = client.get("/api/waitlist")
        assert response.status_code == 400
        assert response.json()["message"] == "Email parameter is required"

    def test_invalid_email_is_rejected(self, client):
        response = client.get("/api/waitlist", params={"email": "nope"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email format"

    def test_unknown_email_is_not_found(self, client):
        response = client.get("/api/waitlist", params={"email": "ghost@gmail.com"})
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestUpdateWaitlist:
    """Tests for PATCH /api/waitlist."""

    def test_partial_update_changes_only_supplied_fields(self, client, db):
        _signup(client)
        response = client.patch(
            "/api/waitlist",
            json={"email": "player@gmail.com", "status": "APPROVED", "priority": 3},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "APPROVED"
        assert data["priority"] == 3
        assert data["name"] == "Player One"
        assert data["gameTypes"] == ["rpg", "puzzle"]

    def test_priority_bump_moves_entry_to_the_front(self, client):
        _signup(client, email="first@gmail.com")
        _signup(client, email="second@gmail.com")
        client.patch("/api/waitlist", json={"email": "second@gmail.com", "priority": 1})

        data = client.get("/api/waitlist", params={"email": "second@gmail.com"}).json()["data"]
        assert data["position"] == 1

    def test_game_types_csv_is_normalized(self, client):
        _signup(client)
        data = client.patch(
            "/api/waitlist", json={"email": "player@gmail.com", "gameTypes": "moba, moba, card"}
        ).json()["data"]
        assert data["gameTypes"] == ["moba", "card"]

    def test_unknown_email_is_not_found(self, client):
        response = client.patch("/api/waitlist", json={"email": "ghost@gmail.com", "name": "x"})
        assert response.status_code == 404
