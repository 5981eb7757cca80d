"""End-to-end API tests: signup -> invite email -> verify -> redeem -> check-in."""
import re
from datetime import datetime, timedelta, timezone

from kolokwa.models import Participant, PendingSignup, User
from kolokwa.services import notifications


def _token_from(outbox):
    match = re.search(r"/verify/([A-Za-z0-9_\-]+)", outbox[-1]["html"])
    assert match, "invite email must contain the redemption link"
    return match.group(1)


def test_end_to_end(staff_client, db, event, outbox):
    client = staff_client
    r = client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    assert r.status_code == 200
    assert r.json() == {"message": "Invite sent successfully"}

    token = _token_from(outbox)
    assert db.query(PendingSignup).filter(PendingSignup.invite_token == token).count() == 1

    r = client.get(f"/api/verify/{token}")
    assert r.status_code == 200
    assert r.json() == {"email": "a@example.com", "event_id": "evt-1"}

    r = client.post(f"/api/verify/{token}", json={"password": "secret1", "name": "Ada", "username": "ada"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Account created successfully"
    user_id = body["user"]["id"]
    assert body["user"] == {"id": user_id, "email": "a@example.com", "name": "Ada", "username": "ada"}

    # welcome email went out after the invite
    assert outbox[-1]["subject"] == "[KoloKwa] You're registered for DevFest Monrovia"

    participants = db.query(Participant).filter(Participant.event_id == "evt-1").all()
    assert len(participants) == 1
    assert participants[0].user_id == user_id
    qr_text = participants[0].qr_payload

    r = client.post("/api/events/evt-1/checkin", json={"qr_data": qr_text})
    assert r.status_code == 200
    assert r.json() == {
        "message": "Check-in successful",
        "already_checked_in": False,
        "participant": {"name": "Ada", "email": "a@example.com", "username": "ada"},
    }
    db.expire_all()
    assert db.query(Participant).one().status == "checked_in"

    r = client.post("/api/events/evt-1/checkin", json={"qr_data": qr_text})
    assert r.status_code == 200
    assert r.json()["already_checked_in"] is True
    assert r.json()["message"] == "Participant already checked in"

    # token is gone
    assert client.get(f"/api/verify/{token}").status_code == 404
    assert client.post(f"/api/verify/{token}", json={"password": "secret1"}).status_code == 404


def test_signup_validation(client, event, outbox):
    r = client.post("/api/events/evt-1/signup", json={"email": "nope"})
    assert r.status_code == 400
    assert r.json() == {"detail": "Valid email required"}


def test_signup_unknown_event(client, outbox):
    r = client.post("/api/events/missing/signup", json={"email": "a@example.com"})
    assert r.status_code == 404
    assert r.json() == {"detail": "Event not found"}


def test_signup_without_mail_provider(client, event, monkeypatch):
    monkeypatch.setattr(notifications, "mail_configured", lambda: False)
    r = client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    assert r.status_code == 503
    assert r.json() == {"detail": "Email service not configured"}


def test_redeem_short_password(client, event, outbox):
    client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    token = _token_from(outbox)
    r = client.post(f"/api/verify/{token}", json={"password": "12345"})
    assert r.status_code == 400
    assert r.json() == {"detail": "Password must be at least 6 characters"}


def test_redeem_email_taken(client, db, event, other_event, outbox):
    client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    assert client.post(f"/api/verify/{_token_from(outbox)}", json={"password": "secret1"}).status_code == 200

    client.post("/api/events/evt-2/signup", json={"email": "a@example.com"})
    r = client.post(f"/api/verify/{_token_from(outbox)}", json={"password": "secret1"})
    assert r.status_code == 409
    assert r.json() == {"detail": "Email already registered"}
    assert db.query(User).count() == 1


def test_verify_unknown_token(client):
    r = client.get("/api/verify/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"detail": "Invalid or expired token"}


def test_checkin_mismatched_event(staff_client, event, other_event, outbox, db):
    client = staff_client
    client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    client.post(f"/api/verify/{_token_from(outbox)}", json={"password": "secret1"})
    qr_text = db.query(Participant).one().qr_payload

    r = client.post("/api/events/evt-2/checkin", json={"qr_data": qr_text})
    assert r.status_code == 400
    assert r.json() == {"detail": "QR code is for a different event"}


def test_checkin_requires_qr_data(staff_client, event):
    r = staff_client.post("/api/events/evt-1/checkin", json={})
    assert r.status_code == 400
    assert r.json() == {"detail": "QR data required"}


def test_checkin_requires_staff(client, event):
    r = client.post("/api/events/evt-1/checkin", json={"qr_data": "{}"})
    assert r.status_code == 401


def _age_pending(db, token, days):
    db.query(PendingSignup).filter(PendingSignup.invite_token == token).update(
        {PendingSignup.created_at: datetime.now(timezone.utc) - timedelta(days=days)}
    )
    db.commit()


def test_expired_link_answers_410(client, db, event, outbox):
    client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    token = _token_from(outbox)
    _age_pending(db, token, 8)

    r = client.get(f"/api/verify/{token}")
    assert r.status_code == 410
    assert r.json() == {"detail": "Token expired"}
    # the expired row is gone after the first read
    assert client.get(f"/api/verify/{token}").status_code == 404


def test_redeem_expired_link_answers_410(client, db, event, outbox):
    client.post("/api/events/evt-1/signup", json={"email": "a@example.com"})
    token = _token_from(outbox)
    _age_pending(db, token, 8)

    r = client.post(f"/api/verify/{token}", json={"password": "secret1"})
    assert r.status_code == 410
    assert r.json() == {"detail": "Token expired"}
    assert db.query(User).count() == 0
