"""Token redeemer tests: expiry window, password gate, single consumption, atomicity."""
import threading
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from kolokwa.database import Base
from kolokwa.exceptions import Conflict, Expired, KoloKwaError, NotFound, ValidationError
from kolokwa.models import Event, Participant, PendingSignup, User
from kolokwa.services import notifications, qr_codes, redemption
from kolokwa.services.auth import verify_password

T0 = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _pending(db, token="tok-1", email="a@example.com", event_id="evt-1", created_at=T0):
    p = PendingSignup(email=email, event_id=event_id, invite_token=token, created_at=created_at)
    db.add(p)
    db.commit()
    return p


def test_inspect_token(db, event):
    _pending(db)
    assert redemption.inspect_token(db, "tok-1", now=T0 + timedelta(hours=1)) == {
        "email": "a@example.com",
        "event_id": "evt-1",
    }


def test_inspect_unknown_token(db, event):
    with pytest.raises(NotFound) as exc:
        redemption.inspect_token(db, "nope")
    assert exc.value.detail == "Invalid or expired token"


@pytest.mark.parametrize("age", [timedelta(days=6, hours=23), timedelta(days=7)])
def test_token_valid_up_to_seven_days(db, event, age):
    _pending(db)
    assert redemption.inspect_token(db, "tok-1", now=T0 + age)["email"] == "a@example.com"


def test_expired_token_is_deleted_on_read(db, event):
    _pending(db)
    with pytest.raises(Expired) as exc:
        redemption.inspect_token(db, "tok-1", now=T0 + timedelta(days=7, hours=1))
    assert exc.value.status_code == 410
    assert db.query(PendingSignup).count() == 0
    with pytest.raises(NotFound):
        redemption.inspect_token(db, "tok-1", now=T0 + timedelta(days=7, hours=1))


def test_redeem_expired_token(db, event):
    _pending(db)
    with pytest.raises(Expired):
        redemption.redeem(db, "tok-1", "secret1", now=T0 + timedelta(days=8))
    assert db.query(User).count() == 0


def test_password_gate(db, event):
    _pending(db)
    with pytest.raises(ValidationError) as exc:
        redemption.redeem(db, "tok-1", "12345", now=T0)
    assert exc.value.detail == "Password must be at least 6 characters"
    assert db.query(PendingSignup).count() == 1

    user = redemption.redeem(db, "tok-1", "123456", now=T0)
    assert user.id


def test_missing_password(db, event):
    _pending(db)
    with pytest.raises(ValidationError):
        redemption.redeem(db, "tok-1", None, now=T0)


def test_redeem_creates_user_and_participant(db, event):
    _pending(db)
    now = T0 + timedelta(days=1)
    user = redemption.redeem(db, "tok-1", "secret1", name=" Ada ", username="ada", now=now)

    assert user.email == "a@example.com"
    assert user.name == "Ada"
    assert user.username == "ada"
    assert user.verified is True
    assert user.hashed_password != "secret1"
    assert verify_password("secret1", user.hashed_password)

    participants = db.query(Participant).all()
    assert len(participants) == 1
    p = participants[0]
    assert p.user_id == user.id
    assert p.event_id == "evt-1"
    assert p.status == "confirmed"
    assert p.checked_in_at is None
    assert p.qr_code.startswith("data:image/png;base64,")
    assert qr_codes.decode(p.qr_payload) == {
        "user_id": user.id,
        "event_id": "evt-1",
        "email": "a@example.com",
        "timestamp": int(now.timestamp() * 1000),
    }
    assert db.query(PendingSignup).count() == 0


def test_token_consumed_once(db, event):
    _pending(db)
    redemption.redeem(db, "tok-1", "secret1", now=T0)
    with pytest.raises(NotFound):
        redemption.redeem(db, "tok-1", "secret1", now=T0)
    assert db.query(User).count() == 1
    assert db.query(Participant).count() == 1


def test_email_already_registered(db, event, other_event):
    _pending(db, token="tok-1", event_id="evt-1")
    redemption.redeem(db, "tok-1", "secret1", now=T0)
    _pending(db, token="tok-2", event_id="evt-2")
    with pytest.raises(Conflict) as exc:
        redemption.redeem(db, "tok-2", "secret1", now=T0)
    assert exc.value.status_code == 409
    assert exc.value.detail == "Email already registered"
    # nothing consumed, nothing half-created
    assert db.query(PendingSignup).filter(PendingSignup.invite_token == "tok-2").count() == 1
    assert db.query(Participant).count() == 1


def test_failure_after_user_insert_rolls_back_everything(db, event, monkeypatch):
    _pending(db)

    def broken_encode(payload):
        raise RuntimeError("encoder down")

    monkeypatch.setattr(qr_codes, "encode", broken_encode)
    with pytest.raises(KoloKwaError) as exc:
        redemption.redeem(db, "tok-1", "secret1", now=T0)
    assert exc.value.status_code == 500
    assert exc.value.detail == "Internal server error"
    assert db.query(User).count() == 0
    assert db.query(Participant).count() == 0
    assert db.query(PendingSignup).count() == 1


def test_concurrent_redemptions_exactly_one_succeeds(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    setup = Session()
    setup.add(Event(id="evt-1", title="DevFest"))
    setup.add(PendingSignup(email="a@example.com", event_id="evt-1", invite_token="tok-race", created_at=datetime.now(timezone.utc)))
    setup.commit()
    setup.close()

    attempts = 4
    barrier = threading.Barrier(attempts)
    successes, failures = [], []

    def attempt():
        session = Session()
        try:
            barrier.wait()
            successes.append(redemption.redeem(session, "tok-race", "secret1").id)
        except Exception as e:  # lock errors surface as InternalError, but count anything
            failures.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=attempt) for _ in range(attempts)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    check = Session()
    try:
        assert len(successes) == 1
        assert len(successes) + len(failures) == attempts
        assert check.query(User).count() == len(successes)
        assert check.query(Participant).count() == len(successes)
    finally:
        check.close()
        engine.dispose()


def test_welcome_email_rejected_does_not_fail_redeem(db, event, outbox, monkeypatch):
    _pending(db)
    monkeypatch.setattr(notifications, "send_email", lambda *a, **kw: False)
    user = redemption.redeem(db, "tok-1", "secret1", now=T0)
    assert db.query(Participant).filter(Participant.user_id == user.id).count() == 1


def test_welcome_email_error_does_not_fail_redeem(db, event, outbox, monkeypatch):
    _pending(db)

    def broken_welcome(*args, **kwargs):
        raise RuntimeError("template missing")

    monkeypatch.setattr(notifications, "send_registration_welcome_email", broken_welcome)
    user = redemption.redeem(db, "tok-1", "secret1", now=T0)
    assert user.verified is True
    assert db.query(PendingSignup).count() == 0


def test_welcome_email_for_missing_event(db, outbox):
    # sqlite does not enforce the events foreign key here
    _pending(db, event_id="gone")
    redemption.redeem(db, "tok-1", "secret1", now=T0)
    assert outbox[-1]["subject"] == "[KoloKwa] You're registered for the event"
