"""pytest fixtures: in-memory database, outbox for sent emails, API test clients."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-key-for-jwt-signing-0123456789")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kolokwa.database import Base, get_db
from kolokwa.main import app
from kolokwa.models import Event, StaffUser
from kolokwa.models.staff_user import StaffRole
from kolokwa.services import notifications
from kolokwa.services.auth import get_password_hash

STAFF_EMAIL = "admin@kolokwa.tech"
STAFF_PASSWORD = "admin-password"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def event(db):
    ev = Event(id="evt-1", title="DevFest Monrovia", date="2026-11-21T09:00:00Z")
    db.add(ev)
    db.commit()
    return ev


@pytest.fixture
def other_event(db):
    ev = Event(id="evt-2", title="Hack Night")
    db.add(ev)
    db.commit()
    return ev


@pytest.fixture(autouse=True)
def no_mail_provider(monkeypatch):
    """Tests never reach a real provider, even when .env carries keys."""
    monkeypatch.setattr(notifications, "mail_configured", lambda: False)


@pytest.fixture
def outbox(monkeypatch, no_mail_provider):
    """Mail provider stand-in: records every message and reports it as sent."""
    sent = []

    def fake_send_email(to_email, subject, html_content, text_content=None):
        sent.append({"to": to_email, "subject": subject, "html": html_content, "text": text_content})
        return True

    monkeypatch.setattr(notifications, "send_email", fake_send_email)
    monkeypatch.setattr(notifications, "mail_configured", lambda: True)
    return sent


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def staff(db):
    user = StaffUser(email=STAFF_EMAIL, hashed_password=get_password_hash(STAFF_PASSWORD), role=StaffRole.admin)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def staff_client(client, staff):
    """Client carrying a staff session cookie."""
    r = client.post("/api/auth", json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
    assert r.status_code == 200
    return client
