"""Startup seeding: initial admin account (from settings) and an optional sample event."""
import logging

from sqlalchemy.orm import Session

from kolokwa.config import get_settings
from kolokwa.models.event import Event
from kolokwa.models.staff_user import StaffRole, StaffUser
from kolokwa.services.auth import get_password_hash

log = logging.getLogger("uvicorn.error")


def seed_initial_admin(db: Session) -> StaffUser | None:
    settings = get_settings()
    email = (settings.initial_admin_email or "").strip().lower()
    if not email or not settings.initial_admin_password:
        return None
    existing = db.query(StaffUser).filter(StaffUser.email == email).first()
    if existing:
        return existing
    admin = StaffUser(
        email=email,
        hashed_password=get_password_hash(settings.initial_admin_password),
        role=StaffRole.admin,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    log.info("[Seed] Initial admin created: staff_id=%s", admin.id)
    return admin


def seed_sample_event(db: Session) -> None:
    if db.query(Event).count() > 0:
        return
    db.add(
        Event(
            title="Welcome: KoloKwa Launch",
            description="Celebrating the launch of KoloKwa, building community and a tech ecosystem together.",
            image="/images/cocktails.png",
            tag="launch",
        )
    )
    db.commit()
