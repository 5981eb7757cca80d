"""Invitation issuer: pending signup + emailed redemption link."""
import logging
import secrets
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kolokwa.config import get_settings
from kolokwa.exceptions import InternalError, NotFound, ServiceUnavailable, ValidationError
from kolokwa.models.event import Event
from kolokwa.models.pending_signup import PendingSignup
from kolokwa.services import notifications

log = logging.getLogger("uvicorn.error")


def generate_invite_token() -> str:
    return secrets.token_urlsafe(32)


def build_invite_url(token: str) -> str:
    return f"{get_settings().base_url}/verify/{token}"


def issue_invite(db: Session, event_id: str, email: str, now: datetime | None = None) -> PendingSignup:
    """Create a pending signup for (email, event) and email its redemption link.

    Earlier outstanding invites for the same email and event are replaced, so only the
    most recent link can be redeemed. The older rows are removed only after the new link
    was sent: if the mail provider rejects the message the new pending row is removed
    again, the earlier links stay valid and ServiceUnavailable is raised.
    """
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("Valid email required")

    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFound("Event not found")

    settings = get_settings()
    if not notifications.mail_configured():
        log.error("[Invite] Email service not configured; set MAILGUN_API_KEY and MAILGUN_DOMAIN (or SENDGRID_API_KEY)")
        raise ServiceUnavailable("Email service not configured")

    pending = PendingSignup(
        email=email,
        event_id=event.id,
        invite_token=generate_invite_token(),
        created_at=now or datetime.now(timezone.utc),
    )
    try:
        db.add(pending)
        db.commit()
        db.refresh(pending)
    except SQLAlchemyError:
        db.rollback()
        log.exception("[Invite] Could not store pending signup for event_id=%s", event.id)
        raise InternalError()

    sent = notifications.send_event_invite_email(
        email,
        event.title,
        build_invite_url(pending.invite_token),
        expire_days=settings.invite_expire_days,
    )
    if not sent:
        log.error("[Invite] Invite email was not sent for pending_id=%s; removing pending signup", pending.id)
        db.delete(pending)
        db.commit()
        raise ServiceUnavailable("Could not send the invitation email")

    # earlier links stop working only once the new one has been delivered
    try:
        replaced = (
            db.query(PendingSignup)
            .filter(
                PendingSignup.email == email,
                PendingSignup.event_id == event.id,
                PendingSignup.id != pending.id,
            )
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("[Invite] Could not remove earlier invites for event_id=%s", event.id)
        raise InternalError()
    if replaced:
        log.info("[Invite] Replaced %d earlier invite(s) for event_id=%s", replaced, event.id)

    log.info("[Invite] Invite sent for event_id=%s pending_id=%s", event.id, pending.id)
    return pending
