"""Token redeemer: inspect/redeem invitation tokens and issue the participant's QR credential.

Expiry is enforced on read only: a pending signup older than the validity window is
deleted the first time anyone looks it up, and there is no background sweep.
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from kolokwa.config import get_settings
from kolokwa.exceptions import (
    Conflict,
    Expired,
    InternalError,
    KoloKwaError,
    NotFound,
    ValidationError,
)
from kolokwa.models.event import Event
from kolokwa.models.participant import Participant, ParticipantStatus
from kolokwa.models.pending_signup import PendingSignup
from kolokwa.models.user import User
from kolokwa.services import notifications, qr_codes
from kolokwa.services.auth import get_password_hash

log = logging.getLogger("uvicorn.error")

MIN_PASSWORD_LENGTH = 6


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def is_expired(pending: PendingSignup, now: datetime) -> bool:
    """Strictly older than the window; a token exactly INVITE_EXPIRE_DAYS old is still valid."""
    window = timedelta(days=get_settings().invite_expire_days)
    return _as_utc(now) - _as_utc(pending.created_at) > window


def _load_valid_pending(db: Session, token: str, now: datetime) -> PendingSignup:
    pending = db.query(PendingSignup).filter(PendingSignup.invite_token == token).first()
    if not pending:
        raise NotFound("Invalid or expired token")
    if is_expired(pending, now):
        # the instance is unusable once its row is gone
        pending_id = pending.id
        try:
            db.query(PendingSignup).filter(PendingSignup.id == pending_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            log.exception("[Verify] Could not delete expired pending signup %s", pending_id)
            raise InternalError()
        log.info("[Verify] Pending signup %s expired; deleted", pending_id)
        raise Expired("Token expired")
    return pending


def inspect_token(db: Session, token: str, now: datetime | None = None) -> dict:
    """Read-only view of a token for pre-filling the registration form."""
    pending = _load_valid_pending(db, token, now or datetime.now(timezone.utc))
    return {"email": pending.email, "event_id": pending.event_id}


def _is_email_conflict(e: IntegrityError) -> bool:
    msg = str(getattr(e, "orig", None) or e).lower()
    return "email" in msg


def redeem(
    db: Session,
    token: str,
    password: str | None,
    name: str | None = None,
    username: str | None = None,
    now: datetime | None = None,
) -> User:
    """Consume a token: create the user, its QR credential and participant row.

    The pending row is claimed with a compare-and-delete inside the same transaction that
    inserts the user and participant, so either all three changes land or none do, and two
    concurrent redemptions of one token cannot both succeed.
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    now = now or datetime.now(timezone.utc)
    pending = _load_valid_pending(db, token, now)
    pending_id, email, event_id = pending.id, pending.email, pending.event_id

    if db.query(User.id).filter(User.email == email).first():
        raise Conflict("Email already registered")

    try:
        claimed = (
            db.query(PendingSignup)
            .filter(PendingSignup.id == pending_id)
            .delete(synchronize_session=False)
        )
        if claimed != 1:
            raise NotFound("Invalid or expired token")

        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=(name or "").strip() or None,
            username=(username or "").strip() or None,
            verified=True,
        )
        db.add(user)
        db.flush()

        payload = qr_codes.build_payload(user.id, event_id, user.email, now=now)
        participant = Participant(
            user_id=user.id,
            event_id=event_id,
            qr_payload=qr_codes.to_text(payload),
            qr_code=qr_codes.encode(payload),
            status=ParticipantStatus.confirmed.value,
        )
        db.add(participant)
        db.commit()
    except KoloKwaError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if _is_email_conflict(e):
            raise Conflict("Email already registered")
        log.exception("[Verify] Integrity error redeeming pending signup %s", pending_id)
        raise InternalError()
    except Exception:
        db.rollback()
        log.exception("[Verify] Redeeming pending signup %s failed; rolled back", pending_id)
        raise InternalError()

    db.refresh(user)
    log.info("[Verify] Pending signup %s redeemed: user_id=%s event_id=%s", pending_id, user.id, event_id)
    _send_welcome(db, user, event_id)
    return user


def _send_welcome(db: Session, user: User, event_id: str) -> None:
    if not notifications.mail_configured():
        return
    try:
        event = db.query(Event).filter(Event.id == event_id).first()
        sent = notifications.send_registration_welcome_email(user.email, user.name, event.title if event else "the event")
    except Exception:
        log.exception("[Verify] Welcome email failed for user_id=%s", user.id)
        return
    if not sent:
        log.warning("[Verify] Welcome email not sent for user_id=%s", user.id)
