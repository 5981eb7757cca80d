"""Check-in verifier: validate a scanned QR credential against an event and mark attendance."""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kolokwa.exceptions import BadRequest, EventMismatch, InternalError, MalformedPayload, NotFound
from kolokwa.models.event import Event
from kolokwa.models.participant import Participant, ParticipantStatus
from kolokwa.services import qr_codes

log = logging.getLogger("uvicorn.error")


def _stored_payload(participant: Participant) -> dict | None:
    try:
        return qr_codes.decode(participant.qr_payload)
    except MalformedPayload:
        return None


def find_participant(db: Session, event_id: str, payload: dict) -> Participant | None:
    """Participant of this event whose issued credential is exactly the scanned one."""
    participant = (
        db.query(Participant)
        .filter(Participant.user_id == str(payload["user_id"]), Participant.event_id == event_id)
        .first()
    )
    if not participant or _stored_payload(participant) != payload:
        return None
    return participant


def check_in(
    db: Session,
    event_id: str,
    scanned_text: str | None,
    now: datetime | None = None,
) -> tuple[Participant, bool]:
    """Returns (participant, already_checked_in).

    Checking in someone who is already checked in is not an error: the call succeeds,
    reports already_checked_in=True and leaves the first checked_in_at untouched.
    """
    if not scanned_text or not scanned_text.strip():
        raise BadRequest("QR data required")

    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFound("Event not found")

    payload = qr_codes.decode(scanned_text)
    if payload["event_id"] != event.id:
        log.info("[Check-in] Credential for event_id=%s scanned at event_id=%s", payload["event_id"], event.id)
        raise EventMismatch("QR code is for a different event")

    participant = find_participant(db, event.id, payload)
    if not participant:
        raise NotFound("Participant not found")

    try:
        updated = (
            db.query(Participant)
            .filter(
                Participant.id == participant.id,
                Participant.status != ParticipantStatus.checked_in.value,
            )
            .update(
                {
                    Participant.status: ParticipantStatus.checked_in.value,
                    Participant.checked_in_at: now or datetime.now(timezone.utc),
                },
                synchronize_session=False,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("[Check-in] Could not update participant %s", participant.id)
        raise InternalError()

    db.refresh(participant)
    already = updated == 0
    log.info(
        "[Check-in] participant_id=%s event_id=%s %s",
        participant.id,
        event.id,
        "already checked in" if already else "checked in",
    )
    return participant, already
