"""Events: public listing, invitation signup, staff check-in and participant list."""
from fastapi import APIRouter, Depends
from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload

from kolokwa.database import get_db
from kolokwa.dependencies import get_current_staff
from kolokwa.exceptions import NotFound, ValidationError
from kolokwa.models.event import Event
from kolokwa.models.participant import Participant
from kolokwa.models.staff_user import StaffUser
from kolokwa.schemas.event import EventCreate, EventParticipantResponse, EventResponse
from kolokwa.schemas.signup import (
    CheckedInParticipant,
    CheckInRequest,
    CheckInResponse,
    MessageResponse,
    SignupRequest,
)
from kolokwa.services import checkin, invitations

router = APIRouter(prefix="/api/events", tags=["events"])


def _get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


@router.get("", response_model=list[EventResponse])
def list_events(db: Session = Depends(get_db)):
    events = (
        db.query(Event)
        .order_by(case((Event.date.is_(None), 1), else_=0), Event.date.asc(), Event.created_at.asc())
        .all()
    )
    return [EventResponse.model_validate(e) for e in events]


@router.post("", response_model=EventResponse)
def create_event(
    data: EventCreate,
    db: Session = Depends(get_db),
    staff: StaffUser = Depends(get_current_staff),
):
    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    event = Event(
        title=title,
        description=data.description or None,
        date=data.date or None,
        image=data.image or None,
        tag=data.tag or None,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return EventResponse.model_validate(event)


@router.get("/{event_id}", response_model=EventResponse)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return EventResponse.model_validate(_get_event_or_404(db, event_id))


@router.post("/{event_id}/signup", response_model=MessageResponse)
def signup(event_id: str, data: SignupRequest, db: Session = Depends(get_db)):
    invitations.issue_invite(db, event_id, data.email)
    return MessageResponse(message="Invite sent successfully")


@router.post("/{event_id}/checkin", response_model=CheckInResponse)
def check_in(
    event_id: str,
    data: CheckInRequest,
    db: Session = Depends(get_db),
    staff: StaffUser = Depends(get_current_staff),
):
    participant, already = checkin.check_in(db, event_id, data.qr_data)
    user = participant.user
    return CheckInResponse(
        message="Participant already checked in" if already else "Check-in successful",
        already_checked_in=already,
        participant=CheckedInParticipant(name=user.name, email=user.email, username=user.username),
    )


@router.get("/{event_id}/participants", response_model=list[EventParticipantResponse])
def list_participants(
    event_id: str,
    db: Session = Depends(get_db),
    staff: StaffUser = Depends(get_current_staff),
):
    event = _get_event_or_404(db, event_id)
    rows = (
        db.query(Participant)
        .options(joinedload(Participant.user))
        .filter(Participant.event_id == event.id)
        .order_by(Participant.created_at.asc())
        .all()
    )
    return [
        EventParticipantResponse(
            id=p.id,
            user_id=p.user_id,
            name=p.user.name,
            email=p.user.email,
            username=p.user.username,
            status=p.status,
            checked_in=p.checked_in,
            checked_in_at=p.checked_in_at,
            created_at=p.created_at,
        )
        for p in rows
    ]
