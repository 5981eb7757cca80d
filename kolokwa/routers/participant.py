"""Participant area: the signed-in participant's own event registrations."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from kolokwa.database import get_db
from kolokwa.dependencies import get_current_participant
from kolokwa.models.participant import Participant
from kolokwa.models.user import User
from kolokwa.schemas.event import MyEventResponse

router = APIRouter(prefix="/api/participant", tags=["participant"])


@router.get("/events", response_model=list[MyEventResponse])
def my_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_participant),
):
    rows = (
        db.query(Participant)
        .options(joinedload(Participant.event))
        .filter(Participant.user_id == current_user.id)
        .order_by(Participant.created_at.desc())
        .all()
    )
    return [
        MyEventResponse(
            participant_id=p.id,
            event_id=p.event_id,
            title=p.event.title if p.event else "",
            date=p.event.date if p.event else None,
            status=p.status,
            checked_in=p.checked_in,
            checked_in_at=p.checked_in_at,
            qr_code=p.qr_code,
        )
        for p in rows
    ]
