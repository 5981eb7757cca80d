"""Event and participant schemas."""
from datetime import datetime
from pydantic import BaseModel


class EventCreate(BaseModel):
    title: str = ""
    description: str | None = None
    date: str | None = None  # ISO date/time text
    image: str | None = None
    tag: str | None = None


class EventResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    date: str | None = None
    image: str | None = None
    tag: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class EventParticipantResponse(BaseModel):
    """Row of the admin participant list for one event."""
    id: str
    user_id: str
    name: str | None = None
    email: str
    username: str | None = None
    status: str
    checked_in: bool
    checked_in_at: datetime | None = None
    created_at: datetime | None = None


class MyEventResponse(BaseModel):
    """Participant's own registration, with the QR code to show at the venue."""
    participant_id: str
    event_id: str
    title: str
    date: str | None = None
    status: str
    checked_in: bool
    checked_in_at: datetime | None = None
    qr_code: str
