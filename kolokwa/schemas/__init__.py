from kolokwa.schemas.auth import LoginRequest, ParticipantSession, StaffSession
from kolokwa.schemas.event import EventCreate, EventParticipantResponse, EventResponse, MyEventResponse
from kolokwa.schemas.signup import (
    CheckInRequest,
    CheckInResponse,
    MessageResponse,
    RedeemRequest,
    RedeemResponse,
    SignupRequest,
    TokenInfoResponse,
)
