"""Signup, token redemption and check-in schemas."""
from pydantic import BaseModel


class SignupRequest(BaseModel):
    email: str = ""


class MessageResponse(BaseModel):
    message: str


class TokenInfoResponse(BaseModel):
    email: str
    event_id: str


class RedeemRequest(BaseModel):
    password: str = ""
    name: str | None = None
    username: str | None = None


class RegisteredUser(BaseModel):
    id: str
    email: str
    name: str | None = None
    username: str | None = None

    class Config:
        from_attributes = True


class RedeemResponse(BaseModel):
    message: str
    user: RegisteredUser


class CheckInRequest(BaseModel):
    qr_data: str | None = None


class CheckedInParticipant(BaseModel):
    name: str | None = None
    email: str
    username: str | None = None


class CheckInResponse(BaseModel):
    message: str
    already_checked_in: bool = False
    participant: CheckedInParticipant
