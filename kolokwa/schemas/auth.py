"""Auth schemas."""
from pydantic import BaseModel


class LoginRequest(BaseModel):
    # Plain str so missing/blank values get the 400 "required" message instead of a 422
    email: str = ""
    password: str = ""


class StaffResponse(BaseModel):
    id: str
    email: str
    role: str


class StaffSession(BaseModel):
    user: StaffResponse | None = None


class ParticipantUserResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    username: str | None = None
    role: str = "participant"


class ParticipantSession(BaseModel):
    user: ParticipantUserResponse
