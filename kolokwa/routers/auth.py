"""Authentication: staff (admin dashboard) and participant sessions carried in JWT cookies."""
import logging
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from kolokwa.database import get_db
from kolokwa.exceptions import Forbidden, NotAuthenticated, ValidationError
from kolokwa.models.staff_user import StaffUser
from kolokwa.models.user import User
from kolokwa.schemas.auth import (
    LoginRequest,
    ParticipantSession,
    ParticipantUserResponse,
    StaffResponse,
    StaffSession,
)
from kolokwa.services.auth import (
    PARTICIPANT_COOKIE_NAME,
    STAFF_COOKIE_NAME,
    STAFF_ROLES,
    cookie_options,
    create_participant_token,
    create_staff_token,
    decode_token,
    verify_password,
)

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _credentials(data: LoginRequest) -> tuple[str, str]:
    email = (data.email or "").strip().lower()
    if not email or not data.password:
        raise ValidationError("Email and password required")
    return email, data.password


def _role_value(role) -> str:
    return getattr(role, "value", role) or "staff"


@router.post("", response_model=StaffSession)
def staff_login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    email, password = _credentials(data)
    staff = db.query(StaffUser).filter(StaffUser.email == email).first()
    if not staff or not verify_password(password, staff.hashed_password):
        log.info("[Auth] Staff login failed")
        raise NotAuthenticated("Invalid credentials")
    role = _role_value(staff.role)
    response.set_cookie(STAFF_COOKIE_NAME, create_staff_token(staff.id, staff.email, role), **cookie_options())
    return StaffSession(user=StaffResponse(id=staff.id, email=staff.email, role=role))


@router.get("", response_model=StaffSession)
def staff_session(request: Request):
    """Current staff user from the cookie, or {user: null}. Never errors on a bad cookie."""
    payload = decode_token(request.cookies.get(STAFF_COOKIE_NAME) or "")
    if not payload or payload.get("role") not in STAFF_ROLES:
        return StaffSession(user=None)
    return StaffSession(
        user=StaffResponse(id=str(payload.get("sub")), email=payload.get("email") or "", role=payload["role"])
    )


@router.delete("")
def staff_logout(response: Response):
    response.set_cookie(STAFF_COOKIE_NAME, "", **cookie_options(max_age=0))
    return {"ok": True}


@router.post("/participant", response_model=ParticipantSession)
def participant_login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    email, password = _credentials(data)
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        log.info("[Auth] Participant login failed")
        raise NotAuthenticated("Invalid credentials")
    if not user.verified:
        raise Forbidden("Account not verified")
    response.set_cookie(PARTICIPANT_COOKIE_NAME, create_participant_token(user.id, user.email), **cookie_options())
    return ParticipantSession(
        user=ParticipantUserResponse(id=user.id, email=user.email, name=user.name, username=user.username)
    )


@router.delete("/participant")
def participant_logout(response: Response):
    response.set_cookie(PARTICIPANT_COOKIE_NAME, "", **cookie_options(max_age=0))
    return {"message": "Logged out"}
