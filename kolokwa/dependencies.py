"""Shared dependencies: DB session, current staff member, current participant."""
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from kolokwa.database import get_db
from kolokwa.exceptions import Forbidden, NotAuthenticated
from kolokwa.models.staff_user import StaffUser
from kolokwa.models.user import User
from kolokwa.services.auth import (
    PARTICIPANT_COOKIE_NAME,
    PARTICIPANT_ROLE,
    STAFF_COOKIE_NAME,
    STAFF_ROLES,
    decode_token_with_error,
)


def get_current_staff(request: Request, db: Session = Depends(get_db)) -> StaffUser:
    token_str = (request.cookies.get(STAFF_COOKIE_NAME) or "").strip()
    if not token_str:
        raise NotAuthenticated()
    payload, _ = decode_token_with_error(token_str)
    if not payload:
        raise NotAuthenticated("Invalid or expired token")
    if payload.get("role") not in STAFF_ROLES:
        raise Forbidden("Staff role required")
    staff = db.query(StaffUser).filter(StaffUser.id == str(payload.get("sub"))).first()
    if not staff:
        raise NotAuthenticated("Staff user not found")
    return staff


def get_current_participant(request: Request, db: Session = Depends(get_db)) -> User:
    token_str = (request.cookies.get(PARTICIPANT_COOKIE_NAME) or "").strip()
    if not token_str:
        raise NotAuthenticated()
    payload, _ = decode_token_with_error(token_str)
    if not payload or payload.get("role") != PARTICIPANT_ROLE:
        raise NotAuthenticated("Invalid or expired token")
    user = db.query(User).filter(User.id == str(payload.get("sub"))).first()
    if not user:
        raise NotAuthenticated("User not found")
    return user
