"""Invitation token inspection and redemption (link target of the invite email)."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kolokwa.database import get_db
from kolokwa.schemas.signup import RedeemRequest, RedeemResponse, RegisteredUser, TokenInfoResponse
from kolokwa.services import redemption

router = APIRouter(prefix="/api/verify", tags=["verify"])


@router.get("/{token}", response_model=TokenInfoResponse)
def inspect_token(token: str, db: Session = Depends(get_db)):
    return TokenInfoResponse(**redemption.inspect_token(db, token))


@router.post("/{token}", response_model=RedeemResponse)
def redeem_token(token: str, data: RedeemRequest, db: Session = Depends(get_db)):
    user = redemption.redeem(db, token, data.password, name=data.name, username=data.username)
    return RedeemResponse(message="Account created successfully", user=RegisteredUser.model_validate(user))
