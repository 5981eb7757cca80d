"""Pending signup: the user is created only after the emailed invite link is redeemed."""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func

from kolokwa.database import Base
from kolokwa.models._ids import new_id


class PendingSignup(Base):
    __tablename__ = "pending_signups"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    invite_token = Column(String(64), unique=True, nullable=False, index=True)

    # Validity window starts here; expiry is enforced when the row is read
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
