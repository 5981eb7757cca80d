"""Event attendance record holding the participant's QR credential."""
import enum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from kolokwa.database import Base
from kolokwa.models._ids import new_id


class ParticipantStatus(str, enum.Enum):
    confirmed = "confirmed"
    checked_in = "checked_in"


class Participant(Base):
    __tablename__ = "participants"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_participants_user_event"),)

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)

    # qr_payload is the credential JSON text encoded in the QR; qr_code is its PNG data URI
    qr_payload = Column(String(512), unique=True, nullable=False)
    qr_code = Column(Text, nullable=False)

    # Stored as plain text so the conditional check-in UPDATE compares strings on every backend
    status = Column(String(20), nullable=False, default=ParticipantStatus.confirmed.value)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref="participations")
    event = relationship("Event", backref="participants")

    @property
    def checked_in(self) -> bool:
        return self.status == ParticipantStatus.checked_in.value
