"""Community events (read by the signup and check-in flows)."""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from kolokwa.database import Base
from kolokwa.models._ids import new_id


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(String(64), nullable=True)  # ISO text, as entered in the admin form
    image = Column(String(500), nullable=True)
    tag = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
