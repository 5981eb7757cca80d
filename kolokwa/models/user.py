"""Participant accounts, created when an invitation token is redeemed."""
from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.sql import func

from kolokwa.database import Base
from kolokwa.models._ids import new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    name = Column(String(255), nullable=True)
    username = Column(String(100), nullable=True)

    verified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
