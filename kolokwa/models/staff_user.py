"""Admin dashboard accounts."""
import enum

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func

from kolokwa.database import Base
from kolokwa.models._ids import new_id


class StaffRole(str, enum.Enum):
    admin = "admin"
    editor = "editor"
    staff = "staff"


class StaffUser(Base):
    __tablename__ = "staff_users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(StaffRole), nullable=False, default=StaffRole.staff)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
