"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from kolokwa.models.event import Event
from kolokwa.models.staff_user import StaffUser, StaffRole
from kolokwa.models.user import User
from kolokwa.models.pending_signup import PendingSignup
from kolokwa.models.participant import Participant, ParticipantStatus

__all__ = [
    "Event",
    "StaffUser",
    "StaffRole",
    "User",
    "PendingSignup",
    "Participant",
    "ParticipantStatus",
]
