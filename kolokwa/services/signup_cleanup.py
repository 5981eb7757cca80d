"""Delete pending signups whose invite link has expired (operator script, not scheduled)."""
import logging
from datetime import datetime, timezone, timedelta

from sqlalchemy.orm import Session

from kolokwa.config import get_settings
from kolokwa.models.pending_signup import PendingSignup

log = logging.getLogger("uvicorn.error")


def purge_expired_signups(db: Session, now: datetime | None = None) -> int:
    """Delete all pending signups older than the invite window. Returns the number deleted."""
    now = now or datetime.now(timezone.utc)
    threshold = now - timedelta(days=get_settings().invite_expire_days)
    deleted = (
        db.query(PendingSignup)
        .filter(PendingSignup.created_at < threshold)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        log.info("Signup cleanup: deleted %d expired pending signup(s).", deleted)
    return deleted
