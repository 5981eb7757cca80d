"""
Delete pending signups whose invite link has expired (older than INVITE_EXPIRE_DAYS).
Expired links are already rejected on read; this only keeps the table small.

Run from project root (e.g. from cron):
  python scripts/purge_expired_signups.py
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from kolokwa.database import SessionLocal, engine
from kolokwa.services.signup_cleanup import purge_expired_signups


def main():
    if engine is None:
        print("DATABASE_URL is empty. Nothing to purge.")
        sys.exit(1)
    db = SessionLocal()
    try:
        deleted = purge_expired_signups(db)
        print(f"Deleted {deleted} expired pending signup(s).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
