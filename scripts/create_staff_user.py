"""
Create (or reset the password of) a staff account for the admin dashboard.

Run from project root:
  python scripts/create_staff_user.py <email> <password> [admin|editor|staff]

Staff log in at POST /api/auth and can then create events and check participants in.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from kolokwa.database import SessionLocal, engine
from kolokwa.models.staff_user import StaffRole, StaffUser
from kolokwa.services.auth import get_password_hash


def main():
    if len(sys.argv) < 3:
        print("Usage: python scripts/create_staff_user.py <email> <password> [admin|editor|staff]")
        sys.exit(1)
    email = sys.argv[1].strip().lower()
    password = sys.argv[2]
    role_name = sys.argv[3] if len(sys.argv) > 3 else "admin"
    try:
        role = StaffRole(role_name)
    except ValueError:
        print(f"Unknown role {role_name!r}. Use one of: {', '.join(r.value for r in StaffRole)}")
        sys.exit(1)
    if engine is None:
        print("DATABASE_URL is empty. Set it in .env first.")
        sys.exit(1)

    db = SessionLocal()
    try:
        staff = db.query(StaffUser).filter(StaffUser.email == email).first()
        if staff:
            staff.hashed_password = get_password_hash(password)
            staff.role = role
            print(f"Updated staff user: {email} ({role.value})")
        else:
            db.add(StaffUser(email=email, hashed_password=get_password_hash(password), role=role))
            print(f"Created staff user: {email} ({role.value})")
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()
