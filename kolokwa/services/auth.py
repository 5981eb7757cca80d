"""Auth service (JWT cookies, password hashing)."""
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from kolokwa.config import get_settings

STAFF_COOKIE_NAME = "kolo_auth"
PARTICIPANT_COOKIE_NAME = "participant_token"
PARTICIPANT_ROLE = "participant"
STAFF_ROLES = ("admin", "editor", "staff")


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def _encode(payload: dict) -> str:
    settings = get_settings()
    payload["exp"] = datetime.now(timezone.utc) + timedelta(days=settings.auth_token_expire_days)
    raw = jwt.encode(payload, settings.auth_jwt_secret, algorithm=settings.jwt_algorithm)
    return raw if isinstance(raw, str) else raw.decode("utf-8")


def create_staff_token(staff_id: str, email: str, role: str) -> str:
    # PyJWT expects "sub" to be a string
    return _encode({"sub": str(staff_id), "email": email, "role": role})


def create_participant_token(user_id: str, email: str) -> str:
    return _encode({"sub": str(user_id), "email": email, "role": PARTICIPANT_ROLE})


def decode_token(token: str) -> dict | None:
    payload, _ = decode_token_with_error(token)
    return payload


def decode_token_with_error(token: str) -> tuple[dict | None, str | None]:
    """Decode JWT; returns (payload, error_message)."""
    if not token or not isinstance(token, str):
        return None, "empty token"
    settings = get_settings()
    try:
        payload = jwt.decode(
            token.strip(),
            settings.auth_jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
        return payload, None
    except jwt.ExpiredSignatureError as e:
        return None, str(e)
    except jwt.PyJWTError as e:
        return None, str(e)


def cookie_options(max_age: int | None = None) -> dict:
    """Keyword arguments for Response.set_cookie (httpOnly, lax, 7 days by default)."""
    settings = get_settings()
    return {
        "httponly": True,
        "path": "/",
        "samesite": "lax",
        "secure": settings.cookie_secure or settings.app_env == "production",
        "max_age": settings.auth_token_expire_days * 24 * 60 * 60 if max_age is None else max_age,
    }
