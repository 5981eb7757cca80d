"""Error kinds raised by services and mapped to HTTP responses in kolokwa.main."""
from __future__ import annotations


class KoloKwaError(Exception):
    """Base exception; carries the HTTP status and the user-facing message."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(KoloKwaError):
    """Bad input shape or length."""

    status_code = 400
    default_detail = "Invalid request"


class BadRequest(KoloKwaError):
    status_code = 400
    default_detail = "Bad request"


class MalformedPayload(KoloKwaError):
    """QR content that is not JSON or lacks required fields."""

    status_code = 400
    default_detail = "Invalid QR code data"


class EventMismatch(KoloKwaError):
    status_code = 400
    default_detail = "QR code is for a different event"


class NotAuthenticated(KoloKwaError):
    status_code = 401
    default_detail = "Not authenticated"


class Forbidden(KoloKwaError):
    status_code = 403
    default_detail = "Forbidden"


class NotFound(KoloKwaError):
    status_code = 404
    default_detail = "Not found"


class Conflict(KoloKwaError):
    status_code = 409
    default_detail = "Conflict"


class Expired(KoloKwaError):
    status_code = 410
    default_detail = "Token expired"


class InternalError(KoloKwaError):
    """Unexpected store or codec failure. Detail is always generic."""

    status_code = 500


class ServiceUnavailable(KoloKwaError):
    """A required external dependency (mail provider, database) is not configured."""

    status_code = 503
    default_detail = "Service unavailable"
