"""QR credential codec.

The credential is a small JSON object ``{user_id, event_id, email, timestamp}``
(timestamp = issuance time in epoch milliseconds). It is rendered as a PNG QR
code for display and printed in emails; the check-in scanner reads the QR back
into the literal JSON text, which ``decode`` turns into a payload again.
"""
import base64
import io
import json
import time
from datetime import datetime

import qrcode

from kolokwa.exceptions import MalformedPayload

PAYLOAD_FIELDS = ("user_id", "event_id", "email", "timestamp")
REQUIRED_FIELDS = ("user_id", "event_id", "email")


def build_payload(user_id: str, event_id: str, email: str, now: datetime | None = None) -> dict:
    ts = int(now.timestamp() * 1000) if now is not None else int(time.time() * 1000)
    return {"user_id": user_id, "event_id": event_id, "email": email, "timestamp": ts}


def to_text(payload: dict) -> str:
    """Compact JSON in field order; the exact text that goes into the QR code."""
    ordered = {k: payload[k] for k in PAYLOAD_FIELDS if k in payload}
    return json.dumps(ordered, separators=(",", ":"), ensure_ascii=False)


def encode(payload: dict) -> str:
    """Render the payload as a PNG QR code and return it as a data URI."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(to_text(payload))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    img_buffer = io.BytesIO()
    img.save(img_buffer, format="PNG")
    img_str = base64.b64encode(img_buffer.getvalue()).decode()
    return f"data:image/png;base64,{img_str}"


def decode(text: str) -> dict:
    """Parse scanned QR text back into a credential payload. Raises MalformedPayload."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError):
        raise MalformedPayload("Invalid QR code data")
    if not isinstance(data, dict):
        raise MalformedPayload("Invalid QR code data")
    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise MalformedPayload("Invalid QR code format")
    return data
