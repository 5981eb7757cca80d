"""Notification service (Mailgun/SendGrid email)."""
import logging
from html import escape

import httpx

from kolokwa.config import get_settings

log = logging.getLogger("uvicorn.error")

MAILGUN_US_BASE = "https://api.mailgun.net"
MAILGUN_EU_BASE = "https://api.eu.mailgun.net"


def mail_configured() -> bool:
    return get_settings().mail_configured


def send_email(to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    """Send email via Mailgun (preferred) or SendGrid. Returns False when unconfigured or rejected."""
    settings = get_settings()
    if settings.mailgun_api_key and settings.mailgun_domain:
        log.info("[Email] Calling Mailgun API: subject=%s domain=%s", subject, settings.mailgun_domain)
        return _send_email_mailgun(to_email, subject, html_content, text_content=text_content, settings=settings)
    if settings.sendgrid_api_key:
        return _send_email_sendgrid(to_email, subject, html_content, text_content=text_content, settings=settings)
    log.warning(
        "[Email] NOT SENT: subject=%s. MAILGUN_API_KEY/MAILGUN_DOMAIN or SENDGRID_API_KEY must be set.",
        subject,
    )
    return False


def _send_email_mailgun(to_email: str, subject: str, html_content: str, text_content: str | None = None, settings=None) -> bool:
    if settings is None:
        settings = get_settings()
    base = (settings.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
    domain = (settings.mailgun_domain or "").strip().lower()
    from_addr = (settings.mailgun_from_email or "").strip()
    from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
    if domain and from_domain != domain:
        from_addr = f"noreply@{domain}"
        log.info("[Mailgun] Using from=%s (must match domain %s for delivery)", from_addr, domain)
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
            if 200 <= r.status_code < 300:
                log.info("[Mailgun] API success: status=%s", r.status_code)
                return True
            if r.status_code == 401 and base == MAILGUN_US_BASE:
                log.warning("[Mailgun] 401 with US endpoint. Retrying with EU endpoint...")
                r2 = client.post(f"{MAILGUN_EU_BASE}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
                if 200 <= r2.status_code < 300:
                    log.info("[Mailgun] API success (EU)")
                    return True
                log.error("[Mailgun] EU request failed: status=%s body=%s", r2.status_code, r2.text[:500])
                return False
            log.error("[Mailgun] API failed: status=%s body=%s", r.status_code, r.text[:500])
            return False
    except httpx.HTTPError as e:
        log.error("[Mailgun] Request error: %s: %s", type(e).__name__, e)
        return False


def _send_email_sendgrid(to_email: str, subject: str, html_content: str, text_content: str | None = None, settings=None) -> bool:
    if settings is None:
        settings = get_settings()
    from sendgrid import SendGridAPIClient
    from sendgrid.helpers.mail import Mail

    message = Mail(
        from_email=(settings.sendgrid_from_email, settings.sendgrid_from_name),
        to_emails=to_email,
        subject=subject,
        html_content=html_content,
        plain_text_content=text_content or "",
    )
    try:
        SendGridAPIClient(settings.sendgrid_api_key).send(message)
        return True
    except Exception as e:  # sendgrid raises python_http_client errors of several types
        log.error("[SendGrid] Send failed: %s: %s", type(e).__name__, e)
        return False


def send_event_invite_email(to_email: str, event_title: str, invite_url: str, expire_days: int = 7) -> bool:
    """Invitation email carrying the redemption link for one event."""
    title = escape(event_title)
    subject = f"You're invited to {event_title}"
    text = (
        f"You've been invited to join the event: {event_title}. "
        f"Complete your registration here: {invite_url} . This link will expire in {expire_days} days."
    )
    html = f"""
    <h1>Welcome to KoloKwa!</h1>
    <p>You've been invited to join the event: <strong>{title}</strong></p>
    <p>Click the link below to complete your registration:</p>
    <a href="{escape(invite_url, quote=True)}">Complete Registration</a>
    <p>This link will expire in {expire_days} days.</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_registration_welcome_email(to_email: str, name: str | None, event_title: str) -> bool:
    """Sent after a token is redeemed (account created, participant confirmed)."""
    display = (name or "").strip() or "there"
    subject = f"[KoloKwa] You're registered for {event_title}"
    text = f"Hi {display}, you're registered for {event_title}. Sign in to view your check-in QR code."
    html = f"""
    <p>Hi {escape(display)},</p>
    <p>You're registered for <strong>{escape(event_title)}</strong>.</p>
    <p>Sign in to your participant page to see the QR code you will show at the venue to check in.</p>
    <p>— KoloKwa TechGuild</p>
    """
    return send_email(to_email, subject, html, text_content=text)
