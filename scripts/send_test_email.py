"""
Send a test email through the configured provider (Mailgun, else SendGrid).
Usage: python scripts/send_test_email.py <to_email>
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from kolokwa.config import get_settings
from kolokwa.services.notifications import send_email


def main():
    to_email = (sys.argv[1] if len(sys.argv) > 1 else "").strip()
    if not to_email:
        print("Usage: python scripts/send_test_email.py <to_email>")
        sys.exit(1)

    settings = get_settings()
    if not settings.mail_configured:
        print("No mail provider configured. Set MAILGUN_API_KEY and MAILGUN_DOMAIN (or SENDGRID_API_KEY) in .env")
        print(f"  MAILGUN_API_KEY: {'(set)' if settings.mailgun_api_key else '(missing)'}")
        print(f"  MAILGUN_DOMAIN: {settings.mailgun_domain or '(missing)'}")
        sys.exit(1)

    print(f"Sending test email to: {to_email}")
    ok = send_email(
        to_email,
        "[KoloKwa] Test email",
        "<p>This is a <strong>test email</strong> from KoloKwa TechGuild.</p><p>Invitation emails will arrive like this one.</p>",
        text_content="This is a test email from KoloKwa TechGuild. Invitation emails will arrive like this one.",
    )
    if ok:
        print("Sent. Check the inbox (and spam) for", to_email)
    else:
        print("Failed: the provider rejected the message.")
        print("  - Use the private Mailgun API key, not the domain name.")
        print("  - For EU accounts set MAILGUN_BASE_URL=https://api.eu.mailgun.net in .env")
        sys.exit(1)


if __name__ == "__main__":
    main()
