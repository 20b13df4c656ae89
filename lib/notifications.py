# =============================================================================
# lib/notifications.py - Email and SMS Helpers
# =============================================================================
# Low-level senders used by the Celery notification tasks and SMS verification:
# - render_template(): fill {{key}} placeholders in an HTML email template
# - send_email(): deliver an HTML email over SMTP
# - send_sms(): deliver a text message through the text.lk HTTP API
# - generate_numeric_code(): random digits for SMS verification
# =============================================================================

from __future__ import annotations

import logging
import secrets
import smtplib
from email.message import EmailMessage
from html import escape
from pathlib import Path
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


class NotificationError(Exception):
    """Raised when an email or SMS cannot be delivered."""

    def __init__(self, message: str, channel: str):
        super().__init__(message)
        self.message = message
        self.channel = channel


def load_template(name: str) -> str:
    """Read an HTML template from templates/email/{name}.html."""
    path = TEMPLATE_DIR / f"{name}.html"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise NotificationError(f"Email template not found: {name} ({e})", channel="email")


def render_template(template: str, context: dict[str, Any]) -> str:
    """Replace every {{key}} in the template with the HTML-escaped str(context[key])."""
    rendered = template
    for key, value in context.items():
        rendered = rendered.replace("{{" + key + "}}", escape(str(value)))
    return rendered


def send_email(to: str, subject: str, html: str, from_email: str | None = None) -> str:
    """
    Send an HTML email through the configured SMTP server.

    Returns:
        The Message-ID of the sent email

    Raises:
        NotificationError: If SMTP is not configured or delivery fails
    """
    if not settings.SMTP_HOST:
        raise NotificationError("SMTP_HOST is not configured", channel="email")

    sender = from_email or settings.SMTP_FROM
    if not sender:
        raise NotificationError("SMTP_FROM is not configured", channel="email")

    message = EmailMessage()
    message["From"] = f'"{settings.SMTP_FROM_NAME}" <{sender}>'
    message["To"] = to
    message["Subject"] = subject
    message["Message-ID"] = f"<{secrets.token_hex(16)}@{sender.split('@')[-1]}>"
    message.set_content("This email requires an HTML capable client.")
    message.add_alternative(html, subtype="html")

    try:
        if settings.SMTP_PORT == 465:
            server = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30)
        else:
            server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30)
            server.starttls()

        with server:
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASS or "")
            server.send_message(message)

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to}: {e}")
        raise NotificationError(f"Failed to send email: {e}", channel="email")

    logger.info(f"Sent email '{subject}' to {to}")
    return message["Message-ID"]


def send_sms(recipient: str, message: str, sms_type: str = "plain") -> dict[str, Any]:
    """
    Send an SMS through the text.lk API.

    Returns:
        The decoded JSON response from the SMS provider

    Raises:
        NotificationError: If the API token is missing or the request fails
    """
    if not settings.SMS_API_TOKEN:
        raise NotificationError("SMS_API_TOKEN is not configured", channel="sms")

    try:
        response = httpx.post(
            settings.SMS_API_URL,
            json={
                "recipient": recipient,
                "sender_id": settings.SMS_SENDER_ID,
                "type": sms_type,
                "message": message,
            },
            headers={
                "Authorization": f"Bearer {settings.SMS_API_TOKEN}",
                "Accept": "application/json",
            },
            timeout=15,
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"SMS sending failed for {recipient}: {e}")
        raise NotificationError(f"Failed to send SMS: {e}", channel="sms")

    logger.info(f"Sent SMS to {recipient}")
    return response.json()


def generate_numeric_code(length: int = 6) -> str:
    """Random numeric code of exactly `length` digits, no leading zero."""
    if length < 1:
        raise ValueError("length must be at least 1")
    low = 10 ** (length - 1)
    high = 10 ** length - 1
    return str(low + secrets.randbelow(high - low + 1))
