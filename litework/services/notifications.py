"""Notification delivery: in-app inbox rows and optional SMTP email."""

from __future__ import annotations

import logging
import smtplib
import uuid
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from litework.core.config import get_settings
from litework.core.enums import NotificationType
from litework.models.notification import Notification

log = logging.getLogger("litework.notifications")

DEFAULT_PREFERENCES: dict = {
    "workoutReminders": {"enabled": True, "timing": "smart", "channels": ["email"]},
    "achievementNotifications": {"enabled": True, "channels": ["push"]},
    "assignmentNotifications": {"enabled": True, "channels": ["push"]},
}


def merged_preferences(stored: dict | None) -> dict:
    """Stored preferences over defaults, one level deep."""
    prefs = {k: dict(v) for k, v in DEFAULT_PREFERENCES.items()}
    for key, value in (stored or {}).items():
        if isinstance(value, dict) and key in prefs:
            prefs[key].update(value)
        else:
            prefs[key] = value
    return prefs


async def create_notification(
    db: AsyncSession,
    user_id: uuid.UUID,
    title: str,
    body: str | None = None,
    type_: NotificationType = NotificationType.GENERAL,
    url: str | None = None,
    data: dict | None = None,
) -> Notification:
    n = Notification(user_id=user_id, type=type_, title=title, body=body, url=url, data=data)
    db.add(n)
    await db.flush()
    return n


def _send_email_sync(recipient: str, subject: str, html_body: str) -> bool:
    settings = get_settings()
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.email_sender
    msg["To"] = recipient
    msg.attach(MIMEText(html_body, "html"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
            server.starttls()
            if settings.smtp_user:
                server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.email_sender, [recipient], msg.as_string())
        return True
    except (smtplib.SMTPException, OSError) as e:
        log.error("Failed to send email to %s: %s", recipient, e)
        return False


async def send_email(recipient: str, subject: str, html_body: str) -> bool:
    """Send an HTML email. Returns False when SMTP is not configured or delivery fails."""
    if not get_settings().email_enabled:
        log.debug("Email disabled; skipping %r to %s", subject, recipient)
        return False
    return await run_in_threadpool(_send_email_sync, recipient, subject, html_body)
