"""Outbound email over SMTP."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from unmute_world.core.errors import DependencyError
from unmute_world.core.settings import Settings, settings

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Email service is not configured. Please check server logs."
AUTH_FAILED_MESSAGE = (
    "Email authentication failed. Please check EMAIL_USER and EMAIL_PASS. "
    "If using Gmail, use a 16-character App Password."
)
CONNECTION_FAILED_MESSAGE = (
    "Connection to email server failed. Please check your network connection "
    "and EMAIL_HOST/EMAIL_PORT settings."
)
UNEXPECTED_FAILURE_MESSAGE = (
    "An unexpected error occurred with the email service. "
    "Please check the server logs for the full error details."
)

SMTPS_PORT = 465


def send_email(to: str, subject: str, html: str, *, config: Settings | None = None) -> None:
    """Send an HTML email.

    Raises:
        DependencyError: SMTP is not configured or delivery failed. The
            message is safe to show to the caller.
    """
    cfg = config or settings
    if not cfg.email_configured:
        logger.error("Email settings incomplete; EMAIL_HOST/PORT/USER/PASS/FROM are required")
        raise DependencyError(NOT_CONFIGURED_MESSAGE)

    message = EmailMessage()
    message["From"] = cfg.email_from
    message["To"] = to
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable email client.")
    message.add_alternative(html, subtype="html")

    host = str(cfg.email_host)
    port = int(cfg.email_port or 0)
    # App passwords are often pasted with spaces.
    password = "".join(str(cfg.email_password).split())

    try:
        if port == SMTPS_PORT:
            with smtplib.SMTP_SSL(host, port, timeout=cfg.email_timeout_seconds) as smtp:
                smtp.login(str(cfg.email_user), password)
                smtp.send_message(message)
        else:
            with smtplib.SMTP(host, port, timeout=cfg.email_timeout_seconds) as smtp:
                smtp.starttls()
                smtp.login(str(cfg.email_user), password)
                smtp.send_message(message)
    except smtplib.SMTPAuthenticationError as exc:
        logger.error("SMTP authentication failed: %s", exc)
        raise DependencyError(AUTH_FAILED_MESSAGE) from exc
    except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as exc:
        logger.error("SMTP connection to %s:%s failed: %s", host, port, exc)
        raise DependencyError(CONNECTION_FAILED_MESSAGE) from exc
    except smtplib.SMTPException as exc:
        logger.error("SMTP delivery failed: %s", exc)
        raise DependencyError(UNEXPECTED_FAILURE_MESSAGE) from exc
    except OSError as exc:
        # Socket level: refused, unreachable, timed out.
        logger.error("SMTP connection to %s:%s failed: %s", host, port, exc)
        raise DependencyError(CONNECTION_FAILED_MESSAGE) from exc

    logger.info("Sent email %r to %s", subject, to)


def password_reset_email(reset_url: str, valid_minutes: int) -> str:
    """Return the HTML body of the password-reset email."""
    return f"""\
<div style="font-family: Arial, sans-serif; line-height: 1.6;">
  <h1 style="color: #333;">Password Reset Request</h1>
  <p>You are receiving this email because you (or someone else) requested a
  password reset for your Unmute World account.</p>
  <p>Click the link below to choose a new password. It is valid for {valid_minutes} minutes.</p>
  <p><a href="{reset_url}">{reset_url}</a></p>
  <p style="font-size: 0.9em; color: #555;">If you did not request this, ignore
  this email and your password will remain unchanged.</p>
  <p style="font-size: 0.9em; color: #555;">Thank you,<br/>The Unmute World Team</p>
</div>
"""
