"""Email collaborator using the Resend API.

The dispatcher depends only on the ``EmailSender`` protocol. ``ResendEmailSender``
is the production implementation; without an API key it logs and reports success
so local environments never block on email.
"""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Protocol

import resend

from src.collab.core.config import Settings, get_settings
from src.collab.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

# Shared email styles
_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_LINK_STYLE = "color: #2563eb; word-break: break-all;"
_MUTED_STYLE = "color: #666; font-size: 14px;"


class EmailSender(Protocol):
    """Contract for the external email service.

    ``send`` returns False on failure and may also raise; callers must treat
    both forms as a failed delivery.
    """

    def send(self, to_address: str, subject: str, html_body: str) -> bool: ...


@dataclass(frozen=True)
class EmailMessage:
    """A rendered notification email."""

    subject: str
    html_body: str


class ResendEmailSender:
    """EmailSender backed by Resend with a hard timeout per call."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        if not self.settings.resend_api_key:
            # Dev mode: log instead of sending
            logger.warning(
                "RESEND_API_KEY not set - email not sent",
                to=to_address,
                subject=subject,
            )
            return True

        resend.api_key = self.settings.resend_api_key

        def _send() -> None:
            resend.Emails.send(
                {
                    "from": self.settings.email_from,
                    "to": [to_address],
                    "subject": subject,
                    "html": html_body,
                }
            )

        try:
            future = _email_executor.submit(_send)
            future.result(timeout=self.settings.email_send_timeout_seconds)
            logger.info("Notification email sent", to=to_address)
            return True
        except FuturesTimeoutError:
            logger.error(
                "Email send timed out",
                to=to_address,
                timeout=self.settings.email_send_timeout_seconds,
            )
            return False
        except Exception as e:
            logger.error("Failed to send notification email", to=to_address, error=str(e))
            return False


def render_notification_email(
    subject: str,
    heading: str,
    message: str,
    recipient_name: str,
    action_url: str | None = None,
    action_label: str = "Open",
) -> EmailMessage:
    """Render a notification email.

    All interpolated text is HTML-escaped; ``action_url`` is built by the
    caller from the configured APP_URL.
    """
    safe_heading = html.escape(heading)
    safe_message = html.escape(message)
    safe_name = html.escape(recipient_name)

    action_block = ""
    if action_url:
        safe_url = html.escape(action_url, quote=True)
        action_block = f"""
    <p style="margin: 32px 0;">
        <a href="{safe_url}" style="{_BUTTON_STYLE}">{html.escape(action_label)}</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{safe_url}" style="{_LINK_STYLE}">{safe_url}</a>
    </p>"""

    html_body = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #2563eb; margin-bottom: 24px;">{safe_heading}</h1>
    <p>Hi {safe_name},</p>
    <p>{safe_message}</p>{action_block}
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        You can change which emails you receive in your notification preferences.
    </p>
</body>
</html>"""
    return EmailMessage(subject=subject, html_body=html_body)
