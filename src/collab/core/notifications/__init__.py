"""Notification utilities - email.

Re-exports the email collaborator contract and its Resend implementation.
"""

from src.collab.core.notifications.email import (
    EmailMessage,
    EmailSender,
    ResendEmailSender,
    render_notification_email,
)

__all__ = [
    "EmailMessage",
    "EmailSender",
    "ResendEmailSender",
    "render_notification_email",
]
