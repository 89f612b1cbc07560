"""Logging configuration using structlog."""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, WrappedLogger

# Event keys that may carry a contact address.
CONTACT_KEYS = frozenset({"to", "contact", "user_email"})


def mask_contact(address: str) -> str:
    """``alice@example.com`` -> ``a***@example.com``."""
    local, sep, domain = address.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def make_contact_masker(log_user_emails: bool) -> structlog.typing.Processor:
    """Processor that masks contact addresses unless emails may be logged."""

    def _mask(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if log_user_emails:
            return event_dict
        for key in CONTACT_KEYS & event_dict.keys():
            value = event_dict[key]
            if isinstance(value, str):
                event_dict[key] = mask_contact(value)
        return event_dict

    return _mask


def setup_logging(debug: bool = False, log_user_emails: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: If True, use colored console output. If False, use JSON for production.
        log_user_emails: If False, contact addresses are masked in every event.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        make_contact_masker(log_user_emails),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.typing.Processor = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Quiet noisy libraries; resend logs through httpx/requests.
    for name in ("sqlalchemy.engine", "httpx", "httpcore", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind the correlation id to all subsequent log calls in this request."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_principal_context(principal_id: UUID, email: str | None = None) -> None:
    """Bind the authenticated principal to all subsequent log calls.

    The optional email is bound as ``user_email`` and masked by the
    contact processor unless LOG_USER_EMAILS is enabled.
    """
    bind_contextvars(principal_id=str(principal_id))
    if email:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()
