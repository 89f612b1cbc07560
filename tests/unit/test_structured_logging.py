"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.collab.core.logging import (
    bind_principal_context,
    bind_request_context,
    clear_request_context,
    make_contact_masker,
    mask_contact,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Route structlog output to a CapturingLogger for the test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars, make_contact_masker(False)],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    bind_request_context("req-abc")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "req-abc"


def test_bind_request_context_with_none(capturing_logger):
    """A missing correlation id is not bound."""
    bind_request_context(None)
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs


def test_bind_principal_context_email_masked_by_default(capturing_logger):
    principal_id = uuid4()

    bind_principal_context(principal_id, "alice@example.com")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["principal_id"] == str(principal_id)
    assert kwargs["user_email"] == "a***@example.com"


def test_email_logged_verbatim_when_enabled(capturing_logger):
    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars, make_contact_masker(True)]
    )

    bind_principal_context(uuid4(), "alice@example.com")
    structlog.get_logger().info("test message")

    assert capturing_logger.calls[0].kwargs["user_email"] == "alice@example.com"


def test_send_target_masked(capturing_logger):
    structlog.get_logger().info("Notification email sent", to="bob@example.com")
    assert capturing_logger.calls[0].kwargs["to"] == "b***@example.com"


@pytest.mark.parametrize(
    ("address", "masked"),
    [("alice@example.com", "a***@example.com"), ("x@y.io", "x***@y.io"), ("no-at-sign", "***")],
)
def test_mask_contact(address, masked):
    assert mask_contact(address) == masked


def test_clear_request_context(capturing_logger):
    bind_request_context("req-abc")
    bind_principal_context(uuid4())

    clear_request_context()
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert "request_id" not in kwargs
    assert "principal_id" not in kwargs


def test_context_accumulation(capturing_logger):
    principal_id = uuid4()

    bind_request_context("req-abc")
    bind_principal_context(principal_id)
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["request_id"] == "req-abc"
    assert kwargs["principal_id"] == str(principal_id)
