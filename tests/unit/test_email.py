"""Tests for notification email rendering and the Resend sender."""

from unittest.mock import patch

import pytest

from src.collab.core.config import get_settings
from src.collab.core.notifications import ResendEmailSender, render_notification_email

pytestmark = pytest.mark.unit


class TestRenderNotificationEmail:
    def test_interpolated_text_is_escaped(self):
        message = render_notification_email(
            subject="Shared",
            heading="<b>Blog</b>",
            message='Olivia shared "<script>alert(1)</script>"',
            recipient_name="Alice & Bob",
        )

        assert "<script>" not in message.html_body
        assert "&lt;b&gt;Blog&lt;/b&gt;" in message.html_body
        assert "Alice &amp; Bob" in message.html_body

    def test_action_link_rendered_when_given(self):
        message = render_notification_email(
            subject="Shared",
            heading="Blog",
            message="m",
            recipient_name="Alice",
            action_url="http://localhost:3000/projects/1?a=1&b=2",
            action_label="Open project",
        )

        assert 'href="http://localhost:3000/projects/1?a=1&amp;b=2"' in message.html_body
        assert "Open project" in message.html_body

    def test_no_action_block_without_url(self):
        message = render_notification_email(
            subject="Hi", heading="Hi", message="m", recipient_name="Alice"
        )
        assert "href=" not in message.html_body


class TestResendEmailSender:
    def test_dev_mode_without_api_key_reports_success(self):
        settings = get_settings().model_copy(update={"resend_api_key": None})

        with patch("src.collab.core.notifications.email.resend.Emails.send") as send:
            assert ResendEmailSender(settings).send("a@example.com", "s", "<p>b</p>") is True
        send.assert_not_called()

    def test_sends_through_resend(self):
        settings = get_settings().model_copy(update={"resend_api_key": "re_test"})

        with patch("src.collab.core.notifications.email.resend.Emails.send") as send:
            assert ResendEmailSender(settings).send("a@example.com", "Subj", "<p>b</p>") is True

        params = send.call_args[0][0]
        assert params["to"] == ["a@example.com"]
        assert params["subject"] == "Subj"
        assert params["from"] == settings.email_from

    def test_provider_error_returns_false(self):
        settings = get_settings().model_copy(update={"resend_api_key": "re_test"})

        with patch(
            "src.collab.core.notifications.email.resend.Emails.send",
            side_effect=RuntimeError("rate limited"),
        ):
            assert ResendEmailSender(settings).send("a@example.com", "s", "b") is False
