# =============================================================================
# tests/test_notifications.py - Email and SMS Helper Tests
# =============================================================================

from unittest.mock import MagicMock, patch

import httpx
import pytest

from lib import notifications
from lib.notifications import (
    NotificationError,
    generate_numeric_code,
    load_template,
    render_template,
    send_email,
    send_sms,
)


class TestTemplates:
    def test_render_replaces_every_placeholder(self):
        html = render_template("<p>{{name}} paid {{amount}}, thanks {{name}}</p>", {"name": "Nimal", "amount": 10})
        assert html == "<p>Nimal paid 10, thanks Nimal</p>"

    def test_unknown_placeholders_left_alone(self):
        assert render_template("{{missing}}", {"name": "x"}) == "{{missing}}"

    def test_values_are_escaped(self):
        """Test that user-supplied names and titles can't inject markup."""
        html = render_template(load_template("payment_confirmed"), {
            "name": "<script>alert(1)</script>",
            "task_title": "Tom & Jerry \"launch\"",
        })

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "Tom &amp; Jerry &quot;launch&quot;" in html

    def test_load_template(self):
        assert "{{task_title}}" in load_template("payment_confirmed")

    def test_load_missing_template(self):
        with pytest.raises(NotificationError) as exc_info:
            load_template("nope")
        assert exc_info.value.channel == "email"


class TestNumericCode:
    @pytest.mark.parametrize("length", [1, 4, 6])
    def test_length(self, length):
        code = generate_numeric_code(length)
        assert len(code) == length
        assert code.isdigit()

    def test_no_leading_zero(self):
        assert all(not generate_numeric_code(6).startswith("0") for _ in range(50))

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            generate_numeric_code(0)


class TestSendEmail:
    """Tests for SMTP delivery."""

    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(notifications.settings, "SMTP_HOST", None)
        with pytest.raises(NotificationError) as exc_info:
            send_email("a@b.lk", "Hi", "<p>Hi</p>")
        assert "not configured" in exc_info.value.message

    def test_sends_over_starttls(self, monkeypatch):
        monkeypatch.setattr(notifications.settings, "SMTP_HOST", "smtp.test")
        monkeypatch.setattr(notifications.settings, "SMTP_PORT", 587)
        monkeypatch.setattr(notifications.settings, "SMTP_FROM", "no-reply@brandsync.lk")
        monkeypatch.setattr(notifications.settings, "SMTP_USER", "mailer")
        monkeypatch.setattr(notifications.settings, "SMTP_PASS", "pw")

        with patch("lib.notifications.smtplib.SMTP") as smtp:
            server = smtp.return_value
            server.__enter__.return_value = server
            message_id = send_email("nimal@example.lk", "Payment received", "<p>Hi</p>")

        smtp.assert_called_once_with("smtp.test", 587, timeout=30)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "pw")
        sent = server.send_message.call_args.args[0]
        assert sent["To"] == "nimal@example.lk"
        assert sent["Message-ID"] == message_id
        assert message_id.endswith("@brandsync.lk>")

    def test_smtp_failure(self, monkeypatch):
        monkeypatch.setattr(notifications.settings, "SMTP_HOST", "smtp.test")
        monkeypatch.setattr(notifications.settings, "SMTP_FROM", "no-reply@brandsync.lk")

        with patch("lib.notifications.smtplib.SMTP", side_effect=OSError("refused")):
            with pytest.raises(NotificationError):
                send_email("a@b.lk", "Hi", "<p>Hi</p>")


class TestSendSms:
    """Tests for text.lk delivery."""

    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(notifications.settings, "SMS_API_TOKEN", None)
        with pytest.raises(NotificationError) as exc_info:
            send_sms("94771234567", "hi")
        assert exc_info.value.channel == "sms"

    def test_posts_message(self, monkeypatch):
        monkeypatch.setattr(notifications.settings, "SMS_API_TOKEN", "token")
        monkeypatch.setattr(notifications.settings, "SMS_SENDER_ID", "BrandSync")
        response = MagicMock()
        response.json.return_value = {"status": "success"}

        with patch("lib.notifications.httpx.post", return_value=response) as post:
            assert send_sms("94771234567", "Your code is 123456") == {"status": "success"}

        body = post.call_args.kwargs["json"]
        assert body == {
            "recipient": "94771234567",
            "sender_id": "BrandSync",
            "type": "plain",
            "message": "Your code is 123456",
        }
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer token"

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(notifications.settings, "SMS_API_TOKEN", "token")
        with patch("lib.notifications.httpx.post", side_effect=httpx.ConnectError("down")):
            with pytest.raises(NotificationError):
                send_sms("94771234567", "hi")
