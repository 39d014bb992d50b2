"""Unit tests for NotificationService."""

import pytest
from unittest.mock import patch

from commhub.schemas.notification import EmailRequest, NotificationResult
from commhub.services.notification_service import NotificationService, normalize_recipients


class TestNormalizeRecipients:

    def test_single_address(self):
        assert normalize_recipients("a@x.test") == ["a@x.test"]

    def test_list_of_addresses(self):
        assert normalize_recipients(["a@x.test", "b@x.test"]) == ["a@x.test", "b@x.test"]


class TestEmailRequest:
    """Test request field aliases."""

    def test_body_aliases(self):
        request = EmailRequest.model_validate({
            "to": "a@x.test",
            "htmlBody": "<p>hi</p>",
            "textBody": "hi",
            "templateName": "welcome",
        })

        assert request.html == "<p>hi</p>"
        assert request.text == "hi"
        assert request.template == "welcome"
        assert request.template_data == {}


class TestNotificationService:
    """Test NotificationService."""

    @pytest.fixture
    def service(self):
        return NotificationService(sender="noreply@commhub.test")

    def test_counts_recipients(self, service):
        result = service.send_email(EmailRequest(to=["a@x.test", "b@x.test"], subject="Hi", text="Hello"))

        assert isinstance(result, NotificationResult)
        assert result.success is True
        assert result.message == "Email sent successfully"
        assert result.recipients_count == 2

    def test_response_keys(self, service):
        result = service.send_email(EmailRequest(to="a@x.test", subject="Hi", text="Hello"))

        assert result.model_dump(by_alias=True) == {
            "success": True,
            "message": "Email sent successfully",
            "recipientsCount": 1,
        }

    def test_template_overrides_bodies(self, service):
        request = EmailRequest(
            to="a@x.test",
            subject="ignored",
            text="ignored",
            template="welcome",
            template_data={"name": "Dana", "loginUrl": "https://app.test/login"},
        )

        with patch.object(service, "deliver") as deliver:
            service.send_email(request)

        recipients, subject, html_body, text_body = deliver.call_args.args
        assert recipients == ["a@x.test"]
        assert subject == "Welcome to CommHub!"
        assert "Hi Dana," in text_body
        assert 'href="https://app.test/login"' in html_body

    def test_unknown_template_uses_request_bodies(self, service):
        request = EmailRequest(to="a@x.test", subject="Plain", html="<p>x</p>", text="x", template="farewell")

        with patch.object(service, "deliver") as deliver:
            result = service.send_email(request)

        assert result.success is True
        deliver.assert_called_once_with(["a@x.test"], "Plain", "<p>x</p>", "x")

    def test_default_sender_from_settings(self):
        from commhub.config import settings

        assert NotificationService().sender == settings.email_sender
