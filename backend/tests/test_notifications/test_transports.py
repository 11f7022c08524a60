"""
Tests for outbound email transports with mocked SMTP and SES clients.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from garmentsync.core.config import Settings
from garmentsync.services.notifications.transports import (
    ConsoleTransport,
    OutgoingEmail,
    SESTransport,
    SMTPTransport,
    TransportError,
    build_transport,
)


@pytest.fixture
def email() -> OutgoingEmail:
    return OutgoingEmail(
        to="jo@x.com",
        subject="Order PO-1 - New update",
        html_body="<p>Cutting started</p>",
        text_body="Cutting started",
        from_address="noreply@ordertracker.com",
        reply_to="sarah@factory.com",
    )


# ============================================================================
# SMTP
# ============================================================================


class TestSMTPTransport:
    @patch("garmentsync.services.notifications.transports.smtplib.SMTP")
    def test_deliver_uses_starttls_and_login(self, mock_smtp, email):
        client = mock_smtp.return_value.__enter__.return_value
        transport = SMTPTransport(
            host="smtp.example.com", port=587, username="user", password="secret"
        )

        message_id = transport.deliver(email)

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=30.0)
        client.starttls.assert_called_once()
        client.login.assert_called_once_with("user", "secret")
        sent = client.send_message.call_args.args[0]
        assert sent["To"] == "jo@x.com"
        assert sent["Reply-To"] == "sarah@factory.com"
        assert message_id.endswith("@ordertracker.com>")

    @patch("garmentsync.services.notifications.transports.smtplib.SMTP")
    def test_deliver_without_credentials_skips_login(self, mock_smtp, email):
        client = mock_smtp.return_value.__enter__.return_value

        SMTPTransport(host="localhost", port=25, use_tls=False).deliver(email)

        client.starttls.assert_not_called()
        client.login.assert_not_called()

    @patch("garmentsync.services.notifications.transports.smtplib.SMTP")
    def test_smtp_error_becomes_transport_error(self, mock_smtp, email):
        client = mock_smtp.return_value.__enter__.return_value
        client.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

        with pytest.raises(TransportError) as exc_info:
            SMTPTransport(host="localhost", port=25).deliver(email)

        assert exc_info.value.transport == "smtp"
        assert exc_info.value.context["recipient"] == "jo@x.com"

    @patch("garmentsync.services.notifications.transports.smtplib.SMTP")
    def test_connection_error_becomes_transport_error(self, mock_smtp, email):
        mock_smtp.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(TransportError):
            SMTPTransport(host="localhost", port=25).deliver(email)


# ============================================================================
# SES
# ============================================================================


class TestSESTransport:
    def test_deliver_returns_message_id(self, email):
        client = MagicMock()
        client.send_email.return_value = {"MessageId": "ses-123"}
        transport = SESTransport(region_name="us-east-1", client=client)

        assert transport.deliver(email) == "ses-123"

        params = client.send_email.call_args.kwargs
        assert params["Destination"] == {"ToAddresses": ["jo@x.com"]}
        assert params["ReplyToAddresses"] == ["sarah@factory.com"]
        assert params["Message"]["Body"]["Text"]["Data"] == "Cutting started"

    def test_client_error_becomes_transport_error(self, email):
        client = MagicMock()
        client.send_email.side_effect = ClientError(
            {"Error": {"Code": "MessageRejected", "Message": "Address blacklisted"}},
            "SendEmail",
        )

        with pytest.raises(TransportError) as exc_info:
            SESTransport(region_name="us-east-1", client=client).deliver(email)

        assert exc_info.value.context["error_code"] == "MessageRejected"

    def test_connection_error_becomes_transport_error(self, email):
        client = MagicMock()
        client.send_email.side_effect = EndpointConnectionError(
            endpoint_url="https://email.us-east-1.amazonaws.com"
        )

        with pytest.raises(TransportError):
            SESTransport(region_name="us-east-1", client=client).deliver(email)


# ============================================================================
# Console and selection
# ============================================================================


class TestTransportSelection:
    def test_console_transport_returns_id(self, email):
        assert ConsoleTransport().deliver(email)

    def test_build_console(self):
        transport = build_transport(Settings(email_backend="console"))

        assert isinstance(transport, ConsoleTransport)

    def test_build_smtp_from_settings(self):
        transport = build_transport(
            Settings(email_backend="smtp", smtp_host="mail.local", smtp_port=2525)
        )

        assert isinstance(transport, SMTPTransport)
        assert transport.host == "mail.local"
        assert transport.port == 2525

    @patch("garmentsync.services.notifications.transports.boto3.client")
    def test_build_ses_from_settings(self, mock_client):
        transport = build_transport(
            Settings(email_backend="ses", aws_region="eu-west-1")
        )

        assert isinstance(transport, SESTransport)
        assert mock_client.call_args.kwargs["region_name"] == "eu-west-1"
