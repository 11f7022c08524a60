"""
Outbound email transports.

Each transport delivers one message to one recipient and raises
``TransportError`` when delivery fails. Transports are synchronous; the
dispatcher runs them in a worker thread so the event loop is never blocked.

Three transports are available, selected by ``APP_EMAIL_BACKEND``:

- ``SMTPTransport``: any SMTP relay, with optional STARTTLS and login.
- ``SESTransport``: AWS SES through boto3.
- ``ConsoleTransport``: writes the message to the log only.
"""

import abc
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from garmentsync.core.config import Settings, get_settings
from garmentsync.core.logging import get_logger
from garmentsync.domain.models import new_id

logger = get_logger(__name__)


class TransportError(Exception):
    """Raised when a transport cannot deliver a message."""

    def __init__(self, message: str, transport: str, **context: Any) -> None:
        super().__init__(message)
        self.transport = transport
        self.context = context


@dataclass(frozen=True)
class OutgoingEmail:
    """A rendered message addressed to a single recipient."""

    to: str
    subject: str
    html_body: str
    text_body: str
    from_address: str
    reply_to: Optional[str] = None


class EmailTransport(abc.ABC):
    """Delivers one message; returns a provider message id."""

    name: str = "abstract"

    @abc.abstractmethod
    def deliver(self, email: OutgoingEmail) -> str: ...


class SMTPTransport(EmailTransport):
    """
    SMTP relay transport. Opens a fresh connection per message.
    """

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, email: OutgoingEmail) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = email.subject
        message["From"] = email.from_address
        message["To"] = email.to
        if email.reply_to:
            message["Reply-To"] = email.reply_to
        message["Message-ID"] = f"<{new_id()}@{email.from_address.split('@')[-1]}>"
        message.set_content(email.text_body)
        message.add_alternative(email.html_body, subtype="html")
        return message

    def deliver(self, email: OutgoingEmail) -> str:
        message = self._build_message(email)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
                if self.use_tls:
                    client.starttls()
                if self.username and self.password:
                    client.login(self.username, self.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "SMTP delivery failed",
                host=self.host,
                port=self.port,
                recipient=email.to,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(
                f"SMTP delivery to {email.to} failed: {e}",
                transport=self.name,
                recipient=email.to,
            ) from e

        logger.debug("Email sent via SMTP", recipient=email.to, host=self.host)
        return message["Message-ID"]


class SESTransport(EmailTransport):
    """AWS SES transport."""

    name = "ses"

    def __init__(
        self,
        region_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self._client = client or boto3.client(
            "ses",
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region_name,
        )
        logger.info("SES transport initialized", region=region_name)

    def deliver(self, email: OutgoingEmail) -> str:
        send_params: dict[str, Any] = {
            "Source": email.from_address,
            "Destination": {"ToAddresses": [email.to]},
            "Message": {
                "Subject": {"Data": email.subject, "Charset": "UTF-8"},
                "Body": {
                    "Text": {"Data": email.text_body, "Charset": "UTF-8"},
                    "Html": {"Data": email.html_body, "Charset": "UTF-8"},
                },
            },
        }
        if email.reply_to:
            send_params["ReplyToAddresses"] = [email.reply_to]

        try:
            response = self._client.send_email(**send_params)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                "SES client error",
                error_code=error_code,
                recipient=email.to,
                error=str(e),
            )
            raise TransportError(
                f"SES rejected message to {email.to}: {error_code}",
                transport=self.name,
                recipient=email.to,
                error_code=error_code,
            ) from e
        except BotoCoreError as e:
            logger.error(
                "SES connection error",
                recipient=email.to,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(
                f"SES delivery to {email.to} failed: {e}",
                transport=self.name,
                recipient=email.to,
            ) from e

        message_id = response["MessageId"]
        logger.debug("Email sent via SES", recipient=email.to, message_id=message_id)
        return message_id


class ConsoleTransport(EmailTransport):
    """Logs messages instead of sending them."""

    name = "console"

    def deliver(self, email: OutgoingEmail) -> str:
        message_id = new_id()
        logger.info(
            "Email (console transport)",
            message_id=message_id,
            recipient=email.to,
            subject=email.subject,
            body=email.text_body,
        )
        return message_id


def build_transport(settings: Optional[Settings] = None) -> EmailTransport:
    """Create the transport selected by configuration."""
    settings = settings or get_settings()

    if settings.email_backend == "ses":
        return SESTransport(
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
    if settings.email_backend == "console":
        return ConsoleTransport()
    return SMTPTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout,
    )
