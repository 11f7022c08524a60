"""
Notification dispatcher for stakeholder email.

The dispatcher renders a template and hands one message per recipient to
the configured transport. It offers two delivery paths with different
failure behaviour:

- ``send`` attempts every recipient, then raises
  ``NotificationDeliveryError`` naming the recipients that failed. Used for
  invitations and direct replies, where the caller decides what a failure
  means.
- ``broadcast`` wraps ``send`` and only logs failures. Used for activity
  notifications after an update or comment has already been stored.
"""

import asyncio
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Optional, Sequence

from garmentsync.core.config import Settings, get_settings
from garmentsync.core.logging import get_logger
from garmentsync.domain.enums import ActivityKind, AuthorRole
from garmentsync.domain.models import InboxNotification, Order, Stakeholder
from garmentsync.services.notifications.templates import (
    TemplateEngine,
    TemplateEngineError,
    get_template_engine,
)
from garmentsync.services.notifications.transports import (
    EmailTransport,
    OutgoingEmail,
    TransportError,
    build_transport,
)

logger = get_logger(__name__)


class NotificationServiceError(Exception):
    """Base exception for notification service errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize notification service error.

        Args:
            message: Error message
            **context: Additional error context
        """
        super().__init__(message)
        self.context = context


class NotificationDeliveryError(NotificationServiceError):
    """Exception for notification delivery failures."""

    def __init__(
        self,
        message: str,
        report: Optional["DeliveryReport"] = None,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.report = report


@dataclass
class DeliveryReport:
    """Outcome of delivering one message to a list of recipients."""

    delivered: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


class NotificationDispatcher:
    """
    Renders notification templates and delivers them through a transport.
    """

    def __init__(
        self,
        transport: EmailTransport,
        template_engine: Optional[TemplateEngine] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            transport: Transport delivering individual messages
            template_engine: Engine for email templates
            settings: Supplies the sender address and public application URL
        """
        self.transport = transport
        self.template_engine = template_engine or get_template_engine()
        self.settings = settings or get_settings()

    def order_url(self, order_id: str) -> str:
        return f"{self.settings.app_url}/order/{order_id}"

    async def send(
        self,
        recipients: Sequence[str],
        subject: str,
        html_body: str,
        text_body: str,
        reply_to: Optional[str] = None,
    ) -> DeliveryReport:
        """
        Deliver one message per recipient, sequentially.

        Every recipient is attempted even after a failure.

        Raises:
            NotificationDeliveryError: If any recipient could not be reached
        """
        report = DeliveryReport()

        for recipient in recipients:
            email = OutgoingEmail(
                to=recipient,
                subject=subject,
                html_body=html_body,
                text_body=text_body,
                from_address=self.settings.from_email,
                reply_to=reply_to,
            )
            try:
                await asyncio.to_thread(self.transport.deliver, email)
            except TransportError as e:
                report.failed[recipient] = str(e)
                continue
            report.delivered.append(recipient)

        if report.failed:
            logger.warning(
                "Email delivery failed for some recipients",
                transport=self.transport.name,
                subject=subject,
                delivered=len(report.delivered),
                failed_recipients=list(report.failed),
            )
            raise NotificationDeliveryError(
                f"Failed to deliver email to {len(report.failed)} of "
                f"{report.attempted} recipients",
                report=report,
                failed_recipients=list(report.failed),
            )

        logger.info(
            "Email notifications sent",
            transport=self.transport.name,
            subject=subject,
            recipients=len(report.delivered),
        )
        return report

    async def broadcast(
        self,
        recipients: Sequence[str],
        subject: str,
        html_body: str,
        text_body: str,
    ) -> DeliveryReport:
        """Best-effort ``send``: delivery errors are logged, never raised."""
        try:
            return await self.send(recipients, subject, html_body, text_body)
        except NotificationDeliveryError as e:
            logger.error(
                "Broadcast delivery incomplete",
                error=str(e),
                **e.context,
            )
            return e.report or DeliveryReport()

    async def notify_stakeholders(
        self,
        emails: Sequence[str],
        order: Order,
        kind: ActivityKind,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> DeliveryReport:
        """
        Tell every stakeholder of an order about a new update or comment.

        Best effort: rendering and delivery failures are logged only.
        """
        if not emails:
            return DeliveryReport()

        context = {
            "order_id": order.id,
            "buyer_name": order.buyer_name,
            "style_number": order.style_number,
            "kind": ActivityKind(kind).value,
            "message": message,
            "author_name": author_name,
            "author_role": author_role,
            "order_url": self.order_url(order.id),
        }
        try:
            rendered = self.template_engine.render_email("stakeholder_activity", context)
        except TemplateEngineError as e:
            logger.error(
                "Stakeholder notification not rendered",
                order_id=order.id,
                template_name=e.template_name,
                error=str(e),
            )
            return DeliveryReport(failed={email: str(e) for email in emails})

        return await self.broadcast(
            emails,
            rendered["subject"],
            rendered["html_body"],
            rendered["text_body"],
        )

    async def send_invitation(
        self,
        stakeholder: Stakeholder,
        order: Order,
        inviter_name: Optional[str] = None,
        custom_message: Optional[str] = None,
    ) -> DeliveryReport:
        """
        Invite a stakeholder to collaborate on an order.

        Raises:
            NotificationDeliveryError: If rendering or delivery fails
        """
        rendered = self._render(
            "stakeholder_invitation",
            {
                "name": stakeholder.name,
                "order_id": order.id,
                "buyer_name": order.buyer_name,
                "style_number": order.style_number,
                "estimated_delivery": order.estimated_delivery,
                "role": stakeholder.role,
                "permissions": stakeholder.permissions,
                "inviter_name": inviter_name or self.settings.app_name,
                "custom_message": custom_message,
                "order_url": self.order_url(order.id),
            },
        )
        return await self.send(
            [stakeholder.email],
            rendered["subject"],
            rendered["html_body"],
            rendered["text_body"],
        )

    async def send_reply(
        self,
        notification: InboxNotification,
        recipient: str,
        subject: str,
        message: str,
        sender_name: Optional[str] = None,
    ) -> DeliveryReport:
        """
        Reply to an inbox notification.

        Raises:
            NotificationDeliveryError: If rendering or delivery fails
        """
        rendered = self._render(
            "notification_reply",
            {
                "subject": subject,
                "message": message,
                "sender_name": sender_name or notification.recipient,
                "original_title": notification.title,
                "order_id": notification.order_id,
                "order_url": (
                    self.order_url(notification.order_id)
                    if notification.order_id
                    else None
                ),
            },
        )
        return await self.send(
            [recipient],
            rendered["subject"],
            rendered["html_body"],
            rendered["text_body"],
            reply_to=notification.recipient,
        )

    def _render(self, template_name: str, context: dict[str, Any]) -> dict[str, str]:
        try:
            return self.template_engine.render_email(template_name, context)
        except TemplateEngineError as e:
            raise NotificationDeliveryError(
                f"Failed to render email template: {str(e)}",
                template_name=template_name,
            ) from e


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    """Process-wide dispatcher using the configured transport."""
    return NotificationDispatcher(transport=build_transport())
