"""
Inbox service for notification entries.

Replying sends one email through the dispatcher's error-propagating path:
unlike stakeholder broadcasts, a failed reply is reported to the caller.
"""

from typing import Any, Optional

from garmentsync.core.logging import get_logger
from garmentsync.domain.models import InboxNotification
from garmentsync.repositories.base import Storage
from garmentsync.services.notifications.service import NotificationDispatcher

logger = get_logger(__name__)


class InboxServiceError(Exception):
    """Base exception for inbox service errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class NotificationNotFoundError(InboxServiceError):
    """Raised when an inbox notification is not found."""

    pass


class InboxService:
    def __init__(self, storage: Storage, dispatcher: NotificationDispatcher):
        self.storage = storage
        self.dispatcher = dispatcher

    async def list_notifications(self) -> list[InboxNotification]:
        return await self.storage.notifications.list_all()

    async def get_notification(self, notification_id: str) -> InboxNotification:
        notification = await self.storage.notifications.get_by_id(notification_id)
        if notification is None:
            raise NotificationNotFoundError(
                f"Notification {notification_id} not found",
                notification_id=notification_id,
            )
        return notification

    async def mark_read(self, notification_id: str) -> InboxNotification:
        """
        Raises:
            NotificationNotFoundError: If notification not found
        """
        notification = await self.storage.notifications.update(
            notification_id, is_read=True
        )
        if notification is None:
            raise NotificationNotFoundError(
                f"Notification {notification_id} not found",
                notification_id=notification_id,
            )
        return notification

    async def reply(
        self,
        notification_id: str,
        subject: str,
        message: str,
        to: Optional[str] = None,
        sender_name: Optional[str] = None,
    ) -> str:
        """
        Email a reply to the sender of a notification and mark it read.

        Returns:
            The address the reply went to

        Raises:
            NotificationNotFoundError: If notification not found
            NotificationDeliveryError: If the email could not be delivered
        """
        notification = await self.get_notification(notification_id)
        recipient = to or notification.sender

        await self.dispatcher.send_reply(
            notification,
            recipient=recipient,
            subject=subject,
            message=message,
            sender_name=sender_name,
        )
        await self.storage.notifications.update(notification_id, is_read=True)

        logger.info(
            "Notification reply sent",
            notification_id=notification_id,
            recipient=recipient,
        )
        return recipient
