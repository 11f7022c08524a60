"""Stakeholder email: templates, transports and the dispatcher."""

from garmentsync.services.notifications.service import (
    DeliveryReport,
    NotificationDeliveryError,
    NotificationDispatcher,
    NotificationServiceError,
    get_notification_dispatcher,
)

__all__ = [
    "DeliveryReport",
    "NotificationDeliveryError",
    "NotificationDispatcher",
    "NotificationServiceError",
    "get_notification_dispatcher",
]
