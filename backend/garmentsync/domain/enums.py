"""Order lifecycle, authorship, stakeholder and media enums.

This module defines the recognized values for order status, update/comment
authorship, stakeholder roles and permission levels, media categories and
inbox notification types.
"""

from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """Recognized order lifecycle labels.

    The lifecycle reads received -> in_production -> quality_check ->
    shipped -> delivered, but no transition order is enforced: an order's
    status is stored as a free-form string and any value may follow any
    other.
    """

    RECEIVED = "received"
    IN_PRODUCTION = "in_production"
    QUALITY_CHECK = "quality_check"
    SHIPPED = "shipped"
    DELIVERED = "delivered"

    @classmethod
    def is_recognized(cls, value: str) -> bool:
        """Check whether a stored status string is one of the known labels."""
        return value in {s.value for s in cls}

    @classmethod
    def suggested_next(cls, value: str) -> Optional["OrderStatus"]:
        """Suggest the following lifecycle label for UI convenience.

        Returns None for delivered orders and for unrecognized labels.
        """
        if not cls.is_recognized(value):
            return None
        ordered = list(cls)
        index = ordered.index(cls(value))
        if index + 1 >= len(ordered):
            return None
        return ordered[index + 1]


class AuthorRole(str, Enum):
    """Who wrote an update or comment."""

    MANUFACTURER = "manufacturer"
    BUYER = "buyer"


class StakeholderRole(str, Enum):
    """Role of a collaborator invited to an order."""

    ADMIN = "admin"
    FACTORY_OWNER = "factory_owner"
    FACTORY_MANAGER = "factory_manager"
    BUYER = "buyer"
    BUYER_EMPLOYEE = "buyer_employee"


class Permission(str, Enum):
    """Stakeholder permission level.

    Levels nest as read < comment < update. Storage does not enforce the
    ordering; it is metadata for clients.
    """

    READ = "read"
    COMMENT = "comment"
    UPDATE = "update"


class MediaCategory(str, Enum):
    """Category of an order media file."""

    PRODUCT_PHOTOS = "product_photos"
    TECHNICAL_DRAWINGS = "technical_drawings"
    SPECIFICATIONS = "specifications"
    SAMPLES = "samples"
    OTHER = "other"


class InboxNotificationType(str, Enum):
    """Kind of entry shown in the notification inbox."""

    EMAIL = "email"
    SYSTEM = "system"
    ORDER_UPDATE = "order_update"


class ActivityKind(str, Enum):
    """Kind of order activity broadcast to stakeholders."""

    UPDATE = "update"
    COMMENT = "comment"
