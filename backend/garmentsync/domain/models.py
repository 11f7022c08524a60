"""
Domain records for orders and their collaboration thread.

Records are plain dataclasses shared by every storage backend. Identity
fields are strings: orders carry a caller-supplied id, every other record
gets a generated uuid4 string. Timestamps are timezone-aware UTC.

Default values for optional inputs are chosen in exactly one place per
entity (``apply_order_defaults`` and ``apply_stakeholder_defaults``), which
storage backends call inside ``create``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from garmentsync.domain.enums import (
    AuthorRole,
    InboxNotificationType,
    MediaCategory,
    OrderStatus,
    Permission,
    StakeholderRole,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Defaulting
# ---------------------------------------------------------------------------

DEFAULT_ORDER_STATUS = OrderStatus.RECEIVED
DEFAULT_STAKEHOLDER_ROLE = StakeholderRole.BUYER_EMPLOYEE
DEFAULT_STAKEHOLDER_PERMISSIONS = Permission.READ


def apply_order_defaults(status: Optional[str]) -> str:
    """Return the status to store for a new order."""
    if status is None or status == "":
        return DEFAULT_ORDER_STATUS.value
    return status


def apply_stakeholder_defaults(
    role: Optional[StakeholderRole | str],
    permissions: Optional[Permission | str],
) -> Tuple[StakeholderRole, Permission]:
    """Return the role and permission level to store for a new stakeholder."""
    resolved_role = StakeholderRole(role) if role else DEFAULT_STAKEHOLDER_ROLE
    resolved_permissions = (
        Permission(permissions) if permissions else DEFAULT_STAKEHOLDER_PERMISSIONS
    )
    return resolved_role, resolved_permissions


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class Order:
    """A manufacturing job tracked from receipt to delivery."""
    id: str
    buyer_name: str
    style_number: str
    quantity: int
    estimated_delivery: datetime
    buyer_email: str
    status: str
    created_at: datetime
    updated_at: datetime


@dataclass
class OrderEntry:
    """Shared shape of updates and comments."""
    id: str
    order_id: str           # logical FK → Order.id
    message: str
    author_name: str
    author_role: AuthorRole
    created_at: datetime


@dataclass
class Update(OrderEntry):
    """A status note on an order. Listed newest first."""


@dataclass
class Comment(OrderEntry):
    """A buyer or manufacturer remark on an order. Listed oldest first."""


@dataclass
class Stakeholder:
    """A named collaborator attached to one order."""
    id: str
    order_id: str           # logical FK → Order.id
    name: str
    email: str
    role: StakeholderRole
    permissions: Permission
    created_at: datetime
    updated_at: datetime


@dataclass
class MediaFile:
    """Metadata for a file attached to an order."""
    id: str
    order_id: str
    filename: str
    original_name: str
    size: int
    mime_type: str
    url: str
    category: MediaCategory
    uploaded_by: str
    uploaded_at: datetime
    description: Optional[str] = None


@dataclass
class InboxNotification:
    """An entry in the notification inbox."""
    id: str
    type: InboxNotificationType
    title: str
    message: str
    sender: str
    recipient: str
    is_read: bool
    created_at: datetime
    order_id: Optional[str] = None
    email_id: Optional[str] = None
