"""
Inbox notification schemas.

The wire format names the sender and recipient ``from`` and ``to``.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from garmentsync.domain.enums import InboxNotificationType
from garmentsync.schemas.common import CamelModel, validate_email


class InboxNotificationResponse(CamelModel):
    id: str
    type: InboxNotificationType
    title: str
    message: str
    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    order_id: Optional[str] = None
    is_read: bool
    email_id: Optional[str] = None
    created_at: datetime


class ReplyRequest(CamelModel):
    """Request schema for replying to an inbox notification."""

    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)
    to: Optional[str] = Field(
        None,
        description="Recipient override; defaults to the notification sender",
    )
    sender_name: Optional[str] = Field(None, max_length=255)

    @field_validator("to")
    @classmethod
    def validate_recipient(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_email(v)


class ReplyResponse(CamelModel):
    notification_id: str
    recipient: str
    delivered: bool = True
