"""
Stakeholder schemas, including the bulk invite request and its report.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from garmentsync.domain.enums import Permission, StakeholderRole
from garmentsync.schemas.common import CamelModel, validate_email


class StakeholderCreateRequest(CamelModel):
    """Request schema for inviting a single stakeholder."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    role: Optional[StakeholderRole] = Field(
        None,
        description="Defaults to buyer_employee",
    )
    permissions: Optional[Permission] = Field(
        None,
        description="Defaults to read",
    )
    inviter_name: Optional[str] = Field(
        None,
        max_length=255,
        description="Name shown as the sender of the invitation",
    )
    message: Optional[str] = Field(
        None,
        max_length=2000,
        description="Custom note included in the invitation",
    )

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate email format."""
        return validate_email(v)


class PermissionsUpdateRequest(CamelModel):
    permissions: Permission


class BulkInviteRequest(CamelModel):
    """Request schema for inviting many stakeholders at once."""

    email_list: str = Field(
        ...,
        min_length=1,
        description="Email addresses separated by commas or newlines",
    )
    default_role: Optional[StakeholderRole] = None
    default_permissions: Optional[Permission] = None
    message: Optional[str] = Field(None, max_length=2000)
    inviter_name: Optional[str] = Field(None, max_length=255)


class StakeholderResponse(CamelModel):
    id: str
    order_id: str
    name: str
    email: str
    role: StakeholderRole
    permissions: Permission
    created_at: datetime
    updated_at: datetime


class InviteOutcome(str, Enum):
    """Per-address result of a bulk invite."""

    SUCCESS = "success"
    EXISTS = "exists"
    INVALID = "invalid"
    ERROR = "error"


class BulkInviteResultItem(CamelModel):
    email: str
    status: InviteOutcome
    name: Optional[str] = None
    stakeholder_id: Optional[str] = None
    error: Optional[str] = None


class BulkInviteResponse(CamelModel):
    """Aggregate report of a bulk invite."""

    total_processed: int = Field(..., ge=0)
    added_count: int = Field(..., ge=0, description="Stakeholders persisted")
    success_count: int = Field(
        ..., ge=0, description="Stakeholders persisted and notified"
    )
    results: list[BulkInviteResultItem] = Field(default_factory=list)
