"""
Order Pydantic schemas for API request/response validation.

This module defines the order creation and status change payloads, the
order representations returned by the API, and the dashboard summary.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from garmentsync.schemas.collaboration import CommentResponse, UpdateResponse
from garmentsync.schemas.common import CamelModel, ensure_utc, validate_email
from garmentsync.schemas.stakeholders import StakeholderResponse


class OrderCreateRequest(CamelModel):
    """Request schema for creating an order."""

    id: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Caller-supplied order identifier, e.g. PO-2024-001",
    )
    buyer_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Buyer company name",
    )
    style_number: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Garment style number",
    )
    quantity: int = Field(
        ...,
        gt=0,
        description="Number of units ordered",
    )
    estimated_delivery: datetime = Field(
        ...,
        description="Estimated delivery date (ISO-8601)",
    )
    buyer_email: str = Field(
        ...,
        min_length=3,
        max_length=255,
        description="Buyer contact email",
    )
    status: Optional[str] = Field(
        None,
        max_length=50,
        description="Initial status; defaults to received",
    )

    @field_validator("buyer_email")
    @classmethod
    def validate_buyer_email(cls, v: str) -> str:
        """Validate email format."""
        return validate_email(v)

    @field_validator("estimated_delivery")
    @classmethod
    def normalize_estimated_delivery(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class OrderStatusUpdateRequest(CamelModel):
    """Request schema for changing an order's status.

    Any non-empty label is accepted; there is no transition graph.
    """

    status: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="New status label",
    )


class OrderResponse(CamelModel):
    """Response schema for an order."""

    id: str
    buyer_name: str
    style_number: str
    quantity: int
    estimated_delivery: datetime
    buyer_email: str
    status: str
    created_at: datetime
    updated_at: datetime


class OrderDetailResponse(OrderResponse):
    """Order with its collaboration thread embedded."""

    updates: list[UpdateResponse] = Field(
        default_factory=list,
        description="Status updates, newest first",
    )
    comments: list[CommentResponse] = Field(
        default_factory=list,
        description="Comments, oldest first",
    )
    stakeholders: list[StakeholderResponse] = Field(
        default_factory=list,
        description="Stakeholders, oldest first",
    )
    next_status: Optional[str] = Field(
        None,
        description="Suggested following lifecycle status, for UI convenience only",
    )


class DashboardStatsResponse(CamelModel):
    """Summary counters shown on the dashboard."""

    total_orders: int = Field(..., ge=0)
    active_orders: int = Field(..., ge=0, description="Orders not yet delivered")
    completed_orders: int = Field(..., ge=0, description="Delivered orders")
    pending_updates: int = Field(
        ..., ge=0, description="Active orders without any status update"
    )
    messages_today: int = Field(
        ..., ge=0, description="Updates and comments posted since midnight UTC"
    )
    total_stakeholders: int = Field(..., ge=0)
    status_counts: dict[str, int] = Field(default_factory=dict)
