"""
Relational tables for the SQL storage backend.

Each row class maps onto one domain record and converts itself with
``to_domain``. ``order_id`` columns are indexed but deliberately carry no
foreign key constraint: orders, updates, comments and stakeholders are
linked logically and orphans are allowed.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from garmentsync.database.base import (
    Base,
    CreatedAtMixin,
    GeneratedIdMixin,
    TimestampMixin,
)
from garmentsync.domain.enums import (
    AuthorRole,
    InboxNotificationType,
    MediaCategory,
    Permission,
    StakeholderRole,
)
from garmentsync.domain.models import (
    Comment,
    InboxNotification,
    MediaFile,
    Order,
    Stakeholder,
    Update,
)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OrderRow(Base, TimestampMixin):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    buyer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    style_number: Mapped[str] = mapped_column(String(100), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_delivery: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    buyer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    # Free-form label; recognized values live in OrderStatus.
    status: Mapped[str] = mapped_column(String(50), nullable=False)

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            buyer_name=self.buyer_name,
            style_number=self.style_number,
            quantity=self.quantity,
            estimated_delivery=_aware(self.estimated_delivery),
            buyer_email=self.buyer_email,
            status=self.status,
            created_at=_aware(self.created_at),
            updated_at=_aware(self.updated_at),
        )


class _EntryColumns(GeneratedIdMixin, CreatedAtMixin):
    order_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_role: Mapped[str] = mapped_column(String(20), nullable=False)


class UpdateRow(Base, _EntryColumns):
    __tablename__ = "order_updates"

    def to_domain(self) -> Update:
        return Update(
            id=self.id,
            order_id=self.order_id,
            message=self.message,
            author_name=self.author_name,
            author_role=AuthorRole(self.author_role),
            created_at=_aware(self.created_at),
        )


class CommentRow(Base, _EntryColumns):
    __tablename__ = "order_comments"

    def to_domain(self) -> Comment:
        return Comment(
            id=self.id,
            order_id=self.order_id,
            message=self.message,
            author_name=self.author_name,
            author_role=AuthorRole(self.author_role),
            created_at=_aware(self.created_at),
        )


class StakeholderRow(Base, GeneratedIdMixin, TimestampMixin):
    __tablename__ = "stakeholders"
    __table_args__ = (
        Index("ix_stakeholders_order_id_email", "order_id", "email"),
    )

    order_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    permissions: Mapped[str] = mapped_column(String(16), nullable=False)

    def to_domain(self) -> Stakeholder:
        return Stakeholder(
            id=self.id,
            order_id=self.order_id,
            name=self.name,
            email=self.email,
            role=StakeholderRole(self.role),
            permissions=Permission(self.permissions),
            created_at=_aware(self.created_at),
            updated_at=_aware(self.updated_at),
        )


class MediaFileRow(Base, GeneratedIdMixin):
    __tablename__ = "media_files"

    order_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uploaded_by: Mapped[str] = mapped_column(String(255), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> MediaFile:
        return MediaFile(
            id=self.id,
            order_id=self.order_id,
            filename=self.filename,
            original_name=self.original_name,
            size=self.size,
            mime_type=self.mime_type,
            url=self.url,
            category=MediaCategory(self.category),
            uploaded_by=self.uploaded_by,
            uploaded_at=_aware(self.uploaded_at),
            description=self.description,
        )


class InboxNotificationRow(Base, GeneratedIdMixin, CreatedAtMixin):
    __tablename__ = "inbox_notifications"

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient: Mapped[str] = mapped_column(String(255), nullable=False)
    order_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def to_domain(self) -> InboxNotification:
        return InboxNotification(
            id=self.id,
            type=InboxNotificationType(self.type),
            title=self.title,
            message=self.message,
            sender=self.sender,
            recipient=self.recipient,
            is_read=self.is_read,
            created_at=_aware(self.created_at),
            order_id=self.order_id,
            email_id=self.email_id,
        )
